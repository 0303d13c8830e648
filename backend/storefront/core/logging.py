import json
import logging
import re
import sys
from datetime import datetime, timezone

from storefront.api.middleware.request_id import request_id_var
from storefront.core.config import settings

# Substrings; matched against lower-cased extra keys.
_SENSITIVE_KEYS = ("secret", "token", "api_key", "authorization", "password")
_MASK = "********"
# Printify auth travels as a Bearer token and can surface in httpx error text.
_BEARER_RE = re.compile(r"(Bearer\s+)[A-Za-z0-9\-_.~+/=]+", re.IGNORECASE)
_CONTEXT_KEYS = ("request_id", "shop_id")
_RESERVED_KEYS = (
    set(logging.LogRecord("", 0, "", 0, "", (), None).__dict__)
    | {"message", "asctime", *_CONTEXT_KEYS}
)


def _mask_sensitive(data: dict) -> dict:
    masked = {}
    for key, value in data.items():
        if any(s in key.lower() for s in _SENSITIVE_KEYS):
            masked[key] = _MASK
        elif isinstance(value, dict):
            masked[key] = _mask_sensitive(value)
        else:
            masked[key] = value
    return masked


def scrub_bearer(text: str) -> str:
    return _BEARER_RE.sub(rf"\g<1>{_MASK}", text)


class StorefrontContextFilter(logging.Filter):
    """Stamp each record with the current request id and the Printify shop."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", ""):
            record.request_id = request_id_var.get("")
        if not getattr(record, "shop_id", ""):
            record.shop_id = settings.printify_shop_id
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line.

    Context set by ``StorefrontContextFilter`` is promoted to top-level keys;
    anything else passed through ``extra=`` is nested under ``extra`` with
    credential-looking keys masked.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": scrub_bearer(record.getMessage()),
        }
        for key in _CONTEXT_KEYS:
            value = getattr(record, key, "")
            if value:
                entry[key] = value
        if record.levelno >= logging.WARNING:
            entry["location"] = f"{record.module}:{record.funcName}:{record.lineno}"
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = scrub_bearer(self.formatException(record.exc_info))
        extra = {k: v for k, v in record.__dict__.items() if k not in _RESERVED_KEYS}
        if extra:
            entry["extra"] = _mask_sensitive(extra)
        return json.dumps(entry, default=str)


def setup_logging(level: int | None = None) -> None:
    """Send JSON logs to stdout. Defaults to DEBUG when ``settings.debug`` is on."""
    if level is None:
        level = logging.DEBUG if settings.debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(StorefrontContextFilter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    # Printify request lines are already covered by our own client logs
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
