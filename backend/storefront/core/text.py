"""Text cleanup for upstream catalog data.

Printify hands back option values in whatever shape the print provider
uploaded: plain strings, ``{"id": 12, "title": "Red"}`` objects, lists, or
JSON that was stringified on the way in. Everything here turns those into
short display strings and never raises.
"""
import json
import re
from collections.abc import Iterable, Mapping
from typing import Any, Union

OptionValue = Union[str, int, float, bool, Mapping[str, Any], list[Any], tuple[Any, ...], None]

OPTION_FALLBACK = "Option"

_DISPLAY_KEYS = ("name", "title", "label", "value", "text")

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_HTML_ENTITIES = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
)

_CLEANUP_PATTERNS = (
    (re.compile(r"^\{.*\}$"), ""),
    (re.compile(r"^\[.*\]$"), ""),
    (re.compile(r"\bid:\s*\d+", re.IGNORECASE), ""),
    (re.compile(r"\{[^}]*\}"), ""),
    (re.compile(r"\[[^\]]*\]"), ""),
    (re.compile(r"[{}\[\]\"'`]"), ""),
    (re.compile(r"[,;:|]+"), " "),
    (_WHITESPACE_RE, " "),
)


def strip_html(text: str | None) -> str:
    """Remove tags, decode the common named entities and collapse whitespace."""
    if not text or not isinstance(text, str):
        return ""
    cleaned = _TAG_RE.sub("", text)
    for entity, replacement in _HTML_ENTITIES:
        cleaned = cleaned.replace(entity, replacement)
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def truncate_text(text: str | None, max_length: int = 200) -> str:
    cleaned = strip_html(text)
    if len(cleaned) <= max_length:
        return cleaned

    truncated = cleaned[:max_length]
    last_space = truncated.rfind(" ")
    if last_space > max_length * 0.8:
        return truncated[:last_space] + "..."
    return truncated + "..."


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def _first_string(values: Iterable[Any]) -> str | None:
    for item in values:
        if isinstance(item, str) and item.strip():
            return item.strip()
    return None


def _strip_json_punctuation(raw: str) -> str:
    cleaned = raw
    for pattern, replacement in _CLEANUP_PATTERNS:
        cleaned = pattern.sub(replacement, cleaned)
    return cleaned.strip()


def _dump(value: Any) -> str:
    try:
        return json.dumps(value, default=str)
    except (TypeError, ValueError):
        return str(value)


def _decode_json(value: str) -> Any:
    try:
        return json.loads(value)
    except ValueError:
        return None


def clean_option_value(value: OptionValue) -> str:
    """Turn any upstream option value into a display string.

    ``None`` maps to ``""``. Anything that cannot be reduced to readable text
    comes back as ``OPTION_FALLBACK`` so callers can filter it out.
    """
    if value is None:
        return ""

    if isinstance(value, str):
        if "{" not in value and "[" not in value:
            return value.strip()
        decoded = _decode_json(value)
        if isinstance(decoded, (dict, list)):
            return clean_option_value(decoded)
        raw = value
    elif isinstance(value, Mapping):
        for key in _DISPLAY_KEYS:
            candidate = value.get(key)
            if isinstance(candidate, str) and candidate.strip():
                return candidate.strip()
        first = _first_string(value.values())
        if first:
            return first
        raw = _dump(value)
    elif isinstance(value, (list, tuple)):
        scalars = [str(item).strip() for item in value if _is_scalar(item)]
        scalars = [s for s in scalars if s]
        if scalars:
            return ", ".join(scalars)
        raw = _dump(value)
    else:
        raw = str(value)

    cleaned = _strip_json_punctuation(raw)
    if not cleaned or cleaned in ("[object Object]", "object Object"):
        return OPTION_FALLBACK
    return cleaned
