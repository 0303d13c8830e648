from urllib.parse import urlparse

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.core.config import settings


def _check_origin(origin: str) -> str:
    parsed = urlparse(origin)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"Invalid CORS origin: {origin!r}")
    return origin


def setup_cors(app: FastAPI) -> None:
    """Storefront frontends may read the catalog and manage the cart."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[_check_origin(o) for o in settings.cors_origins_list],
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=600,
    )
