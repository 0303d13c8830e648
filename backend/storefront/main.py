import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront.core.logging import setup_logging

setup_logging()

from storefront.api.middleware.cors import setup_cors
from storefront.api.middleware.request_id import RequestIdMiddleware
from storefront.api.routes import cart, health, products
from storefront.core.config import settings
from storefront.services.cart_service import CartStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    app.state.cart_store = CartStore(max_quantity=settings.max_cart_quantity)
    if not settings.printify_configured:
        logger.warning("Printify is not configured; the catalog will serve sample products")
    else:
        logger.info("Serving catalog for Printify shop %s", settings.printify_shop_id)
    yield
    app.state.cart_store.clear()


app = FastAPI(
    title=f"{settings.shop_title} API",
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan,
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )

setup_cors(app)
app.add_middleware(RequestIdMiddleware)

app.include_router(health.router, prefix="/api")
app.include_router(products.router, prefix="/api")
app.include_router(cart.router, prefix="/api")
