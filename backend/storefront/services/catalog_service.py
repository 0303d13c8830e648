import logging

from storefront.core.exceptions import InvalidCatalogResponseError, UpstreamNotConfiguredError
from storefront.integrations.printify.client import PrintifyClientProtocol, get_shop_config
from storefront.mappers.product import transform_product, transform_response
from storefront.models.dto.product import CatalogResponse, Product
from storefront.services.fallback_catalog import (
    collect_categories,
    get_fallback_product,
    get_fallback_products,
)

logger = logging.getLogger(__name__)


def fallback_response(shop_id: str, reason: str) -> CatalogResponse:
    products = get_fallback_products()
    config = get_shop_config(shop_id)
    return CatalogResponse(
        data=products,
        current_page=1,
        last_page=1,
        total=len(products),
        shop_id=shop_id,
        shop_title=config.title,
        sales_channel=config.sales_channel,
        is_mock_data=True,
        fallback_reason=reason,
        categories=collect_categories(products),
    )


async def get_catalog(client: PrintifyClientProtocol, page: int = 1) -> CatalogResponse:
    """Current catalog page from Printify, or the full sample catalog.

    Never a mix of the two. One upstream call, no retries.
    """
    if not client.is_configured:
        logger.warning("Printify credentials missing, serving sample catalog")
        return fallback_response(client.shop_id, str(UpstreamNotConfiguredError()))

    # Any upstream failure means sample data, never an error page.
    try:
        payload = await client.get_products(page=page)
    except Exception as e:
        logger.exception("Printify catalog unavailable, serving sample catalog")
        return fallback_response(client.shop_id, str(e) or type(e).__name__)

    try:
        catalog = transform_response(payload)
    except InvalidCatalogResponseError as e:
        logger.warning("Printify catalog rejected (%s), serving sample catalog", e)
        return fallback_response(client.shop_id, str(e))

    config = get_shop_config(client.shop_id)
    logger.info(
        "Loaded %d products from Printify shop %s (page %d/%d)",
        len(catalog.data), client.shop_id, catalog.current_page, catalog.last_page,
    )
    return CatalogResponse(
        data=catalog.data,
        current_page=catalog.current_page,
        last_page=catalog.last_page,
        total=catalog.total,
        shop_id=client.shop_id,
        shop_title=config.title,
        sales_channel=config.sales_channel,
        categories=collect_categories(catalog.data),
    )


async def get_product(client: PrintifyClientProtocol, product_id: str) -> Product | None:
    """Single product from Printify, falling back to the sample product with that id."""
    if not client.is_configured:
        return get_fallback_product(product_id)

    try:
        raw = await client.get_product(product_id)
    except Exception:
        logger.exception("Printify product %s unavailable, trying sample catalog", product_id)
        return get_fallback_product(product_id)

    if raw is None:
        return get_fallback_product(product_id)
    return transform_product(raw)
