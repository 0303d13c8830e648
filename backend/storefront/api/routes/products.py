from fastapi import APIRouter, Depends, Query

from storefront.api.dependencies.printify import get_printify_client
from storefront.core.exceptions import NotFoundError
from storefront.core.pricing import format_price
from storefront.integrations.printify.client import PrintifyClientProtocol
from storefront.models.dto.product import (
    CatalogResponse,
    ColorMappingResponse,
    Product,
    ProductViewState,
    VariantResolutionResponse,
    VariantSelection,
    ViewStateChange,
)
from storefront.services import catalog_service, variant_service
from storefront.services.color_mapping import build_color_mapping, get_color_options

router = APIRouter(prefix="/products", tags=["products"])


async def _require_product(client: PrintifyClientProtocol, product_id: str) -> Product:
    product = await catalog_service.get_product(client, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product


@router.get("", response_model=CatalogResponse)
async def list_products(
    page: int = Query(1, ge=1),
    client: PrintifyClientProtocol = Depends(get_printify_client),
):
    return await catalog_service.get_catalog(client, page=page)


@router.get("/{product_id}", response_model=Product)
async def get_product(
    product_id: str,
    client: PrintifyClientProtocol = Depends(get_printify_client),
):
    return await _require_product(client, product_id)


@router.get("/{product_id}/color-mapping", response_model=ColorMappingResponse)
async def get_color_mapping(
    product_id: str,
    client: PrintifyClientProtocol = Depends(get_printify_client),
):
    product = await _require_product(client, product_id)
    colors = get_color_options(product)
    mapping = build_color_mapping(product, colors)
    return ColorMappingResponse(
        product_id=product.id,
        colors=colors,
        color_to_image_index=mapping.color_to_image_index,
        image_index_to_color={str(i): c for i, c in mapping.image_index_to_color.items()},
    )


@router.post("/{product_id}/resolve-variant", response_model=VariantResolutionResponse)
async def resolve_variant(
    product_id: str,
    body: VariantSelection,
    client: PrintifyClientProtocol = Depends(get_printify_client),
):
    product = await _require_product(client, product_id)
    variant = variant_service.resolve_variant(product.variants, body.selected_options)
    purchasable = variant_service.find_purchasable_variant(product.variants, body.selected_options)
    return VariantResolutionResponse(
        variant=variant,
        purchasable=purchasable is not None,
        price_display=format_price(variant.price) if variant else None,
    )


@router.get("/{product_id}/view-state", response_model=ProductViewState)
async def get_view_state(
    product_id: str,
    client: PrintifyClientProtocol = Depends(get_printify_client),
):
    product = await _require_product(client, product_id)
    return variant_service.initial_view_state(product)


@router.post("/{product_id}/view-state", response_model=ProductViewState)
async def change_view_state(
    product_id: str,
    body: ViewStateChange,
    client: PrintifyClientProtocol = Depends(get_printify_client),
):
    product = await _require_product(client, product_id)
    return variant_service.apply_view_state_change(product, body)
