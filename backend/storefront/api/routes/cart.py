import logging

from fastapi import APIRouter, Depends

from storefront.api.dependencies.cart import get_cart_store
from storefront.api.dependencies.printify import get_printify_client
from storefront.core.exceptions import NotFoundError
from storefront.integrations.printify.client import PrintifyClientProtocol
from storefront.models.dto.cart import CartItemAdd, CartItemUpdate, CartLineItem, CartResponse
from storefront.models.dto.common import DetailResponse
from storefront.services import cart_service, catalog_service
from storefront.services.cart_service import CartStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cart", tags=["cart"])


def _cart_response(store: CartStore) -> CartResponse:
    items = store.items()
    totals = cart_service.calculate_cart_totals(items)
    return CartResponse(items=items, totals=totals, totals_display=cart_service.format_totals(totals))


@router.get("", response_model=CartResponse)
async def get_cart(store: CartStore = Depends(get_cart_store)):
    return _cart_response(store)


@router.post("/items", response_model=CartLineItem, status_code=201)
async def add_to_cart(
    body: CartItemAdd,
    store: CartStore = Depends(get_cart_store),
    client: PrintifyClientProtocol = Depends(get_printify_client),
):
    product = await catalog_service.get_product(client, body.product_id)
    if product is None:
        raise NotFoundError("Product not found")
    variant = next((v for v in product.variants if v.id == body.variant_id), None)
    if variant is None:
        raise NotFoundError("Variant not found")
    item = cart_service.build_line_item(
        product, variant, body.quantity, customization=body.customization,
    )
    added = store.add(item)
    logger.info("Added %s x%d to cart", added.id, body.quantity)
    return added


@router.put("/items/{item_id}", response_model=CartLineItem)
async def update_cart_item(
    item_id: str,
    body: CartItemUpdate,
    store: CartStore = Depends(get_cart_store),
):
    return store.update_quantity(item_id, body.quantity)


@router.delete("/items/{item_id}", response_model=DetailResponse)
async def remove_cart_item(item_id: str, store: CartStore = Depends(get_cart_store)):
    store.remove(item_id)
    return {"detail": "Item removed from cart"}


@router.delete("", response_model=DetailResponse)
async def clear_cart(store: CartStore = Depends(get_cart_store)):
    store.clear()
    return {"detail": "Cart cleared"}
