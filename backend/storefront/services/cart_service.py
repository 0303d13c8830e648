import logging
from collections.abc import Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal

from storefront.core.config import settings
from storefront.core.exceptions import BadRequestError, NotFoundError
from storefront.core.pricing import CENT, cents_to_dollars, format_price, line_total
from storefront.models.dto.cart import CartCustomization, CartLineItem, CartTotals
from storefront.models.dto.product import Product, ProductVariant

logger = logging.getLogger(__name__)

CUSTOMIZATION_COSTS: dict[str, Decimal] = {
    "gift_wrap": Decimal("2.99"),
    "rush_delivery": Decimal("9.99"),
    "express_shipping": Decimal("15.99"),
}


def line_item_id(
    product_id: str, variant_id: str, customization: CartCustomization | None = None
) -> str:
    """``{product_id}-{variant_id}``, suffixed with the sorted customization flags that are set."""
    item_id = f"{product_id}-{variant_id}"
    if customization:
        flags = sorted(k for k, v in customization.model_dump().items() if v)
        if flags:
            item_id += "-" + "-".join(flags)
    return item_id


def validate_quantity(quantity: int, maximum: int | None = None) -> int:
    """The one place cart quantities are bounds-checked."""
    maximum = maximum or settings.max_cart_quantity
    if quantity < 1 or quantity > maximum:
        raise BadRequestError(f"Quantity must be between 1 and {maximum}")
    return quantity


def _variant_image(product: Product, variant: ProductVariant) -> str:
    if variant.image_index is not None and variant.image_index < len(product.images):
        return product.images[variant.image_index].src
    default = next((img for img in product.images if img.is_default), product.images[0])
    return default.src


def build_line_item(
    product: Product,
    variant: ProductVariant,
    quantity: int = 1,
    options: Mapping[str, str] | None = None,
    customization: CartCustomization | None = None,
) -> CartLineItem:
    """Snapshot a variant into a cart line. Prices become dollars here."""
    if not any(v.id == variant.id for v in product.variants):
        raise NotFoundError(f"Variant {variant.id} not found on product {product.id}")
    if not variant.is_enabled:
        raise BadRequestError(f"Variant {variant.id} is not available")
    validate_quantity(quantity)

    customization = customization or CartCustomization()
    return CartLineItem(
        id=line_item_id(product.id, variant.id, customization),
        product_id=product.id,
        variant_id=variant.id,
        name=product.title,
        quantity=quantity,
        options=dict(variant.options if options is None else options),
        price=cents_to_dollars(variant.price_cents),
        image=_variant_image(product, variant),
        customization=customization,
    )


def customization_cost(customization: CartCustomization) -> Decimal:
    flags = customization.model_dump()
    return sum(
        (cost for name, cost in CUSTOMIZATION_COSTS.items() if flags.get(name)),
        Decimal("0"),
    )


def calculate_cart_totals(
    items: Iterable[CartLineItem], customization: CartCustomization | None = None
) -> CartTotals:
    """Totals in dollars.

    Customization costs are charged once per flagged line; ``customization``
    adds order-level extras on top. Only tax is rounded.
    """
    items = list(items)
    subtotal = sum((line_total(item.price, item.quantity) for item in items), Decimal("0"))
    additional = sum((customization_cost(item.customization) for item in items), Decimal("0"))
    if customization is not None:
        additional += customization_cost(customization)
    tax = ((subtotal + additional) * settings.sales_tax_rate).quantize(CENT, rounding=ROUND_HALF_UP)
    return CartTotals(
        subtotal=subtotal,
        additional_costs=additional,
        tax=tax,
        total=subtotal + additional + tax,
        item_count=sum(item.quantity for item in items),
    )


def format_totals(totals: CartTotals) -> dict[str, str]:
    return {
        "subtotal": format_price(totals.subtotal),
        "additional_costs": format_price(totals.additional_costs),
        "tax": format_price(totals.tax),
        "total": format_price(totals.total),
    }


class CartStore:
    """In-memory cart lines, keyed by line id, in insertion order."""

    def __init__(self, max_quantity: int | None = None):
        self._items: dict[str, CartLineItem] = {}
        self.max_quantity = max_quantity or settings.max_cart_quantity

    def items(self) -> list[CartLineItem]:
        return list(self._items.values())

    def get(self, item_id: str) -> CartLineItem:
        item = self._items.get(item_id)
        if item is None:
            raise NotFoundError("Cart item not found")
        return item

    def add(self, item: CartLineItem) -> CartLineItem:
        existing = self._items.get(item.id)
        if existing is not None:
            quantity = min(existing.quantity + item.quantity, self.max_quantity)
            if quantity < existing.quantity + item.quantity:
                logger.info("Capped cart line %s at %d", item.id, self.max_quantity)
            item = existing.model_copy(update={"quantity": quantity})
        self._items[item.id] = item
        return item

    def update_quantity(self, item_id: str, quantity: int) -> CartLineItem:
        validate_quantity(quantity, self.max_quantity)
        item = self.get(item_id).model_copy(update={"quantity": quantity})
        self._items[item_id] = item
        return item

    def remove(self, item_id: str) -> None:
        if self._items.pop(item_id, None) is None:
            raise NotFoundError("Cart item not found")

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)
