from decimal import Decimal

from pydantic import BaseModel, Field


class CartCustomization(BaseModel):
    gift_wrap: bool = False
    rush_delivery: bool = False
    express_shipping: bool = False


class CartLineItem(BaseModel):
    id: str
    product_id: str
    variant_id: str
    name: str
    quantity: int = Field(ge=1)
    options: dict[str, str] = {}
    # Dollars, fixed at the moment the variant was added.
    price: Decimal
    image: str | None = None
    customization: CartCustomization = CartCustomization()


class CartItemAdd(BaseModel):
    product_id: str = Field(min_length=1)
    variant_id: str = Field(min_length=1)
    quantity: int = 1
    customization: CartCustomization = CartCustomization()


class CartItemUpdate(BaseModel):
    # Bounds come from settings.max_cart_quantity, checked in cart_service.
    quantity: int


class CartTotals(BaseModel):
    subtotal: Decimal
    additional_costs: Decimal
    tax: Decimal
    total: Decimal
    item_count: int


class CartResponse(BaseModel):
    items: list[CartLineItem]
    totals: CartTotals
    totals_display: dict[str, str]
