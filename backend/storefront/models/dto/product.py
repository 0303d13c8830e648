from decimal import Decimal

from pydantic import BaseModel, Field, computed_field

from storefront.core.pricing import cents_to_dollars, format_price_range
from storefront.core.text import truncate_text

PLACEHOLDER_IMAGE = "/placeholder.svg?height=600&width=600"
SUMMARY_LENGTH = 160


class ProductImage(BaseModel):
    src: str
    is_default: bool = False
    position: str = "front"
    alt: str = ""
    variant_ids: list[str] = []
    width: int = 600
    height: int = 600


class ProductVariant(BaseModel):
    id: str
    title: str = ""
    price_cents: int = Field(default=0, ge=0)
    is_enabled: bool = True
    options: dict[str, str] = {}
    stock_quantity: int = 50
    image_index: int | None = Field(default=None, ge=0)

    @computed_field
    @property
    def price(self) -> Decimal:
        return cents_to_dollars(self.price_cents)


class ProductOption(BaseModel):
    name: str
    type: str = "select"
    values: list[str] = Field(min_length=1)


class Product(BaseModel):
    id: str
    title: str
    description: str = ""
    images: list[ProductImage] = Field(min_length=1)
    variants: list[ProductVariant] = []
    options: list[ProductOption] = []
    tags: list[str] = []
    created_at: str | None = None
    updated_at: str | None = None

    model_config = {"frozen": True}

    @computed_field
    @property
    def price_display(self) -> str:
        return format_price_range(self.variants)

    @computed_field
    @property
    def summary(self) -> str:
        """Description cut at a word boundary for catalog cards."""
        return truncate_text(self.description, SUMMARY_LENGTH)

    def option_names(self) -> list[str]:
        return [o.name for o in self.options]

    def find_option(self, name: str) -> ProductOption | None:
        lowered = name.lower()
        return next((o for o in self.options if o.name.lower() == lowered), None)


class CatalogPage(BaseModel):
    data: list[Product]
    current_page: int = 1
    last_page: int = 1
    total: int = 0


class CatalogResponse(BaseModel):
    data: list[Product]
    current_page: int = 1
    last_page: int = 1
    total: int = 0
    shop_id: str
    shop_title: str
    sales_channel: str
    is_mock_data: bool = False
    fallback_reason: str | None = None
    categories: list[str] = []


class ColorMappingResponse(BaseModel):
    product_id: str
    colors: list[str]
    color_to_image_index: dict[str, int]
    image_index_to_color: dict[str, str]


class VariantSelection(BaseModel):
    selected_options: dict[str, str] = {}


class VariantResolutionResponse(BaseModel):
    variant: ProductVariant | None = None
    purchasable: bool
    price_display: str | None = None


class ProductViewState(BaseModel):
    """What the shopper currently has selected on a product page."""

    selected_options: dict[str, str] = {}
    image_index: int = Field(default=0, ge=0)

    model_config = {"frozen": True}


class ViewStateChange(BaseModel):
    state: ProductViewState | None = None
    option: str | None = None
    value: str | None = None
    image_index: int | None = None
