"""Hand-authored catalog served whenever Printify cannot be used.

Products are built directly as canonical models. Every one carries
``MOCK_DATA_TAG`` so the storefront can tell it is showing sample data.
"""
from collections.abc import Iterable

from storefront.models.dto.product import Product, ProductImage, ProductOption, ProductVariant

MOCK_DATA_TAG = "MOCK-DATA"
_FALLBACK_TIMESTAMP = "2024-01-01T00:00:00Z"


def _variant(variant_id: str, title: str, price_cents: int, stock: int, **options: str) -> ProductVariant:
    return ProductVariant(
        id=variant_id,
        title=title,
        price_cents=price_cents,
        options=options,
        stock_quantity=stock,
    )


def _product(
    product_id: str,
    title: str,
    description: str,
    image: str,
    variants: list[ProductVariant],
    options: list[ProductOption],
    tags: list[str],
    image_height: int = 600,
) -> Product:
    return Product(
        id=product_id,
        title=title,
        description=description,
        images=[ProductImage(
            src=image,
            is_default=True,
            position="front",
            alt="Product image 1",
            height=image_height,
        )],
        variants=variants,
        options=options,
        tags=[*tags, MOCK_DATA_TAG],
        created_at=_FALLBACK_TIMESTAMP,
        updated_at=_FALLBACK_TIMESTAMP,
    )


def _size_option(*values: str) -> ProductOption:
    return ProductOption(name="Size", type="size", values=list(values))


def _color_option(*values: str) -> ProductOption:
    return ProductOption(name="Color", type="color", values=list(values))


def _build_products() -> list[Product]:
    shirt_variants = [
        _variant(f"variant-1-{size.lower()}-{color.lower()}", f"{size} - {color}",
                 2699 if size == "XL" else 2499, stock, Size=size, Color=color)
        for color, stocks in (("Black", (25, 30, 20, 15)), ("White", (20, 25, 18, 12)))
        for size, stock in zip(("Small", "Medium", "Large", "XL"), stocks)
    ]
    return [
        _product(
            "shop-22732326-product-1",
            "Anti-Trump Climate Action T-Shirt",
            "Stand up for climate action with this premium organic cotton t-shirt. "
            "Comfortable, durable and made for rallies, protests or everyday wear.",
            "/political-t-shirt.png",
            shirt_variants,
            [_size_option("Small", "Medium", "Large", "XL"), _color_option("Black", "White")],
            ["Apparel", "Political", "Anti-Trump", "Climate", "T-Shirt"],
        ),
        _product(
            "shop-22732326-product-2",
            "Science Over Politics Coffee Mug",
            "A high-quality ceramic mug supporting science and evidence-based policy. "
            "The print won't fade after repeated washes.",
            "/political-mug.png",
            [
                _variant("variant-2-11oz", "11oz Ceramic Mug", 1699, 40, Size="11oz"),
                _variant("variant-2-15oz", "15oz Ceramic Mug", 1899, 35, Size="15oz"),
            ],
            [_size_option("11oz", "15oz")],
            ["Drinkware", "Political", "Science", "Mug"],
        ),
        _product(
            "shop-22732326-product-3",
            "Democracy Defender Hat",
            "Adjustable cotton twill baseball cap with an embroidered design "
            "that won't fade or peel.",
            "/blue-hat-anti-trump.png",
            [
                _variant(f"variant-3-onesize-{color.lower()}", f"One Size - {color}", 2299, stock,
                         Size="One Size", Color=color)
                for color, stock in (("Blue", 50), ("Red", 30), ("Black", 45))
            ],
            [_size_option("One Size"), _color_option("Blue", "Red", "Black")],
            ["Accessories", "Political", "Democracy", "Hat"],
        ),
        _product(
            "shop-22732326-product-4",
            "Climate Change is Real Bumper Sticker",
            "Weather-resistant vinyl bumper sticker that survives UV and car washes "
            "and removes without residue.",
            "/climate-change-bumper-sticker.png",
            [_variant("variant-4-standard", 'Standard Size (3" x 11.5")', 899, 100, Size="Standard")],
            [_size_option("Standard")],
            ["Accessories", "Environment", "Political", "Sticker"],
            image_height=400,
        ),
        _product(
            "shop-22732326-product-5",
            "Vote Blue Political Backpack",
            "Water-resistant backpack with a padded laptop sleeve and adjustable straps.",
            "/anti-trump-backpack.png",
            [_variant("variant-5-standard", "Standard Size", 4599, 25, Size="Standard")],
            [_size_option("Standard")],
            ["Accessories", "Political", "Bags", "Backpack"],
        ),
        _product(
            "shop-22732326-product-6",
            "Progressive Politics Jersey",
            "Moisture-wicking athletic jersey with a modern fit.",
            "/anti-trump-jersey.png",
            [
                _variant(f"variant-6-{size.lower()}", size, 3499 if size == "XL" else 3299, stock, Size=size)
                for size, stock in (("Small", 20), ("Medium", 25), ("Large", 22), ("XL", 18))
            ],
            [_size_option("Small", "Medium", "Large", "XL")],
            ["Apparel", "Political", "Sports", "Jersey"],
        ),
        _product(
            "shop-22732326-product-7",
            "Anti-Trump Statement Mug",
            "Bold ceramic mug, dishwasher and microwave safe.",
            "/anti-trump-mug.png",
            [
                _variant("variant-7-11oz", "11oz Ceramic", 1599, 35, Size="11oz"),
                _variant("variant-7-15oz", "15oz Ceramic", 1799, 30, Size="15oz"),
            ],
            [_size_option("11oz", "15oz")],
            ["Drinkware", "Political", "Anti-Trump", "Mug"],
        ),
        _product(
            "shop-22732326-product-8",
            "Political Activism Mousepad",
            "Smooth tracking surface on a non-slip rubber base.",
            "/anti-trump-mousepad.png",
            [_variant("variant-8-standard", "Standard Size", 1299, 60, Size="Standard")],
            [_size_option("Standard")],
            ["Accessories", "Political", "Office", "Mousepad"],
            image_height=400,
        ),
    ]


_FALLBACK_PRODUCTS: tuple[Product, ...] = tuple(_build_products())


def get_fallback_products() -> list[Product]:
    return [p.model_copy(deep=True) for p in _FALLBACK_PRODUCTS]


def get_fallback_product(product_id: str) -> Product | None:
    product = next((p for p in _FALLBACK_PRODUCTS if p.id == product_id), None)
    return product.model_copy(deep=True) if product else None


def visible_tags(product: Product) -> list[str]:
    return [tag for tag in product.tags if tag != MOCK_DATA_TAG]


def collect_categories(products: Iterable[Product]) -> list[str]:
    """Sorted unique tags across ``products``, without the sample-data marker."""
    return sorted({tag for product in products for tag in visible_tags(product)})
