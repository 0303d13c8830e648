"""Color <-> thumbnail association for product images.

Printify rarely says which photo shows which color. Each thumbnail is run
through ``THUMBNAIL_STRATEGIES`` in order and the first strategy that names a
color wins:

1. variant metadata (enabled variants carrying a color and ``image_index``)
2. identical images (one generic photo repeated once per color slot)
3. image content (color name found in alt text, src or metadata)

Thumbnails no strategy resolves stay unmapped. Everything here is a pure
function of the product, so callers recompute instead of caching.
"""
import json
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from storefront.models.dto.product import Product, ProductVariant

logger = logging.getLogger(__name__)

COLOR_OPTION_NAMES = ("color", "colour")

ThumbnailStrategy = Callable[[Product, Sequence[str], int], str | None]


@dataclass(frozen=True)
class ColorImageMapping:
    color_to_image_index: dict[str, int] = field(default_factory=dict)
    image_index_to_color: dict[int, str] = field(default_factory=dict)


def variant_color(variant: ProductVariant) -> str | None:
    for name, value in variant.options.items():
        if name.lower() in COLOR_OPTION_NAMES and value:
            return value
    return None


def get_color_options(product: Product) -> list[str]:
    """Declared color values in order, or the variants' colors if none are declared."""
    for option in product.options:
        if option.name.lower() in COLOR_OPTION_NAMES:
            return list(option.values)
    colors: list[str] = []
    for variant in product.variants:
        color = variant_color(variant)
        if color and color not in colors:
            colors.append(color)
    return colors


def _variant_image_links(product: Product) -> list[tuple[str, int]]:
    """``(color, image_index)`` for enabled variants, in declaration order."""
    links = []
    for variant in product.variants:
        if not variant.is_enabled or variant.image_index is None:
            continue
        if variant.image_index >= len(product.images):
            continue
        color = variant_color(variant)
        if color:
            links.append((color, variant.image_index))
    return links


def color_from_variant_metadata(product: Product, colors: Sequence[str], index: int) -> str | None:
    return next((color for color, i in _variant_image_links(product) if i == index), None)


def color_from_identical_images(product: Product, colors: Sequence[str], index: int) -> str | None:
    if not colors or _variant_image_links(product):
        return None
    if len({image.src for image in product.images}) != 1:
        return None
    # Leftover images when the counts don't divide evenly go to the last color.
    run = max(1, len(product.images) // len(colors))
    return colors[min(index // run, len(colors) - 1)]


def color_from_image_content(product: Product, colors: Sequence[str], index: int) -> str | None:
    image = product.images[index]
    haystack = " ".join([
        image.alt,
        image.src,
        json.dumps(image.model_dump(), default=str),
    ]).lower()
    return next((color for color in colors if color and color.lower() in haystack), None)


THUMBNAIL_STRATEGIES: tuple[ThumbnailStrategy, ...] = (
    color_from_variant_metadata,
    color_from_identical_images,
    color_from_image_content,
)


def build_color_mapping(
    product: Product, colors: Sequence[str] | None = None
) -> ColorImageMapping:
    colors = list(get_color_options(product) if colors is None else colors)

    image_index_to_color: dict[int, str] = {}
    for index in range(len(product.images)):
        for strategy in THUMBNAIL_STRATEGIES:
            color = strategy(product, colors, index)
            if color is not None:
                image_index_to_color[index] = color
                break

    # Inverse view: a color maps to the lowest thumbnail attributed to it, so
    # thumbnail_to_color(color_to_thumbnail(c)) == c whenever c has one.
    color_to_image_index: dict[str, int] = {}
    for index in sorted(image_index_to_color):
        color_to_image_index.setdefault(image_index_to_color[index], index)

    logger.debug(
        "Color mapping for product %s: %d/%d thumbnails mapped",
        product.id, len(image_index_to_color), len(product.images),
    )
    return ColorImageMapping(
        color_to_image_index=color_to_image_index,
        image_index_to_color=image_index_to_color,
    )


def get_correct_color_for_thumbnail(
    product: Product, index: int, colors: Sequence[str] | None = None
) -> str | None:
    if index < 0 or index >= len(product.images):
        return None
    return build_color_mapping(product, colors).image_index_to_color.get(index)


def thumbnail_to_color(product: Product, index: int) -> str | None:
    return get_correct_color_for_thumbnail(product, index)


def color_to_thumbnail(product: Product, color: str) -> int | None:
    return build_color_mapping(product).color_to_image_index.get(color)
