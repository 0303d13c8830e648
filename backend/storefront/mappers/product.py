"""Raw Printify product payloads -> canonical ``Product`` models."""
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from storefront.core.exceptions import InvalidCatalogResponseError
from storefront.core.pricing import upstream_price_cents
from storefront.core.text import OPTION_FALLBACK, clean_option_value, strip_html
from storefront.models.dto.product import (
    PLACEHOLDER_IMAGE,
    CatalogPage,
    Product,
    ProductImage,
    ProductOption,
    ProductVariant,
)

logger = logging.getLogger(__name__)

DEFAULT_STOCK_QUANTITY = 50
DEFAULT_IMAGE_SIZE = 600
FALLBACK_OPTION_VALUE = "Standard"
DEFAULT_OPTIONS = (
    ProductOption(name="Size", type="size", values=["Small", "Medium", "Large", "XL"]),
    ProductOption(name="Color", type="color", values=["Black", "White", "Navy", "Red"]),
)
_PRINTIFY_IMAGE_PARAMS = "w=600&h=600&fit=crop&auto=format"


def _present(value: Any) -> bool:
    return value is not None and str(value).strip() != ""


def _int_or(value: Any, default: int, minimum: int = 0) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        return default
    return value


def _index_or_none(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


def _unique(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


def optimize_image_url(url: Any) -> str:
    if not isinstance(url, str) or not url.strip():
        return PLACEHOLDER_IMAGE
    url = url.strip()
    if "printify" in url and _PRINTIFY_IMAGE_PARAMS not in url:
        separator = "&" if "?" in url else "?"
        return f"{url}{separator}{_PRINTIFY_IMAGE_PARAMS}"
    return url


def _transform_images(raw_images: Any, title: str) -> list[ProductImage]:
    images: list[ProductImage] = []
    has_default = False
    for raw in raw_images if isinstance(raw_images, list) else []:
        if not isinstance(raw, Mapping):
            logger.warning("Skipping malformed image entry for %r", title)
            continue
        index = len(images)
        position = raw.get("position")
        if not isinstance(position, str) or not position.strip():
            position = "front" if index == 0 else f"view-{index + 1}"
        is_default = bool(raw.get("is_default")) and not has_default
        has_default = has_default or is_default
        alt = raw.get("alt")
        raw_variant_ids = raw.get("variant_ids")
        images.append(ProductImage(
            src=optimize_image_url(raw.get("src")),
            is_default=is_default,
            position=position.strip(),
            alt=alt.strip() if isinstance(alt, str) and alt.strip() else f"Product image {index + 1}",
            variant_ids=[
                str(v) for v in raw_variant_ids if _present(v)
            ] if isinstance(raw_variant_ids, list) else [],
            width=_int_or(raw.get("width"), DEFAULT_IMAGE_SIZE, minimum=1),
            height=_int_or(raw.get("height"), DEFAULT_IMAGE_SIZE, minimum=1),
        ))

    if not images:
        return [ProductImage(src=PLACEHOLDER_IMAGE, is_default=True, position="front", alt="Product image 1")]
    if not has_default:
        images[0] = images[0].model_copy(update={"is_default": True})
    return images


def _option_value_lookup(raw_options: Any) -> dict[str, tuple[str, str]]:
    """Map Printify option value ids to ``(option name, display value)``."""
    lookup: dict[str, tuple[str, str]] = {}
    for raw in raw_options if isinstance(raw_options, list) else []:
        if not isinstance(raw, Mapping) or not isinstance(raw.get("values"), list):
            continue
        name = clean_option_value(raw.get("name")) or OPTION_FALLBACK
        for value in raw["values"]:
            if isinstance(value, Mapping) and _present(value.get("id")):
                lookup[str(value["id"])] = (name, clean_option_value(value))
    return lookup


def _transform_variant_options(
    raw: Any, value_lookup: dict[str, tuple[str, str]]
) -> dict[str, str]:
    pairs: list[tuple[str, str]] = []
    if isinstance(raw, Mapping):
        pairs = [(str(k), clean_option_value(v)) for k, v in raw.items()]
    elif isinstance(raw, list):
        for entry in raw:
            if isinstance(entry, Mapping):
                pairs.extend((str(k), clean_option_value(v)) for k, v in entry.items())
            elif isinstance(entry, (int, str)) and not isinstance(entry, bool):
                resolved = value_lookup.get(str(entry))
                if resolved:
                    pairs.append(resolved)
    return {
        name.strip(): value for name, value in pairs
        if name.strip() and value and value != OPTION_FALLBACK
    }


def _transform_variant(
    raw: Any, value_lookup: dict[str, tuple[str, str]]
) -> ProductVariant | None:
    if not isinstance(raw, Mapping) or not _present(raw.get("id")):
        logger.warning("Skipping variant without id: %r", raw)
        return None

    options = _transform_variant_options(raw.get("options"), value_lookup)
    title = raw.get("title")
    image_index = raw.get("image_index", raw.get("imageIndex"))
    return ProductVariant(
        id=str(raw["id"]),
        title=title.strip() if isinstance(title, str) and title.strip() else " / ".join(options.values()),
        price_cents=upstream_price_cents(raw.get("price")),
        is_enabled=raw.get("is_enabled") is not False,
        options=options,
        stock_quantity=_int_or(raw.get("stock_quantity"), DEFAULT_STOCK_QUANTITY),
        image_index=_index_or_none(image_index),
    )


def _transform_options(raw_options: Any) -> list[tuple[str, str, list[str]]]:
    """Declared options as ``(name, type, values)``; ``values`` may be empty."""
    declared: list[tuple[str, str, list[str]]] = []
    seen_names: set[str] = set()
    for raw in raw_options if isinstance(raw_options, list) else []:
        if not isinstance(raw, Mapping):
            continue
        name = clean_option_value(raw.get("name")) or OPTION_FALLBACK
        if name.lower() in seen_names:
            continue
        seen_names.add(name.lower())
        raw_values = raw.get("values") if isinstance(raw.get("values"), list) else []
        values = _unique(
            cleaned for cleaned in (clean_option_value(v) for v in raw_values)
            if cleaned and cleaned != OPTION_FALLBACK
        )
        option_type = raw.get("type")
        if not isinstance(option_type, str) or not option_type.strip():
            option_type = "select"
        declared.append((name, option_type.strip(), values))
    return declared


def _reconcile_options(
    declared: list[tuple[str, str, list[str]]], variants: list[ProductVariant]
) -> tuple[list[ProductOption], list[ProductVariant]]:
    """Merge variant option keys and values into the declared options.

    Variant keys are matched case-insensitively and renamed to the declared
    spelling, so every variant's keys are a subset of the option names.
    """
    names = {name.lower(): name for name, _, _ in declared}
    values_by_name = {name: list(values) for name, _, values in declared}
    types = {name: option_type for name, option_type, _ in declared}

    reconciled = []
    for variant in variants:
        options = {}
        for key, value in variant.options.items():
            name = names.setdefault(key.lower(), key)
            values = values_by_name.setdefault(name, [])
            types.setdefault(name, key.lower() if key.lower() in ("size", "color") else "select")
            if value not in values:
                values.append(value)
            options[name] = value
        reconciled.append(variant.model_copy(update={"options": options}))

    if not any(values_by_name.values()):
        return [o.model_copy(deep=True) for o in DEFAULT_OPTIONS], reconciled
    options = [
        ProductOption(name=name, type=types[name], values=values or [FALLBACK_OPTION_VALUE])
        for name, values in values_by_name.items()
    ]
    return options, reconciled


def _link_variant_images(
    variants: list[ProductVariant], images: list[ProductImage]
) -> list[ProductVariant]:
    """Fill ``image_index`` from the images' ``variant_ids`` where it is missing
    or points past the image list.

    A colored variant only links to an image whose listed variants all share
    its color. Images listed under several colors stay unlinked, the lowest
    exclusive index wins.
    """
    color_by_id = {v.id: _variant_color(v) for v in variants}
    image_colors = [
        {color_by_id[vid] for vid in image.variant_ids if color_by_id.get(vid)}
        for image in images
    ]

    linked = []
    for variant in variants:
        index = variant.image_index
        if index is not None and (index < 0 or index >= len(images)):
            index = None
        if index is None:
            color = color_by_id[variant.id]
            index = next((
                i for i, image in enumerate(images)
                if variant.id in image.variant_ids
                and (color is None or image_colors[i] == {color})
            ), None)
        linked.append(variant.model_copy(update={"image_index": index}))
    return linked


def _variant_color(variant: ProductVariant) -> str | None:
    for name, value in variant.options.items():
        if name.lower() in ("color", "colour") and value:
            return value
    return None


def _transform_tags(raw_tags: Any) -> list[str]:
    if not isinstance(raw_tags, list):
        return []
    return _unique(
        str(tag).strip() for tag in raw_tags
        if isinstance(tag, (str, int, float)) and not isinstance(tag, bool) and str(tag).strip()
    )


def transform_product(raw: Any) -> Product | None:
    """Build a canonical product, or ``None`` when the record is unusable."""
    if not isinstance(raw, Mapping):
        logger.warning("Skipping non-object product record: %s", type(raw).__name__)
        return None

    product_id = raw.get("id")
    raw_title = raw.get("title")
    if not _present(product_id) or not _present(raw_title):
        logger.warning("Skipping product missing id or title (id=%r)", product_id)
        return None

    try:
        title = strip_html(str(raw_title)) or str(raw_title).strip()
        value_lookup = _option_value_lookup(raw.get("options"))
        images = _transform_images(raw.get("images"), title)
        variants = [
            v for v in (
                _transform_variant(rv, value_lookup)
                for rv in (raw.get("variants") if isinstance(raw.get("variants"), list) else [])
            )
            if v is not None
        ]
        variants = _link_variant_images(variants, images)
        options, variants = _reconcile_options(_transform_options(raw.get("options")), variants)

        created_at = raw.get("created_at")
        updated_at = raw.get("updated_at")
        return Product(
            id=str(product_id).strip(),
            title=title,
            description=strip_html(raw.get("description")),
            images=images,
            variants=variants,
            options=options,
            tags=_transform_tags(raw.get("tags")),
            created_at=str(created_at) if created_at else None,
            updated_at=str(updated_at) if updated_at else None,
        )
    except Exception:
        logger.exception("Failed to transform product %s", product_id)
        return None


def transform_products(raw_products: Iterable[Any]) -> list[Product]:
    products = []
    skipped = 0
    for raw in raw_products:
        product = transform_product(raw)
        if product is None:
            skipped += 1
            continue
        products.append(product)
    if skipped:
        logger.warning("Dropped %d malformed products from catalog page", skipped)
    return products


def transform_response(payload: Any) -> CatalogPage:
    """Validate a products page and transform it.

    Raises ``InvalidCatalogResponseError`` when ``data`` is missing or not a list.
    """
    if not isinstance(payload, Mapping) or not isinstance(payload.get("data"), list):
        raise InvalidCatalogResponseError()

    products = transform_products(payload["data"])
    return CatalogPage(
        data=products,
        current_page=_int_or(payload.get("current_page"), 1, minimum=1),
        last_page=_int_or(payload.get("last_page"), 1, minimum=1),
        total=_int_or(payload.get("total"), len(products)),
    )
