import logging
from collections.abc import Iterable, Mapping

from storefront.core.exceptions import BadRequestError
from storefront.models.dto.product import (
    Product,
    ProductVariant,
    ProductViewState,
    ViewStateChange,
)
from storefront.services.color_mapping import (
    COLOR_OPTION_NAMES,
    color_to_thumbnail,
    thumbnail_to_color,
)

logger = logging.getLogger(__name__)


def _matches(variant: ProductVariant, selected: Mapping[str, str]) -> bool:
    return all(
        name in selected and selected[name] == value
        for name, value in variant.options.items()
    )


def resolve_variant(
    variants: Iterable[ProductVariant], selected: Mapping[str, str]
) -> ProductVariant | None:
    """First variant, in declaration order, whose options all appear in ``selected``.

    Keys only present in ``selected`` are ignored.
    """
    return next((v for v in variants if _matches(v, selected)), None)


def find_purchasable_variant(
    variants: Iterable[ProductVariant], selected: Mapping[str, str]
) -> ProductVariant | None:
    return resolve_variant((v for v in variants if v.is_enabled), selected)


def default_selection(product: Product) -> dict[str, str]:
    first_enabled = next((v for v in product.variants if v.is_enabled), None)
    if first_enabled and first_enabled.options:
        selection = dict(first_enabled.options)
    else:
        selection = {}
    for option in product.options:
        selection.setdefault(option.name, option.values[0])
    return selection


def initial_view_state(product: Product) -> ProductViewState:
    selection = default_selection(product)
    image_index = next((i for i, img in enumerate(product.images) if img.is_default), 0)
    color_name = _color_option_name(product)
    if color_name and color_name in selection:
        mapped = color_to_thumbnail(product, selection[color_name])
        if mapped is not None:
            image_index = mapped
    return ProductViewState(selected_options=selection, image_index=image_index)


def _color_option_name(product: Product) -> str | None:
    for option in product.options:
        if option.name.lower() in COLOR_OPTION_NAMES:
            return option.name
    return None


def select_color(product: Product, state: ProductViewState, color: str) -> ProductViewState:
    """Select ``color`` and move to its thumbnail when one is known."""
    name = _color_option_name(product) or "Color"
    image_index = color_to_thumbnail(product, color)
    if image_index is None:
        logger.debug("No thumbnail for color %r on product %s", color, product.id)
        image_index = state.image_index
    return state.model_copy(update={
        "selected_options": {**state.selected_options, name: color},
        "image_index": image_index,
    })


def select_thumbnail(product: Product, state: ProductViewState, index: int) -> ProductViewState:
    """Show thumbnail ``index`` and select the color it depicts when one is known."""
    if index < 0 or index >= len(product.images):
        raise BadRequestError(f"Image index {index} out of range")
    selected = dict(state.selected_options)
    color = thumbnail_to_color(product, index)
    if color is not None:
        selected[_color_option_name(product) or "Color"] = color
    return state.model_copy(update={"selected_options": selected, "image_index": index})


def select_option(
    product: Product, state: ProductViewState, name: str, value: str
) -> ProductViewState:
    option = product.find_option(name)
    if option is None:
        raise BadRequestError(f"Unknown option: {name}")
    if value not in option.values:
        raise BadRequestError(f"Invalid value for {option.name}: {value}")
    if option.name.lower() in COLOR_OPTION_NAMES:
        return select_color(product, state, value)
    return state.model_copy(update={
        "selected_options": {**state.selected_options, option.name: value},
    })


def apply_view_state_change(product: Product, change: ViewStateChange) -> ProductViewState:
    state = change.state or initial_view_state(product)
    if change.image_index is not None:
        state = select_thumbnail(product, state, change.image_index)
    if change.option is not None:
        if change.value is None:
            raise BadRequestError("An option change needs a value")
        state = select_option(product, state, change.option, change.value)
    return state
