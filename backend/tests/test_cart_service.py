from decimal import Decimal

import pytest

from storefront.core.exceptions import BadRequestError, NotFoundError
from storefront.models.dto.cart import CartCustomization
from storefront.services.cart_service import (
    CartStore,
    build_line_item,
    calculate_cart_totals,
    format_totals,
    line_item_id,
)
from tests.factories import make_variant


def _line(shirt, variant_id="s-black", quantity=1, **customization):
    variant = next(v for v in shirt.variants if v.id == variant_id)
    return build_line_item(
        shirt, variant, quantity, customization=CartCustomization(**customization),
    )


class TestBuildLineItem:
    def test_converts_price_once(self, shirt):
        item = _line(shirt, quantity=2)
        assert item.price == Decimal("24.99")
        assert item.quantity == 2
        assert item.id == "shirt-1-s-black"
        assert item.options == {"Size": "S", "Color": "Black"}

    def test_uses_variant_image(self, shirt):
        assert _line(shirt, "s-white").image == "https://cdn.example.com/shirt-white.jpg"

    def test_disabled_variant_rejected(self, shirt):
        with pytest.raises(BadRequestError):
            _line(shirt, "m-white")

    @pytest.mark.parametrize("quantity", [0, -1, 11])
    def test_quantity_bounds(self, shirt, quantity):
        with pytest.raises(BadRequestError):
            _line(shirt, quantity=quantity)

    def test_limit_follows_settings(self, shirt, monkeypatch):
        from storefront.core.config import settings
        monkeypatch.setattr(settings, "max_cart_quantity", 25)
        assert _line(shirt, quantity=25).quantity == 25
        with pytest.raises(BadRequestError):
            _line(shirt, quantity=26)

    def test_foreign_variant_rejected(self, shirt):
        with pytest.raises(NotFoundError):
            build_line_item(shirt, make_variant(variant_id="other"))

    def test_customization_changes_line_id(self):
        custom = CartCustomization(rush_delivery=True, gift_wrap=True)
        assert line_item_id("p", "v", custom) == "p-v-gift_wrap-rush_delivery"
        assert line_item_id("p", "v", CartCustomization()) == "p-v"


class TestCartStore:
    def test_add_and_list(self, cart_store, shirt):
        cart_store.add(_line(shirt))
        cart_store.add(_line(shirt, "s-white"))
        assert [i.variant_id for i in cart_store.items()] == ["s-black", "s-white"]

    def test_add_merges_and_caps(self, cart_store, shirt):
        cart_store.add(_line(shirt, quantity=6))
        merged = cart_store.add(_line(shirt, quantity=7))
        assert merged.quantity == 10
        assert len(cart_store) == 1

    def test_update_quantity(self, cart_store, shirt):
        item = cart_store.add(_line(shirt))
        assert cart_store.update_quantity(item.id, 4).quantity == 4

    def test_update_out_of_range(self, cart_store, shirt):
        item = cart_store.add(_line(shirt))
        with pytest.raises(BadRequestError):
            cart_store.update_quantity(item.id, 11)

    def test_default_limit_comes_from_settings(self, shirt, monkeypatch):
        from storefront.core.config import settings
        monkeypatch.setattr(settings, "max_cart_quantity", 3)
        store = CartStore()
        item = store.add(_line(shirt, quantity=2))
        assert store.add(_line(shirt, quantity=2)).quantity == 3
        with pytest.raises(BadRequestError):
            store.update_quantity(item.id, 4)

    def test_remove(self, cart_store, shirt):
        item = cart_store.add(_line(shirt))
        cart_store.remove(item.id)
        assert cart_store.items() == []
        with pytest.raises(NotFoundError):
            cart_store.remove(item.id)

    def test_clear(self, cart_store, shirt):
        cart_store.add(_line(shirt))
        cart_store.clear()
        assert len(cart_store) == 0


class TestCalculateCartTotals:
    def test_empty(self):
        totals = calculate_cart_totals([])
        assert totals.total == Decimal("0")
        assert totals.item_count == 0

    def test_subtotal_and_tax(self, shirt):
        totals = calculate_cart_totals([_line(shirt, quantity=2)])
        assert totals.subtotal == Decimal("49.98")
        assert totals.tax == Decimal("4.00")
        assert totals.total == Decimal("53.98")
        assert totals.item_count == 2

    def test_customization_costs_per_line(self, shirt):
        items = [
            _line(shirt, gift_wrap=True),
            _line(shirt, "s-white", rush_delivery=True, express_shipping=True),
        ]
        totals = calculate_cart_totals(items)
        assert totals.additional_costs == Decimal("28.97")

    def test_order_level_customization(self, shirt):
        totals = calculate_cart_totals([_line(shirt)], CartCustomization(gift_wrap=True))
        assert totals.additional_costs == Decimal("2.99")

    def test_display(self, shirt):
        display = format_totals(calculate_cart_totals([_line(shirt)]))
        assert display == {
            "subtotal": "$24.99",
            "additional_costs": "$0.00",
            "tax": "$2.00",
            "total": "$26.99",
        }
