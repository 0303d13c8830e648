from decimal import Decimal

import pytest

from storefront.core.pricing import (
    cents_to_dollars,
    format_price,
    format_price_range,
    line_total,
    upstream_price_cents,
)
from tests.factories import make_variant


class TestUpstreamPriceCents:
    def test_integer_cents(self):
        assert upstream_price_cents(2499) == 2499

    def test_numeric_string(self):
        assert upstream_price_cents(" 1899 ") == 1899

    def test_fractional_cents_round_half_up(self):
        assert upstream_price_cents(2499.5) == 2500

    @pytest.mark.parametrize("raw", [None, "", "abc", "12,99", True, -100, float("nan"), float("inf")])
    def test_unusable_values_become_zero(self, raw):
        assert upstream_price_cents(raw) == 0


class TestConversions:
    def test_cents_to_dollars(self):
        assert cents_to_dollars(2499) == Decimal("24.99")

    def test_line_total_is_exact(self):
        assert line_total(Decimal("24.99"), 3) == Decimal("74.97")


class TestFormatPrice:
    def test_usd(self):
        assert format_price(Decimal("1234.5")) == "$1,234.50"

    def test_rounds_half_up(self):
        assert format_price(Decimal("0.125")) == "$0.13"

    def test_unknown_currency(self):
        assert format_price(Decimal("5"), "CHF") == "5.00 CHF"


class TestFormatPriceRange:
    def test_single_price(self):
        assert format_price_range([make_variant(price_cents=2499)]) == "$24.99"

    def test_range_ignores_disabled(self):
        variants = [
            make_variant(variant_id="a", price_cents=2499),
            make_variant(variant_id="b", price_cents=2699),
            make_variant(variant_id="c", price_cents=9999, is_enabled=False),
        ]
        assert format_price_range(variants) == "$24.99 - $26.99"

    def test_nothing_enabled(self):
        assert format_price_range([make_variant(is_enabled=False)]) == "Out of stock"
