"""Price units.

The canonical unit for catalog prices is integer cents. Upstream prices are
converted once, at ingestion (``upstream_price_cents``). Dollars only appear
when a variant is put into the cart (``cents_to_dollars``) and everything
after that stays in ``Decimal`` until ``format_price``.
"""
import logging
import re
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
_CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£"}
_NUMERIC_RE = re.compile(r"^-?\d+(\.\d+)?$")


def upstream_price_cents(raw: Any) -> int:
    """Parse a Printify variant price (integer cents) into canonical cents.

    Missing, non-numeric and negative values become 0.
    """
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, str):
        raw = raw.strip()
        if not _NUMERIC_RE.match(raw):
            logger.warning("Ignoring non-numeric upstream price %r", raw)
            return 0
    try:
        value = Decimal(str(raw))
    except InvalidOperation:
        logger.warning("Ignoring unparseable upstream price %r", raw)
        return 0
    if not value.is_finite() or value < 0:
        return 0
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def cents_to_dollars(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(CENT)


def line_total(unit_price: Decimal, quantity: int) -> Decimal:
    """Exact price for ``quantity`` units; no rounding happens here."""
    return unit_price * quantity


def format_price(amount: Decimal, currency: str = "USD") -> str:
    symbol = _CURRENCY_SYMBOLS.get(currency, "")
    rounded = Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)
    text = f"{rounded:,.2f}"
    if symbol:
        return f"{symbol}{text}"
    return f"{text} {currency}"


def format_price_range(variants: Iterable[Any], currency: str = "USD") -> str:
    """Display range over enabled variants, e.g. ``$24.99 - $26.99``."""
    prices = [v.price for v in variants if v.is_enabled]
    if not prices:
        return "Out of stock"
    low, high = min(prices), max(prices)
    if low == high:
        return format_price(low, currency)
    return f"{format_price(low, currency)} - {format_price(high, currency)}"
