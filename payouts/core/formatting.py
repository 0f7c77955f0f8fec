"""Helper functions for formatting amounts and percentages for display."""

from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP, localcontext

_TWO_PLACES = Decimal("0.01")


def _quantize(d: Decimal, exponent: Decimal) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, max(d.adjusted(), 0) + abs(exponent.adjusted()) + 2)
        return d.quantize(exponent, rounding=ROUND_HALF_UP)


def format_amount(value: int | float | Decimal, decimals: int = 2) -> str:
    """Format a number with thousands separators and fixed decimals.

    Args:
        value: The number to format
        decimals: Number of decimal places to show
    """
    d = Decimal(str(value))
    exponent = Decimal(1).scaleb(-decimals) if decimals else Decimal(1)
    return f"{_quantize(d, exponent):,.{decimals}f}"


def format_currency(
    value: int | float | Decimal,
    symbol: str = "$",
    decimals: int = 2,
) -> str:
    """Format a currency value, e.g. ``$ 5,460.00``.

    Args:
        value: The currency amount to format
        symbol: Currency symbol to use (default: $)
        decimals: Number of decimal places to show
    """
    return f"{symbol} {format_amount(value, decimals=decimals)}"


def format_percent(value: int | float | Decimal) -> str:
    """Format a percentage with two decimals, e.g. ``100.00%``."""

    return f"{_quantize(Decimal(str(value)), _TWO_PLACES):f}%"
