"""Percentage and currency conversions for a single payout row."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, DivisionByZero, localcontext

TWOPLACES = Decimal("0.01")
HUNDRED = Decimal(100)

# Significant digits kept below the integer part of a conversion result.
BASE_PRECISION = 28
# Working precision never grows past this many digits; wider inputs get rounded.
MAX_PRECISION = 400

Number = int | float | Decimal


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _magnitude(value: Decimal) -> int:
    if not value.is_finite() or not value:
        return 0
    return max(value.adjusted(), 0)


def _conversion_precision(*values: Decimal) -> int:
    digits = sum(_magnitude(value) for value in values)
    return min(BASE_PRECISION + digits + 3, MAX_PRECISION)


def round2(value: Number) -> Decimal:
    """Quantize to two decimal places, rounding halves away from zero.

    Precision is widened to fit the integer part, so large amounts are kept.
    """

    value = to_decimal(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, _magnitude(value) + 3)
        return value.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def currency_from_percent(percent: Number, total: Number, recipient_count: int) -> Decimal:
    """Return the per-recipient currency amount for ``percent`` of ``total``.

    Raises ``decimal.DivisionByZero`` when ``recipient_count`` is zero and
    ``decimal.Overflow`` when the result exceeds the decimal exponent range.
    """

    if recipient_count == 0:
        raise DivisionByZero("recipient_count must not be zero")
    percent, total, count = to_decimal(percent), to_decimal(total), to_decimal(recipient_count)
    with localcontext() as ctx:
        ctx.prec = _conversion_precision(percent, total, count)
        amount = (percent / HUNDRED) * total / count
    return round2(amount)


def percent_from_currency(currency: Number, total: Number, recipient_count: int) -> Decimal:
    """Return the percentage of ``total`` that ``currency`` per recipient represents.

    Raises ``decimal.DivisionByZero`` when ``total`` or ``recipient_count`` is
    zero and ``decimal.Overflow`` when the result exceeds the exponent range.
    """

    currency, total, count = to_decimal(currency), to_decimal(total), to_decimal(recipient_count)
    if total == 0:
        raise DivisionByZero("total must not be zero")
    if count == 0:
        raise DivisionByZero("recipient_count must not be zero")
    with localcontext() as ctx:
        # a total below one inflates the quotient
        extra = max(-total.adjusted(), 0) if total.is_finite() else 0
        ctx.prec = min(_conversion_precision(currency, count) + extra, MAX_PRECISION)
        amount = (currency / total) * HUNDRED * count
    return round2(amount)
