"""Coercion and range checks applied before raw input reaches the engine."""
from __future__ import annotations

from decimal import Decimal, InvalidOperation

from .errors import InvalidCurrencyAmount, InvalidPercent, InvalidRecipientCount, InvalidTotalReward

DEFAULT_RECIPIENT_COUNT = Decimal(1)
DEFAULT_PERCENT = Decimal(0)
DEFAULT_CURRENCY = Decimal(0)
DEFAULT_TOTAL_REWARD = Decimal(0)


def coerce_number(raw: object, default: Decimal) -> Decimal:
    """Turn raw input into a finite ``Decimal`` or fall back to ``default``."""

    if raw is None or isinstance(raw, bool):
        return default
    if isinstance(raw, Decimal):
        value = raw
    else:
        text = str(raw).strip()
        if not text:
            return default
        try:
            value = Decimal(text)
        except InvalidOperation:
            return default
    if not value.is_finite():
        return default
    return value


def ensure_recipient_count(value: Decimal | int) -> int:
    value = Decimal(value)
    if value < 1 or value != value.to_integral_value():
        raise InvalidRecipientCount(value)
    return int(value)


def ensure_percent(value: Decimal) -> Decimal:
    if not 0 <= value <= 100:
        raise InvalidPercent(value)
    return value


def ensure_currency_amount(value: Decimal) -> Decimal:
    if value < 0:
        raise InvalidCurrencyAmount(value)
    return value


def ensure_total_reward(value: Decimal) -> Decimal:
    if value < 0:
        raise InvalidTotalReward(value)
    return value
