"""Tests for boundary coercion and range checks."""
from __future__ import annotations

from decimal import Decimal

import pytest

from payouts.domain.errors import (
    InvalidCurrencyAmount,
    InvalidPercent,
    InvalidRecipientCount,
    InvalidTotalReward,
    PayoutError,
)
from payouts.domain.validation import (
    coerce_number,
    ensure_currency_amount,
    ensure_percent,
    ensure_recipient_count,
    ensure_total_reward,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (3, Decimal("3")),
        (2.5, Decimal("2.5")),
        (" 12.75 ", Decimal("12.75")),
        (Decimal("0.1"), Decimal("0.1")),
        ("", Decimal("7")),
        ("abc", Decimal("7")),
        (None, Decimal("7")),
        (True, Decimal("7")),
        (float("nan"), Decimal("7")),
        ("Infinity", Decimal("7")),
    ],
)
def test_coerce_number_falls_back_to_default(raw: object, expected: Decimal) -> None:
    assert coerce_number(raw, Decimal("7")) == expected


def test_recipient_count_must_be_a_positive_whole_number() -> None:
    assert ensure_recipient_count(Decimal("2")) == 2
    assert ensure_recipient_count(Decimal("3.0")) == 3
    with pytest.raises(InvalidRecipientCount):
        ensure_recipient_count(Decimal("0"))
    with pytest.raises(InvalidRecipientCount):
        ensure_recipient_count(Decimal("1.5"))


@pytest.mark.parametrize("value", ["-0.01", "100.01"])
def test_percent_outside_bounds_is_rejected(value: str) -> None:
    with pytest.raises(InvalidPercent):
        ensure_percent(Decimal(value))


def test_percent_bounds_are_inclusive() -> None:
    assert ensure_percent(Decimal("0")) == Decimal("0")
    assert ensure_percent(Decimal("100")) == Decimal("100")


def test_negative_amounts_are_rejected() -> None:
    with pytest.raises(InvalidCurrencyAmount):
        ensure_currency_amount(Decimal("-1"))
    with pytest.raises(InvalidTotalReward):
        ensure_total_reward(Decimal("-1"))
    assert ensure_total_reward(Decimal("0")) == Decimal("0")


def test_boundary_errors_share_a_base_class() -> None:
    with pytest.raises(PayoutError, match="Must be 100 or less"):
        ensure_percent(Decimal("150"))
    with pytest.raises(ValueError, match="at least one recipient"):
        ensure_recipient_count(Decimal("0"))
