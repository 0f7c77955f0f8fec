"""Tests for the reconciliation engine's edit policy."""
from __future__ import annotations

from decimal import Decimal

import pytest

from payouts.domain.engine import DERIVED_FIELD, ReconciliationEngine
from payouts.domain.errors import UndefinedConversion
from payouts.domain.models import PayoutRow, RowField
from payouts.domain.rows import RowStore
from payouts.domain.total import TotalRewardStore


class _RecordingRowStore(RowStore):
    """Row store that remembers every write."""

    def __init__(self, rows=()) -> None:
        super().__init__(rows)
        self.writes: list[tuple[int, RowField]] = []

    def set(self, index, field, value) -> None:
        self.writes.append((index, RowField(field)))
        super().set(index, field, value)


def _row(recipient_count: int, percent: str, currency: str = "0") -> PayoutRow:
    return PayoutRow(recipient_count, Decimal(percent), Decimal(currency))


def _engine(total: str, *rows: PayoutRow) -> tuple[ReconciliationEngine, _RecordingRowStore]:
    store = _RecordingRowStore(rows)
    engine = ReconciliationEngine(store, TotalRewardStore(Decimal(total)))
    return engine, store


def test_recipient_count_change_recomputes_currency_only() -> None:
    engine, store = _engine("1000", _row(1, "50", "500.00"))

    outcome = engine.on_recipient_count_change(0, 2)

    assert outcome.applied
    assert outcome.derived_field is RowField.CURRENCY_AMOUNT
    assert outcome.derived_value == Decimal("250.00")
    assert store.get(0) == PayoutRow(2, Decimal("50"), Decimal("250.00"))


@pytest.mark.parametrize("recipient_count, expected", [(4, "125.00"), (3, "166.67")])
def test_recipient_count_change_divides_the_share(recipient_count: int, expected: str) -> None:
    engine, store = _engine("1000", _row(1, "50", "500.00"))

    engine.on_recipient_count_change(0, recipient_count)

    assert store.get(0).currency_amount == Decimal(expected)


def test_percent_change_recomputes_currency() -> None:
    engine, store = _engine("5460", _row(2, "10", "273.00"))

    outcome = engine.on_percent_change(0, Decimal("20"))

    assert outcome.derived_value == Decimal("546.00")
    assert store.get(0).percent_amount == Decimal("20")


def test_currency_change_recomputes_percent() -> None:
    engine, store = _engine("1000", _row(2, "10", "50.00"))

    outcome = engine.on_currency_change(0, 100)

    assert outcome.derived_field is RowField.PERCENT_AMOUNT
    assert outcome.derived_value == Decimal("20.00")
    assert store.get(0) == PayoutRow(2, Decimal("20.00"), Decimal("100"))


def test_percent_change_leaves_other_rows_untouched() -> None:
    engine, store = _engine("5460", _row(1, "50", "2730.00"), _row(2, "20", "546.00"))
    before = store.get(1)

    engine.on_percent_change(0, Decimal("40"))

    assert store.get(1) == before


def test_total_change_recomputes_every_currency_and_keeps_percentages() -> None:
    engine, store = _engine("1000", _row(1, "50", "500.00"), _row(2, "20", "100.00"))

    outcomes = engine.on_total_reward_change(5460)

    assert [outcome.derived_value for outcome in outcomes] == [
        Decimal("2730.00"),
        Decimal("546.00"),
    ]
    assert all(outcome.edited_field is None for outcome in outcomes)
    assert [row.percent_amount for row in store.all()] == [Decimal("50"), Decimal("20")]
    assert engine.total_reward == Decimal("5460")


def test_total_change_writes_only_currency_amounts() -> None:
    engine, store = _engine("1000", _row(1, "50"), _row(2, "20"), _row(1, "30"))

    engine.on_total_reward_change(2000)

    assert store.writes == [
        (0, RowField.CURRENCY_AMOUNT),
        (1, RowField.CURRENCY_AMOUNT),
        (2, RowField.CURRENCY_AMOUNT),
    ]


def test_each_edit_writes_the_edited_field_then_one_derived_field() -> None:
    engine, store = _engine("1000", _row(1, "50", "500.00"))

    engine.on_percent_change(0, Decimal("25"))
    engine.on_currency_change(0, Decimal("300"))
    engine.on_recipient_count_change(0, 3)

    assert store.writes == [
        (0, RowField.PERCENT_AMOUNT),
        (0, RowField.CURRENCY_AMOUNT),
        (0, RowField.CURRENCY_AMOUNT),
        (0, RowField.PERCENT_AMOUNT),
        (0, RowField.RECIPIENT_COUNT),
        (0, RowField.CURRENCY_AMOUNT),
    ]


def test_derived_field_never_targets_the_edited_field() -> None:
    assert set(DERIVED_FIELD) == set(RowField)
    for edited, derived in DERIVED_FIELD.items():
        assert edited is not derived


def test_unchanged_total_recomputes_nothing() -> None:
    engine, store = _engine("1000", _row(1, "50", "500.00"))

    assert engine.on_total_reward_change(Decimal("1000")) == ()
    assert store.writes == []


def test_direct_total_store_update_still_recomputes_rows() -> None:
    store = RowStore([_row(1, "50", "500.00")])
    total = TotalRewardStore(1000)
    ReconciliationEngine(store, total)

    total.set(3000)

    assert store.get(0).currency_amount == Decimal("1500.00")


def test_closed_engine_ignores_total_changes() -> None:
    store = RowStore([_row(1, "50", "500.00")])
    total = TotalRewardStore(1000)
    engine = ReconciliationEngine(store, total)

    engine.close()
    total.set(3000)

    assert store.get(0).currency_amount == Decimal("500.00")


def test_zero_total_currency_edit_reports_undefined_conversion() -> None:
    engine, store = _engine("1000", _row(2, "20", "100.00"))
    engine.on_total_reward_change(0)

    outcome = engine.on_currency_change(0, Decimal("80"))

    assert not outcome.applied
    assert outcome.derived_value is None
    assert isinstance(outcome.condition, UndefinedConversion)
    assert outcome.condition.row_index == 0
    assert store.get(0).percent_amount == Decimal("20")
    assert store.get(0).currency_amount == Decimal("80")
    with pytest.raises(UndefinedConversion):
        outcome.raise_for_condition()


def test_zero_total_zeroes_currency_amounts() -> None:
    engine, store = _engine("1000", _row(1, "50", "500.00"))

    engine.on_total_reward_change(0)

    assert store.get(0) == PayoutRow(1, Decimal("50"), Decimal("0.00"))


def test_cleared_percent_blocks_currency_recompute() -> None:
    engine, store = _engine("1000", _row(1, "50", "500.00"))
    store.clear(0, RowField.PERCENT_AMOUNT)

    outcome = engine.on_recipient_count_change(0, 2)

    assert isinstance(outcome.condition, UndefinedConversion)
    assert store.get(0) == PayoutRow(2, None, Decimal("500.00"))


def test_edited_value_is_stored_without_rounding() -> None:
    engine, store = _engine("1000", _row(1, "0"))

    engine.on_percent_change(0, Decimal("33.333"))

    assert store.get(0).percent_amount == Decimal("33.333")
    assert store.get(0).currency_amount == Decimal("333.33")


def test_large_currency_edit_derives_an_exact_percentage() -> None:
    engine, store = _engine("5460", _row(1, "50", "2730.00"))

    outcome = engine.on_currency_change(0, Decimal("1e30"))

    assert outcome.applied
    assert outcome.derived_value == Decimal("18315018315018315018315018315.02")
    assert store.get(0).currency_amount == Decimal("1e30")


def test_large_total_recomputes_every_row_to_the_cent() -> None:
    engine, store = _engine("5460", _row(1, "50", "2730.00"), _row(2, "20", "546.00"))

    outcomes = engine.on_total_reward_change(Decimal("1e27"))

    assert all(outcome.applied for outcome in outcomes)
    currencies = [row.currency_amount for row in store.all()]
    assert currencies == [Decimal("5e26"), Decimal("1e26")]
    assert all(amount.as_tuple().exponent == -2 for amount in currencies)
    assert [row.percent_amount for row in store.all()] == [Decimal("50"), Decimal("20")]
    assert engine.total_reward == Decimal("1e27")


def test_result_beyond_the_decimal_range_is_reported_not_raised() -> None:
    engine, store = _engine("0.00001", _row(1, "50", "0.00"))

    outcome = engine.on_currency_change(0, Decimal("9e999999"))

    assert isinstance(outcome.condition, UndefinedConversion)
    assert "too large" in str(outcome.condition)
    assert store.get(0).percent_amount == Decimal("50")
    assert store.get(0).currency_amount == Decimal("9e999999")


def test_total_listeners_see_rows_already_recomputed() -> None:
    store = RowStore([_row(1, "50", "500.00"), _row(2, "20", "100.00")])
    total = TotalRewardStore(1000)
    engine = ReconciliationEngine(store, total)
    seen: list[list[Decimal | None]] = []
    total.subscribe(lambda new, previous: seen.append([row.currency_amount for row in store.all()]))

    engine.on_total_reward_change(2000)

    assert seen == [[Decimal("1000.00"), Decimal("200.00")]]


def test_total_change_commits_rows_that_can_be_derived() -> None:
    engine, store = _engine("1000", _row(1, "50", "500.00"), _row(2, "20", "100.00"))
    store.clear(0, RowField.PERCENT_AMOUNT)

    outcomes = engine.on_total_reward_change(3000)

    assert isinstance(outcomes[0].condition, UndefinedConversion)
    assert outcomes[1].derived_value == Decimal("300.00")
    assert store.get(0).currency_amount == Decimal("500.00")
    assert store.get(1).currency_amount == Decimal("300.00")
    assert engine.total_reward == Decimal("3000")


def test_recompute_all_uses_the_current_total() -> None:
    engine, store = _engine("1000", _row(1, "50", "1.00"))

    outcomes = engine.recompute_all()

    assert [outcome.derived_value for outcome in outcomes] == [Decimal("500.00")]
    assert store.get(0).currency_amount == Decimal("500.00")
