"""Reconciliation of percentage and currency amounts across payout rows.

Each edit event names one authoritative field. The engine stores the operator's
value for that field as given and recomputes exactly one other field of the
same row, following :data:`DERIVED_FIELD`. A total-reward change recomputes the
currency amount of every row and never touches percentages, so no write made
here can trigger a second round of recomputation.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, DivisionByZero, InvalidOperation, Overflow
from types import MappingProxyType

from payouts.core.log import get_logger, timeit

from .arithmetic import Number, currency_from_percent, percent_from_currency, to_decimal
from .errors import UndefinedConversion
from .models import PayoutRow, RowField
from .rows import RowStore
from .total import TotalRewardStore

LOGGER = get_logger(__name__)

# edited field -> recomputed field
DERIVED_FIELD = MappingProxyType(
    {
        RowField.RECIPIENT_COUNT: RowField.CURRENCY_AMOUNT,
        RowField.PERCENT_AMOUNT: RowField.CURRENCY_AMOUNT,
        RowField.CURRENCY_AMOUNT: RowField.PERCENT_AMOUNT,
    }
)


@dataclass(frozen=True, slots=True)
class EditOutcome:
    """Result of reconciling one row.

    ``edited_field`` is ``None`` when the recompute came from a total-reward
    change. ``condition`` carries the reason when nothing could be derived.
    """

    row_index: int
    edited_field: RowField | None
    derived_field: RowField
    derived_value: Decimal | None
    condition: UndefinedConversion | None = None

    @property
    def applied(self) -> bool:
        return self.condition is None

    def raise_for_condition(self) -> None:
        if self.condition is not None:
            raise self.condition


class ReconciliationEngine:
    """Apply edit events to a :class:`RowStore` against a shared total reward."""

    def __init__(self, rows: RowStore, total_reward: TotalRewardStore) -> None:
        self._rows = rows
        self._total_reward = total_reward
        self._unsubscribe = total_reward.subscribe(self._on_total_changed)

    @property
    def total_reward(self) -> Decimal:
        return self._total_reward.value

    def close(self) -> None:
        """Stop following total-reward changes."""

        self._unsubscribe()

    def on_recipient_count_change(self, row_index: int, recipient_count: int) -> EditOutcome:
        return self._apply_edit(row_index, RowField.RECIPIENT_COUNT, int(recipient_count))

    def on_percent_change(self, row_index: int, percent: Number) -> EditOutcome:
        return self._apply_edit(row_index, RowField.PERCENT_AMOUNT, to_decimal(percent))

    def on_currency_change(self, row_index: int, currency: Number) -> EditOutcome:
        return self._apply_edit(row_index, RowField.CURRENCY_AMOUNT, to_decimal(currency))

    def on_total_reward_change(self, total: Number) -> tuple[EditOutcome, ...]:
        """Set the total reward; returns one outcome per row, or none if unchanged."""

        total = to_decimal(total)
        previous = self._total_reward.value
        if total == previous:
            return ()
        return self._reconcile_total(total, previous, publish=True)

    def recompute_all(self) -> tuple[EditOutcome, ...]:
        """Re-derive every row's currency amount from its percentage."""

        total = self._total_reward.value
        return self._reconcile_total(total, total, publish=False)

    def _on_total_changed(self, total: Decimal, previous: Decimal) -> None:
        self._reconcile_total(total, previous, publish=False)

    def _reconcile_total(
        self,
        total: Decimal,
        previous: Decimal,
        *,
        publish: bool,
    ) -> tuple[EditOutcome, ...]:
        """Derive every row against ``total`` first, then commit.

        With ``publish`` the total itself is stored once the rows are written,
        without calling back into this engine.
        """

        with timeit(
            "Currency recompute",
            logger=LOGGER,
            level=logging.DEBUG,
            unit="rows",
            total=len(self._rows),
        ):
            outcomes = tuple(
                self._derive_outcome(index, row, None, RowField.CURRENCY_AMOUNT, total)
                for index, row in enumerate(self._rows.all())
            )
            for outcome in outcomes:
                if outcome.applied:
                    self._rows.set(outcome.row_index, outcome.derived_field, outcome.derived_value)
            if publish:
                self._total_reward.set(total, skip=self._on_total_changed)
        LOGGER.info(
            "Total reward %s -> %s, %d of %d rows recomputed",
            previous,
            total,
            sum(outcome.applied for outcome in outcomes),
            len(outcomes),
        )
        return outcomes

    def _apply_edit(self, row_index: int, field: RowField, value: int | Decimal) -> EditOutcome:
        self._rows.set(row_index, field, value)
        row = self._rows.get(row_index)
        outcome = self._derive_outcome(
            row_index, row, field, DERIVED_FIELD[field], self._total_reward.value
        )
        if outcome.applied:
            self._rows.set(row_index, outcome.derived_field, outcome.derived_value)
            LOGGER.debug(
                "Row %d: %s -> %s=%s",
                row_index,
                field.value,
                outcome.derived_field.value,
                outcome.derived_value,
            )
        return outcome

    def _derive_outcome(
        self,
        row_index: int,
        row: PayoutRow,
        edited: RowField | None,
        target: RowField,
        total: Decimal,
    ) -> EditOutcome:
        try:
            value = _derive(row_index, row, target, total)
        except UndefinedConversion as exc:
            LOGGER.warning("Row %d: %s, %s left unchanged", row_index, exc, target.value)
            return EditOutcome(row_index, edited, target, None, condition=exc)
        return EditOutcome(row_index, edited, target, value)


def _derive(row_index: int, row: PayoutRow, target: RowField, total: Decimal) -> Decimal:
    count = row.recipient_count
    if count is None:
        raise UndefinedConversion("recipient count is cleared", row_index=row_index)
    source = row.percent_amount if target is RowField.CURRENCY_AMOUNT else row.currency_amount
    if source is None:
        name = "percentage" if target is RowField.CURRENCY_AMOUNT else "currency amount"
        raise UndefinedConversion(f"{name} is cleared", row_index=row_index)

    try:
        if target is RowField.CURRENCY_AMOUNT:
            return currency_from_percent(source, total, count)
        return percent_from_currency(source, total, count)
    except DivisionByZero:
        raise UndefinedConversion(
            "percentage is undefined while the total reward is 0", row_index=row_index
        ) from None
    except (InvalidOperation, Overflow):
        raise UndefinedConversion(
            f"{target.value} is too large to represent", row_index=row_index
        ) from None
