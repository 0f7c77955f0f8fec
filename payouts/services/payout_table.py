"""Service facade over the payout rows, the total reward and the engine."""
from __future__ import annotations

from contextlib import contextmanager
from decimal import Decimal
from threading import RLock
from typing import Iterable, Iterator, Mapping, Protocol

from payouts.core.config import PayoutSettings
from payouts.core.log import get_logger, log_context
from payouts.domain.aggregate import PercentSummary, summarize
from payouts.domain.arithmetic import currency_from_percent, to_decimal
from payouts.domain.engine import EditOutcome, ReconciliationEngine
from payouts.domain.models import PayoutRow, RowField
from payouts.domain.rows import RowStore
from payouts.domain.total import TotalRewardStore
from payouts.domain.validation import (
    DEFAULT_CURRENCY,
    DEFAULT_PERCENT,
    DEFAULT_RECIPIENT_COUNT,
    DEFAULT_TOTAL_REWARD,
    coerce_number,
    ensure_currency_amount,
    ensure_percent,
    ensure_recipient_count,
    ensure_total_reward,
)

from .validation import ValidationResult, validate_structure

LOGGER = get_logger(__name__)


class RowSeedLike(Protocol):
    recipient_count: int
    percent_amount: Decimal
    currency_amount: Decimal | None


class PayoutTable:
    """Entry point used by the presentation layer.

    Raw input is coerced to a number (or a per-field default) and range-checked
    here; only then is it handed to the :class:`ReconciliationEngine`. Every
    read-compute-write sequence runs under a single lock.
    """

    def __init__(
        self,
        total_reward: int | float | Decimal = 0,
        rows: Iterable[RowSeedLike] = (),
        *,
        currency_symbol: str = "$",
    ) -> None:
        self._lock = RLock()
        self.currency_symbol = currency_symbol
        self._total_reward = TotalRewardStore(ensure_total_reward(to_decimal(total_reward)))
        self._rows = RowStore()
        self._engine = ReconciliationEngine(self._rows, self._total_reward)
        for seed in rows:
            self._rows.append(
                self._build_row(seed.recipient_count, seed.percent_amount, seed.currency_amount)
            )

    @classmethod
    def from_settings(cls, settings: PayoutSettings) -> "PayoutTable":
        table = cls(
            settings.total_reward,
            settings.seed_rows,
            currency_symbol=settings.currency_symbol,
        )
        LOGGER.info(
            "Payout table seeded with %d rows, total reward %s",
            len(settings.seed_rows),
            settings.total_reward,
        )
        return table

    @contextmanager
    def _editing(self, field: str, row_index: int | None = None) -> Iterator[None]:
        with self._lock, log_context.bound(row=row_index, field=field):
            yield

    def _build_row(
        self,
        recipient_count: object,
        percent_amount: object,
        currency_amount: object = None,
    ) -> PayoutRow:
        count = ensure_recipient_count(coerce_number(recipient_count, DEFAULT_RECIPIENT_COUNT))
        percent = ensure_percent(coerce_number(percent_amount, DEFAULT_PERCENT))
        if currency_amount is None:
            currency = currency_from_percent(percent, self._total_reward.value, count)
        else:
            currency = ensure_currency_amount(coerce_number(currency_amount, DEFAULT_CURRENCY))
        return PayoutRow(recipient_count=count, percent_amount=percent, currency_amount=currency)

    @property
    def total_reward(self) -> Decimal:
        return self._total_reward.value

    def __len__(self) -> int:
        return len(self._rows)

    def on_recipient_count_change(self, row_index: int, raw_value: object) -> EditOutcome:
        count = ensure_recipient_count(coerce_number(raw_value, DEFAULT_RECIPIENT_COUNT))
        with self._editing(RowField.RECIPIENT_COUNT.value, row_index):
            return self._engine.on_recipient_count_change(row_index, count)

    def on_percent_change(self, row_index: int, raw_value: object) -> EditOutcome:
        percent = ensure_percent(coerce_number(raw_value, DEFAULT_PERCENT))
        with self._editing(RowField.PERCENT_AMOUNT.value, row_index):
            return self._engine.on_percent_change(row_index, percent)

    def on_currency_change(self, row_index: int, raw_value: object) -> EditOutcome:
        currency = ensure_currency_amount(coerce_number(raw_value, DEFAULT_CURRENCY))
        with self._editing(RowField.CURRENCY_AMOUNT.value, row_index):
            return self._engine.on_currency_change(row_index, currency)

    def on_total_reward_change(self, raw_value: object) -> tuple[EditOutcome, ...]:
        total = ensure_total_reward(coerce_number(raw_value, DEFAULT_TOTAL_REWARD))
        with self._editing("total_reward"):
            return self._engine.on_total_reward_change(total)

    def edit(self, row_index: int, field: RowField, raw_value: object) -> EditOutcome:
        """Dispatch an edit event by field name."""

        handlers = {
            RowField.RECIPIENT_COUNT: self.on_recipient_count_change,
            RowField.PERCENT_AMOUNT: self.on_percent_change,
            RowField.CURRENCY_AMOUNT: self.on_currency_change,
        }
        return handlers[RowField(field)](row_index, raw_value)

    def clear_field(self, row_index: int, field: RowField) -> PayoutRow:
        """Blank one field without recomputing anything."""

        with self._editing(RowField(field).value, row_index):
            self._rows.clear(row_index, RowField(field))
            return self._rows.get(row_index)

    def append_row(self, initial: Mapping[str, object] | None = None) -> int:
        """Append a row and return its index.

        Without ``initial`` the row is ``{1, 0, 0}``. When ``initial`` names no
        currency amount it is derived from the percentage.
        """

        with self._lock:
            if initial is None:
                row = PayoutRow()
            else:
                row = self._build_row(
                    initial.get("recipient_count"),
                    initial.get("percent_amount"),
                    initial.get("currency_amount"),
                )
            index = self._rows.append(row)
        LOGGER.debug("Appended row %d", index)
        return index

    def remove_row(self, row_index: int) -> PayoutRow:
        with self._lock:
            removed = self._rows.remove(row_index)
        LOGGER.debug("Removed row %d", row_index)
        return removed

    def get_row(self, row_index: int) -> PayoutRow:
        with self._lock:
            return self._rows.get(row_index)

    def get_all_rows(self) -> tuple[PayoutRow, ...]:
        with self._lock:
            return self._rows.all()

    def get_percent_sum(self) -> Decimal:
        return self.summary().percent_sum

    def summary(self) -> PercentSummary:
        with self._lock:
            return summarize(self._rows.all())

    def validate(self) -> ValidationResult:
        """Submission-time check of every row."""

        result = validate_structure(self.get_all_rows())
        if result.valid:
            LOGGER.info("Payout structure submitted with %d rows", len(self))
        else:
            LOGGER.warning("Payout structure rejected with %d issues", len(result.issues))
        return result
