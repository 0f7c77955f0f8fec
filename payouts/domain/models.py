"""Row model of the payout table."""
from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class RowField(str, Enum):
    """Editable fields of a payout row."""

    RECIPIENT_COUNT = "recipient_count"
    PERCENT_AMOUNT = "percent_amount"
    CURRENCY_AMOUNT = "currency_amount"


@dataclass(slots=True)
class PayoutRow:
    """One allocation unit of the payout structure.

    A field is ``None`` while its input is cleared mid-edit.
    """

    recipient_count: int | None = 1
    percent_amount: Decimal | None = Decimal(0)
    currency_amount: Decimal | None = Decimal(0)

    def value_of(self, field: RowField) -> int | Decimal | None:
        return getattr(self, field.value)

    def is_numeric(self) -> bool:
        """Return ``True`` when every field holds a finite number."""

        for field in RowField:
            value = self.value_of(field)
            if value is None or isinstance(value, bool):
                return False
            if isinstance(value, Decimal):
                if not value.is_finite():
                    return False
            elif not isinstance(value, (int, float)) or not math.isfinite(value):
                return False
        return True
