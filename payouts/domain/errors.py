"""Error kinds raised at the payout-table boundary or reported by the engine."""
from __future__ import annotations

from decimal import Decimal


class PayoutError(Exception):
    """Base class for payout-table errors."""


class InvalidRecipientCount(PayoutError, ValueError):
    """Recipient count is not a whole number of at least one."""

    def __init__(self, value: Decimal | int) -> None:
        super().__init__(f"There must be at least one recipient (got {value}).")
        self.value = value


class InvalidPercent(PayoutError, ValueError):
    """Percentage lies outside ``[0, 100]``."""

    def __init__(self, value: Decimal) -> None:
        message = "Must not be lower than 0" if value < 0 else "Must be 100 or less"
        super().__init__(f"{message} (got {value}).")
        self.value = value


class InvalidCurrencyAmount(PayoutError, ValueError):
    """Currency amount is negative."""

    def __init__(self, value: Decimal) -> None:
        super().__init__(f"Currency amount must not be lower than 0 (got {value}).")
        self.value = value


class InvalidTotalReward(PayoutError, ValueError):
    """Total reward is negative."""

    def __init__(self, value: Decimal) -> None:
        super().__init__(f"Total reward must not be lower than 0 (got {value}).")
        self.value = value


class RowNotFound(PayoutError, IndexError):
    """No payout row exists at the requested position."""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"No payout row at index {index} (table has {size} rows).")
        self.index = index
        self.size = size


class UndefinedConversion(PayoutError, ArithmeticError):
    """A derived value cannot be computed from the row's current state."""

    def __init__(self, message: str, *, row_index: int | None = None) -> None:
        super().__init__(message)
        self.row_index = row_index
