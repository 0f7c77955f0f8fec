"""Domain model and reconciliation rules of the payout table."""

from .aggregate import PercentSummary, percent_sum, summarize
from .arithmetic import currency_from_percent, percent_from_currency, round2
from .engine import DERIVED_FIELD, EditOutcome, ReconciliationEngine
from .errors import (
    InvalidCurrencyAmount,
    InvalidPercent,
    InvalidRecipientCount,
    InvalidTotalReward,
    PayoutError,
    RowNotFound,
    UndefinedConversion,
)
from .models import PayoutRow, RowField
from .rows import RowStore
from .total import TotalRewardStore

__all__ = [
    "DERIVED_FIELD",
    "EditOutcome",
    "InvalidCurrencyAmount",
    "InvalidPercent",
    "InvalidRecipientCount",
    "InvalidTotalReward",
    "PayoutError",
    "PayoutRow",
    "PercentSummary",
    "ReconciliationEngine",
    "RowField",
    "RowNotFound",
    "RowStore",
    "TotalRewardStore",
    "UndefinedConversion",
    "currency_from_percent",
    "percent_from_currency",
    "percent_sum",
    "round2",
    "summarize",
]
