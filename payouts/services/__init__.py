"""Service layer entrypoints for the payout table."""

from .payout_table import PayoutTable
from .validation import ValidationIssue, ValidationResult, validate_structure

__all__ = [
    "PayoutTable",
    "ValidationIssue",
    "ValidationResult",
    "validate_structure",
]
