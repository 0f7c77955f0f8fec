"""Submission-time validation returning a structured result."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable

from pydantic import ValidationError

from payouts.domain.models import PayoutRow
from payouts.schemas.payouts import PayoutStructure


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """One problem found in the payout structure."""

    row_index: int | None
    field: str | None
    message: str


@dataclass(frozen=True, slots=True)
class ValidationResult:
    issues: tuple[ValidationIssue, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.issues

    def for_row(self, row_index: int) -> tuple[ValidationIssue, ...]:
        return tuple(issue for issue in self.issues if issue.row_index == row_index)


def _issue_from_error(error: dict) -> ValidationIssue:
    loc = tuple(error.get("loc", ()))
    row_index = loc[0] if loc and isinstance(loc[0], int) else None
    field = str(loc[1]) if len(loc) > 1 else None
    return ValidationIssue(row_index=row_index, field=field, message=str(error["msg"]))


def validate_structure(rows: Iterable[PayoutRow]) -> ValidationResult:
    """Check every row against :class:`PayoutRowPayload`.

    The percentage sum is not checked; reaching 100 is left to the operator.
    """

    payload = [asdict(row) for row in rows]
    try:
        PayoutStructure.model_validate(payload)
    except ValidationError as exc:
        return ValidationResult(tuple(_issue_from_error(error) for error in exc.errors()))
    return ValidationResult()
