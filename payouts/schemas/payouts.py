"""Schemas for the payout table API and submission-time row validation."""
from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, RootModel, field_serializer, field_validator
from pydantic_core import PydanticCustomError

from payouts.domain.models import RowField

RawNumber = int | float | str | None


def _decimal_text(value: Decimal | None) -> str | None:
    return format(value, "f") if value is not None else None


class PayoutRowPayload(BaseModel):
    """A payout row as it must look when the table is submitted."""

    recipient_count: int
    percent_amount: Decimal
    currency_amount: Decimal | None = None

    @field_validator("recipient_count")
    @classmethod
    def _at_least_one_recipient(cls, value: int) -> int:
        if value < 1:
            raise PydanticCustomError("too_few_recipients", "There must be at least one recipient")
        return value

    @field_validator("percent_amount")
    @classmethod
    def _percent_within_bounds(cls, value: Decimal) -> Decimal:
        if value < 0:
            raise PydanticCustomError("percent_too_low", "Must not be lower than 0")
        if value > 100:
            raise PydanticCustomError("percent_too_high", "Must be 100 or less")
        return value


class PayoutStructure(RootModel[list[PayoutRowPayload]]):
    """Ordered list of payout rows."""


class RawValue(BaseModel):
    """Raw operator input; coerced to a number or a default server-side."""

    value: RawNumber = None


class RowEdit(BaseModel):
    """Edit event for a single field of a row."""

    field: RowField
    value: RawNumber = None


class RowCreate(BaseModel):
    """Initial values for an appended row; omitted fields use defaults."""

    recipient_count: RawNumber = None
    percent_amount: RawNumber = None
    currency_amount: RawNumber = None


class PayoutRowView(BaseModel):
    index: int
    recipient_count: int | None
    percent_amount: Decimal | None
    currency_amount: Decimal | None
    numeric: bool

    @field_serializer("percent_amount", "currency_amount")
    def serialize_amount(self, value: Decimal | None) -> str | None:
        return _decimal_text(value)


class PayoutTableView(BaseModel):
    """Full table snapshot with display labels."""

    total_reward: Decimal
    total_reward_label: str
    rows: list[PayoutRowView]
    percent_sum: Decimal
    percent_sum_label: str

    @field_serializer("total_reward", "percent_sum")
    def serialize_amount(self, value: Decimal) -> str:
        return format(value, "f")


class EditOutcomeView(BaseModel):
    """What the engine derived for one row."""

    row_index: int
    edited_field: RowField | None
    derived_field: RowField
    derived_value: Decimal | None
    condition: str | None = None

    @field_serializer("derived_value")
    def serialize_derived_value(self, value: Decimal | None) -> str | None:
        return _decimal_text(value)


class RowEditResponse(BaseModel):
    outcome: EditOutcomeView
    table: PayoutTableView


class TotalRewardResponse(BaseModel):
    outcomes: list[EditOutcomeView]
    table: PayoutTableView


class ValidationIssueView(BaseModel):
    row_index: int | None
    field: str | None
    message: str


class SubmissionResponse(BaseModel):
    """Result of validating the table on submit."""

    valid: bool
    issues: list[ValidationIssueView]
    table: PayoutTableView
