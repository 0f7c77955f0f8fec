"""Pydantic schemas for request and response payloads."""

from .payouts import (
    EditOutcomeView,
    PayoutRowPayload,
    PayoutRowView,
    PayoutStructure,
    PayoutTableView,
    RawValue,
    RowCreate,
    RowEdit,
    RowEditResponse,
    SubmissionResponse,
    TotalRewardResponse,
    ValidationIssueView,
)

__all__ = [
    "EditOutcomeView",
    "PayoutRowPayload",
    "PayoutRowView",
    "PayoutStructure",
    "PayoutTableView",
    "RawValue",
    "RowCreate",
    "RowEdit",
    "RowEditResponse",
    "SubmissionResponse",
    "TotalRewardResponse",
    "ValidationIssueView",
]
