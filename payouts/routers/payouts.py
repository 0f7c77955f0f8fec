"""JSON routes for editing the payout table."""
from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from payouts.core.formatting import format_currency, format_percent
from payouts.core.log import get_logger
from payouts.domain.engine import EditOutcome
from payouts.domain.errors import PayoutError, RowNotFound
from payouts.domain.models import RowField
from payouts.schemas.payouts import (
    EditOutcomeView,
    PayoutRowView,
    PayoutTableView,
    RawValue,
    RowCreate,
    RowEdit,
    RowEditResponse,
    SubmissionResponse,
    TotalRewardResponse,
    ValidationIssueView,
)
from payouts.services import PayoutTable

router = APIRouter(prefix="/payouts", tags=["payouts"])
LOGGER = get_logger(__name__)

T = TypeVar("T")


def get_payout_table(request: Request) -> PayoutTable:
    """Return the table owned by the running application."""

    return request.app.state.payout_table


def _guard(action: Callable[[], T]) -> T:
    try:
        return action()
    except RowNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except PayoutError as exc:
        LOGGER.info("Rejected payout input: %s", exc)
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


def _table_view(table: PayoutTable) -> PayoutTableView:
    rows = table.get_all_rows()
    percent_sum = table.get_percent_sum()
    return PayoutTableView(
        total_reward=table.total_reward,
        total_reward_label=format_currency(table.total_reward, symbol=table.currency_symbol),
        rows=[
            PayoutRowView(
                index=index,
                recipient_count=row.recipient_count,
                percent_amount=row.percent_amount,
                currency_amount=row.currency_amount,
                numeric=row.is_numeric(),
            )
            for index, row in enumerate(rows)
        ],
        percent_sum=percent_sum,
        percent_sum_label=format_percent(percent_sum),
    )


def _outcome_view(outcome: EditOutcome) -> EditOutcomeView:
    return EditOutcomeView(
        row_index=outcome.row_index,
        edited_field=outcome.edited_field,
        derived_field=outcome.derived_field,
        derived_value=outcome.derived_value,
        condition=str(outcome.condition) if outcome.condition is not None else None,
    )


@router.get("/", response_model=PayoutTableView)
def read_table(table: PayoutTable = Depends(get_payout_table)) -> PayoutTableView:
    return _table_view(table)


@router.put("/total", response_model=TotalRewardResponse)
def update_total_reward(
    payload: RawValue,
    table: PayoutTable = Depends(get_payout_table),
) -> TotalRewardResponse:
    outcomes = _guard(lambda: table.on_total_reward_change(payload.value))
    return TotalRewardResponse(
        outcomes=[_outcome_view(outcome) for outcome in outcomes],
        table=_table_view(table),
    )


@router.post("/rows", response_model=PayoutTableView, status_code=status.HTTP_201_CREATED)
def append_row(
    payload: RowCreate | None = None,
    table: PayoutTable = Depends(get_payout_table),
) -> PayoutTableView:
    initial = payload.model_dump(exclude_none=True) if payload is not None else None
    _guard(lambda: table.append_row(initial or None))
    return _table_view(table)


@router.delete("/rows/{row_index}", response_model=PayoutTableView)
def remove_row(row_index: int, table: PayoutTable = Depends(get_payout_table)) -> PayoutTableView:
    _guard(lambda: table.remove_row(row_index))
    return _table_view(table)


@router.patch("/rows/{row_index}", response_model=RowEditResponse)
def edit_row(
    row_index: int,
    payload: RowEdit,
    table: PayoutTable = Depends(get_payout_table),
) -> RowEditResponse:
    outcome = _guard(lambda: table.edit(row_index, payload.field, payload.value))
    return RowEditResponse(outcome=_outcome_view(outcome), table=_table_view(table))


@router.delete("/rows/{row_index}/{field}", response_model=PayoutTableView)
def clear_field(
    row_index: int,
    field: RowField,
    table: PayoutTable = Depends(get_payout_table),
) -> PayoutTableView:
    _guard(lambda: table.clear_field(row_index, field))
    return _table_view(table)


@router.post("/submit", response_model=SubmissionResponse)
def submit_table(table: PayoutTable = Depends(get_payout_table)):
    result = table.validate()
    response = SubmissionResponse(
        valid=result.valid,
        issues=[
            ValidationIssueView(row_index=issue.row_index, field=issue.field, message=issue.message)
            for issue in result.issues
        ],
        table=_table_view(table),
    )
    if not result.valid:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=response.model_dump(mode="json"),
        )
    return response
