"""Percentage totals across the payout structure."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, localcontext
from typing import Iterable

from .arithmetic import MAX_PRECISION, round2, to_decimal
from .models import PayoutRow


@dataclass(frozen=True, slots=True)
class PercentSummary:
    """Sum of percentages plus how many rows took part in it."""

    percent_sum: Decimal
    counted_rows: int
    skipped_rows: int


def summarize(rows: Iterable[PayoutRow]) -> PercentSummary:
    """Sum ``percent_amount`` over rows whose fields are all numbers.

    Rows with a cleared or non-numeric field are left out, not counted as zero.
    """

    total = Decimal(0)
    counted = skipped = 0
    with localcontext() as ctx:
        ctx.prec = MAX_PRECISION
        for row in rows:
            if not row.is_numeric():
                skipped += 1
                continue
            total += to_decimal(row.percent_amount)
            counted += 1
    return PercentSummary(percent_sum=round2(total), counted_rows=counted, skipped_rows=skipped)


def percent_sum(rows: Iterable[PayoutRow]) -> Decimal:
    return summarize(rows).percent_sum
