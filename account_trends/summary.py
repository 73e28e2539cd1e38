"""Reduce a bucket series to window-wide totals."""

from __future__ import annotations

from collections.abc import Iterable

from .models import ZERO, DayBucket, PeriodTotals


def summarize(buckets: Iterable[DayBucket]) -> PeriodTotals:
    """Sum income and expense independently; empty input yields zeros."""

    income = ZERO
    expense = ZERO
    for bucket in buckets:
        income += bucket.income
        expense += bucket.expense
    return PeriodTotals(income=income, expense=expense)


__all__ = ["summarize"]
