"""Group a transaction stream into per-day income/expense buckets.

Buckets are sparse by default: a day without transactions gets no bucket.
Callers that want a continuous series (e.g. for a line chart) opt in through
:func:`fill_empty_days`.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from decimal import Decimal

from .models import ZERO, DayBucket, ReportWindow, Transaction, TransactionType
from .windows import in_window, to_local

_ONE_DAY = timedelta(days=1)


def bucketize(transactions: Iterable[Transaction], window: ReportWindow) -> tuple[DayBucket, ...]:
    """Filter ``transactions`` to ``window`` and sum them per civil day.

    - Membership is inclusive on both window boundaries.
    - Day keys come from the window's timezone, the same calendar used to
      resolve the window.
    - Several transactions on one day are summed, never deduplicated; a day
      may carry both income and expense.
    - Output is sorted ascending by day regardless of input order.

    The input is only iterated, never mutated.
    """

    tz = window.timezone
    # day -> [income, expense]
    sums: dict[date, list[Decimal]] = {}
    for tx in transactions:
        local = to_local(tx.date, tz)
        if not in_window(local, window):
            continue
        acc = sums.setdefault(local.date(), [ZERO, ZERO])
        if tx.type is TransactionType.INCOME:
            acc[0] += tx.amount
        else:
            acc[1] += tx.amount

    return tuple(
        DayBucket(day=day, income=income, expense=expense)
        for day, (income, expense) in sorted(sums.items())
    )


def fill_empty_days(buckets: Sequence[DayBucket], window: ReportWindow) -> tuple[DayBucket, ...]:
    """Return a dense copy of ``buckets`` with zero-valued days inserted.

    The series runs from the window's first civil day (or, for an unbounded
    window, the first bucket's day) through the window's last civil day. An
    unbounded window with no buckets yields an empty tuple.
    """

    if window.start_day is not None:
        first = window.start_day
    elif buckets:
        first = buckets[0].day
    else:
        return ()

    by_day = {b.day: b for b in buckets}
    out: list[DayBucket] = []
    day = first
    while day <= window.end_day:
        out.append(by_day.get(day) or DayBucket(day=day))
        day += _ONE_DAY
    return tuple(out)


__all__ = ["bucketize", "fill_empty_days"]
