"""Public report façade for the ``account_trends`` package.

:func:`compute_report` composes the three engine stages

1. window resolution (:mod:`account_trends.windows`),
2. day bucketing (:mod:`account_trends.bucketing`),
3. summarization (:mod:`account_trends.summary`),

into one call. Every invocation is a pure function of ``(transactions,
preset, now, tz)``; the only ambient reads are the clock (when ``now`` is
omitted) and the configured timezone (when ``tz`` is omitted).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime, tzinfo
from typing import Any

from .bucketing import bucketize
from .config import load_report_timezone
from .ingest import coerce_transactions
from .logging_setup import get_logger
from .models import Report, Transaction, WindowPreset
from .summary import summarize
from .windows import parse_preset, resolve_window

_logger = get_logger("account_trends.api")


def compute_report(
    transactions: Iterable[Transaction | Mapping[str, Any]],
    preset: WindowPreset | str,
    now: datetime | None = None,
    *,
    tz: tzinfo | None = None,
) -> Report:
    """Bucket and summarize ``transactions`` over the window ``preset``.

    Parameters
    ----------
    transactions:
        A bounded, already-fetched collection for one account or scope.
        ``Transaction`` values are used as-is; raw mappings are validated and
        malformed ones are excluded and counted in ``Report.skipped``.
    preset:
        A :class:`WindowPreset` or its key. Unknown keys raise
        :class:`~account_trends.errors.InvalidPreset` before any work is done.
    now:
        Reference instant. Defaults to the current time in ``tz``; pass it
        explicitly for deterministic results.
    tz:
        Report timezone. Defaults to the configured
        ``ACCOUNT_TRENDS_TIMEZONE`` (``UTC`` when unset).

    Returns
    -------
    Report
        Sparse, ascending day buckets plus window-wide totals.
    """

    resolved = parse_preset(preset)
    zone = tz if tz is not None else load_report_timezone()
    reference = now if now is not None else datetime.now(zone)

    parsed, rejected = coerce_transactions(transactions)
    window = resolve_window(resolved, reference, tz=zone)
    buckets = bucketize(parsed, window)
    totals = summarize(buckets)

    _logger.debug(
        "report:computed preset=%s end_day=%s inputs=%d skipped=%d buckets=%d",
        resolved.key,
        window.end_day.isoformat(),
        len(parsed) + len(rejected),
        len(rejected),
        len(buckets),
    )
    return Report(
        preset=resolved,
        window=window,
        buckets=buckets,
        totals=totals,
        skipped=len(rejected),
    )


__all__ = ["compute_report"]
