"""Public interface for the ``account_trends`` package.

This module exposes the package's API functions and public models/types as the
stable import surface. There is no runtime logic here, only re-exports.
"""

from .api import compute_report
from .bucketing import bucketize, fill_empty_days
from .cache import ReportCache, compute_dataset_id
from .errors import InvalidPreset, MalformedTransaction, ReportError
from .ingest import (
    coerce_transactions,
    from_receipt_scan,
    load_transactions_csv,
    parse_transaction,
)
from .models import (
    DayBucket,
    PeriodTotals,
    Report,
    ReportWindow,
    Transaction,
    TransactionPayload,
    Transactions,
    TransactionType,
    WindowPreset,
)
from .render import render_report, report_to_dict
from .summary import summarize
from .windows import parse_preset, resolve_window

__all__ = [
    # API
    "compute_report",
    "resolve_window",
    "parse_preset",
    "bucketize",
    "fill_empty_days",
    "summarize",
    "render_report",
    "report_to_dict",
    "ReportCache",
    "compute_dataset_id",
    # Ingest
    "parse_transaction",
    "coerce_transactions",
    "load_transactions_csv",
    "from_receipt_scan",
    # Models / types
    "Transaction",
    "TransactionType",
    "TransactionPayload",
    "Transactions",
    "WindowPreset",
    "ReportWindow",
    "DayBucket",
    "PeriodTotals",
    "Report",
    # Errors
    "ReportError",
    "InvalidPreset",
    "MalformedTransaction",
]
