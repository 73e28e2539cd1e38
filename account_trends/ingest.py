"""Turn raw records into validated :class:`~account_trends.models.Transaction` values.

Raw records are mappings with at least ``date``, ``type`` and ``amount``
(``description`` and ``category`` are optional). They come from CSV exports,
JSON bodies or the external receipt scanner, and are validated through
:class:`~account_trends.models.TransactionPayload`.

Policy for bad records: a single corrupt record must not abort a report.
:func:`coerce_transactions` excludes it, logs it, and returns it alongside the
good ones so callers can count what was skipped.
"""

from __future__ import annotations

import csv
from collections.abc import Iterable, Mapping
from os import PathLike
from pathlib import Path
from typing import Any

from .errors import MalformedTransaction
from .logging_setup import get_logger
from .models import Transaction, TransactionPayload, TransactionType

_logger = get_logger("account_trends.ingest")

REQUIRED_COLUMNS: frozenset[str] = frozenset({"date", "type", "amount"})


def parse_transaction(
    record: Transaction | Mapping[str, Any], *, position: int | None = None
) -> Transaction:
    """Validate a single record.

    ``Transaction`` values pass through unchanged. Mappings are validated and
    converted; any failure raises :class:`MalformedTransaction` carrying
    ``position`` when given.
    """

    if isinstance(record, Transaction):
        return record
    if not isinstance(record, Mapping):
        raise MalformedTransaction(
            f"expected a mapping, got {type(record).__name__}", position=position
        )
    try:
        return TransactionPayload.from_record(record, position=position).to_transaction()
    except MalformedTransaction as exc:
        if exc.position is None and position is not None:
            raise MalformedTransaction(exc.reason, position=position) from exc
        raise


def coerce_transactions(
    items: Iterable[Transaction | Mapping[str, Any]],
) -> tuple[list[Transaction], list[MalformedTransaction]]:
    """Validate every item, keeping the good ones and collecting the bad.

    Returns ``(transactions, rejected)`` with ``transactions`` in input order.
    """

    good: list[Transaction] = []
    rejected: list[MalformedTransaction] = []
    for pos, item in enumerate(items):
        try:
            good.append(parse_transaction(item, position=pos))
        except MalformedTransaction as exc:
            _logger.warning("ingest:skip position=%d reason=%s", pos, exc.reason)
            rejected.append(exc)
    if rejected:
        _logger.info("ingest:done kept=%d skipped=%d", len(good), len(rejected))
    return good, rejected


def load_transactions_csv(csv_path: str | PathLike[str]) -> list[dict[str, str]]:
    """Read a UTF-8 CSV export into raw records.

    Header names are matched case-insensitively and normalized to lowercase.
    The header must contain ``date``, ``type`` and ``amount``; otherwise
    ``csv.Error`` is raised. Fully blank rows are dropped. Values are returned
    as strings; validation happens in :func:`coerce_transactions`.
    """

    p = Path(csv_path)
    with p.open(encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        if not reader.fieldnames:
            raise csv.Error(f"CSV appears to have no header row: {csv_path}")
        headers = {h.strip().lower() for h in reader.fieldnames if h}
        missing = sorted(REQUIRED_COLUMNS - headers)
        if missing:
            raise csv.Error("CSV header is missing required columns: " + ", ".join(missing))

        rows: list[dict[str, str]] = []
        for row in reader:
            # DictReader puts overflow cells under a ``None`` key; drop them.
            normalized = {
                k.strip().lower(): (v if v is not None else "")
                for k, v in row.items()
                if k is not None
            }
            if all(not v.strip() for v in normalized.values()):
                continue
            rows.append(normalized)
    _logger.debug("ingest:csv_loaded path=%s rows=%d", p, len(rows))
    return rows


def from_receipt_scan(
    payload: Mapping[str, Any],
    *,
    tx_type: TransactionType = TransactionType.EXPENSE,
) -> dict[str, Any]:
    """Map a receipt-scanner payload to a raw transaction record.

    The scanner returns ``{amount, date, description, category}``; receipts
    are expenses unless ``tx_type`` says otherwise. The result still goes
    through :func:`parse_transaction` like any other record.
    """

    return {
        "date": payload.get("date"),
        "type": tx_type,
        "amount": payload.get("amount"),
        "description": payload.get("description"),
        "category": payload.get("category"),
    }


__all__ = [
    "parse_transaction",
    "coerce_transactions",
    "load_transactions_csv",
    "from_receipt_scan",
]
