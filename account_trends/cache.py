"""Caller-side memoization of reports.

The engine itself never caches. Hosts that recompute on every UI interaction
can wrap it in :class:`ReportCache`, whose key is

    ``(dataset_id, preset, reference civil day, timezone)``

- ``dataset_id`` (:func:`compute_dataset_id`) identifies the transaction set
  by content, independent of input order;
- the reference day keeps "now"-relative windows from going stale past
  midnight.

``ReportCache`` is not thread-safe; use one per worker or guard it.
"""

from __future__ import annotations

import hashlib
import json
from collections import OrderedDict
from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import date, datetime, tzinfo
from typing import Any, TypeAlias

from .api import compute_report
from .config import load_report_timezone
from .ingest import coerce_transactions
from .logging_setup import get_logger
from .models import Report, Transaction, WindowPreset
from .windows import civil_day, parse_preset

_logger = get_logger("account_trends.cache")

CacheKey: TypeAlias = tuple[str, str, date, str]


def compute_fingerprint(tx: Transaction) -> str:
    """Stable SHA-256 over a transaction's canonical fields.

    Amounts are normalized so ``10`` and ``10.00`` fingerprint the same.
    """

    payload = {
        "date": tx.date.isoformat(),
        "type": tx.type.value,
        "amount": format(tx.amount.normalize(), "f"),
        "description": tx.description,
        "category": tx.category,
    }
    data = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def compute_dataset_id(transactions: Iterable[Transaction]) -> str:
    """Return a content identity for a transaction set.

    Fingerprints are sorted, so the same multiset of transactions in any order
    yields the same id; duplicates still count.
    """

    fps = sorted(compute_fingerprint(tx) for tx in transactions)
    data = json.dumps({"fps": fps}, separators=(",", ":"))
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def _tz_name(tz: tzinfo) -> str:
    return getattr(tz, "key", None) or str(tz)


class ReportCache:
    """Bounded in-memory cache of :class:`Report` values.

    Oldest entries are evicted first once ``max_entries`` is exceeded.
    """

    def __init__(self, max_entries: int = 32) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be a positive integer")
        self.max_entries = max_entries
        self._entries: OrderedDict[CacheKey, Report] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def get_or_compute(
        self,
        transactions: Iterable[Transaction | Mapping[str, Any]],
        preset: WindowPreset | str,
        now: datetime | None = None,
        *,
        tz: tzinfo | None = None,
    ) -> Report:
        """Return the cached report for this key, computing it on a miss.

        ``tz`` defaults to the configured report timezone, as in
        :func:`~account_trends.api.compute_report`.
        """

        resolved = parse_preset(preset)
        zone = tz if tz is not None else load_report_timezone()
        reference = now if now is not None else datetime.now(zone)
        parsed, rejected = coerce_transactions(transactions)
        key: CacheKey = (
            compute_dataset_id(parsed),
            resolved.key,
            civil_day(reference, zone),
            _tz_name(zone),
        )

        cached = self._entries.get(key)
        if cached is not None:
            self.hits += 1
            self._entries.move_to_end(key)
            _logger.debug("cache:hit preset=%s day=%s", resolved.key, key[2])
            if cached.skipped != len(rejected):
                cached = replace(cached, skipped=len(rejected))
            return cached

        self.misses += 1
        _logger.debug("cache:miss preset=%s day=%s", resolved.key, key[2])
        report = replace(
            compute_report(parsed, resolved, reference, tz=zone), skipped=len(rejected)
        )
        self._entries[key] = report
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
        return report


__all__ = ["ReportCache", "compute_dataset_id", "compute_fingerprint"]
