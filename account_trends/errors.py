"""Exception types raised by the ``account_trends`` engine.

The taxonomy is narrow: the engine is pure arithmetic over
already-fetched records, so the only failures are a preset key outside the
closed set (a caller bug) and an individual record that cannot be read as a
transaction (skipped and counted by the report façade).
"""

from __future__ import annotations

from typing import Any


class ReportError(Exception):
    """Base class for all errors raised by ``account_trends``."""


class InvalidPreset(ReportError, ValueError):
    """A window preset key outside ``{7D, 1M, 3M, 6M, ALL}``.

    This is a programming-contract violation. It is raised immediately and is
    never silently replaced by a default preset.
    """

    def __init__(self, key: Any) -> None:
        from .models import WindowPreset  # local import to avoid a cycle

        allowed = ", ".join(p.value for p in WindowPreset)
        super().__init__(f"unknown window preset {key!r}; expected one of: {allowed}")
        self.key = key


class MalformedTransaction(ReportError, ValueError):
    """A record that cannot be used as a transaction.

    Attributes
    ----------
    reason:
        Human-readable description of what was wrong (bad date, unknown type,
        negative or non-numeric amount).
    position:
        0-based index of the record in the caller's input when known.
    """

    def __init__(self, reason: str, *, position: int | None = None) -> None:
        where = f" at position {position}" if position is not None else ""
        super().__init__(f"malformed transaction{where}: {reason}")
        self.reason = reason
        self.position = position


__all__ = ["ReportError", "InvalidPreset", "MalformedTransaction"]
