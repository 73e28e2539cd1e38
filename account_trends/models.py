"""Data models and type aliases for ``account_trends``.

Engine values (``Transaction``, ``DayBucket``, ``PeriodTotals``, ``Report``)
are frozen ``dataclass`` objects: every report is recomputed from scratch and
nothing derived is ever mutated in place. Raw input records coming from CSV
files, JSON bodies or the receipt scanner are validated through the pydantic
:class:`TransactionPayload` DTO before they become engine values.

Amounts are ``Decimal`` magnitudes; whether a transaction adds to income or to
expense is decided solely by its :class:`TransactionType`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from decimal import Decimal, InvalidOperation
from enum import Enum, StrEnum
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import MalformedTransaction

ZERO = Decimal("0")

# UTC offsets are under a day, so instants inside these bounds convert into
# any report timezone without leaving the ``datetime`` range.
_EARLIEST_UTC = datetime.min.replace(tzinfo=UTC) + timedelta(days=1)
_LATEST_UTC = datetime.max.replace(tzinfo=UTC) - timedelta(days=1)


def _within_convertible_range(when: datetime) -> bool:
    if when.tzinfo is None or when.utcoffset() is None:
        # Naive values are labelled with the report timezone, never shifted.
        return True
    try:
        utc = when.astimezone(UTC)
    except OverflowError:
        return False
    return _EARLIEST_UTC <= utc <= _LATEST_UTC


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


class TransactionType(StrEnum):
    """Closed tag deciding the effect of a transaction's amount."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


@dataclass(frozen=True, slots=True)
class Transaction:
    """A single income or expense record, read-only to the engine.

    Attributes
    ----------
    date:
        Instant the transaction occurred. Naive values are read as wall-clock
        time in the report timezone; aware values are converted into it.
    type:
        :class:`TransactionType`. Plain strings are accepted and coerced.
    amount:
        Unsigned magnitude. Negative values are rejected.
    description, category:
        Carried through for callers; the engine never reads them.
    """

    date: datetime
    type: TransactionType
    amount: Decimal
    description: str | None = None
    category: str | None = None

    def __post_init__(self) -> None:
        when = self.date
        if isinstance(when, datetime):
            pass
        elif isinstance(when, date):
            # Date-only records land at the start of their civil day.
            object.__setattr__(self, "date", datetime.combine(when, time.min))
        else:
            raise MalformedTransaction(f"date must be a datetime, got {type(when).__name__}")
        if not _within_convertible_range(self.date):
            raise MalformedTransaction(
                f"date {self.date.isoformat()} is outside the supported range"
            )

        try:
            object.__setattr__(self, "type", TransactionType(self.type))
        except ValueError as exc:
            raise MalformedTransaction(f"unknown transaction type {self.type!r}") from exc

        amount = self.amount
        if isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal)):
            raise MalformedTransaction(f"amount must be numeric, got {amount!r}")
        if not isinstance(amount, Decimal):
            amount = Decimal(str(amount))
        if not amount.is_finite():
            raise MalformedTransaction(f"amount must be finite, got {amount!r}")
        if amount < 0:
            raise MalformedTransaction(f"amount must be non-negative, got {amount}")
        object.__setattr__(self, "amount", amount)


Transactions: TypeAlias = Iterable[Transaction]
"""Any iterable of :class:`Transaction` values for one account or scope."""


# ---------------------------------------------------------------------------
# Window presets
# ---------------------------------------------------------------------------


class WindowPreset(Enum):
    """Named trailing windows; ``days is None`` means "all time".

    Members are looked up by key, e.g. ``WindowPreset("7D")``.
    """

    days: int | None
    label: str

    LAST_7_DAYS = ("7D", 7, "Last 7 Days")
    LAST_MONTH = ("1M", 30, "Last Month")
    LAST_3_MONTHS = ("3M", 90, "Last 3 Months")
    LAST_6_MONTHS = ("6M", 180, "Last 6 Months")
    ALL = ("ALL", None, "All Time")

    def __new__(cls, key: str, days: int | None, label: str) -> WindowPreset:
        obj = object.__new__(cls)
        obj._value_ = key
        obj.days = days
        obj.label = label
        return obj

    @property
    def key(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ReportWindow:
    """A resolved ``[start, end]`` instant range, inclusive on both ends.

    ``start_day`` and ``end_day`` are the civil days of the boundaries in
    ``timezone``; ``start_day`` is ``None`` for an unbounded ("all time")
    window whose ``start`` is the minimum representable instant.
    """

    start: datetime
    end: datetime
    timezone: tzinfo
    start_day: date | None
    end_day: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"window start {self.start} is after end {self.end}")

    @property
    def is_unbounded(self) -> bool:
        return self.start_day is None


# ---------------------------------------------------------------------------
# Derived report values
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DayBucket:
    """Income and expense sums for one civil day."""

    day: date
    income: Decimal = ZERO
    expense: Decimal = ZERO

    @property
    def day_key(self) -> str:
        """Stable ``YYYY-MM-DD`` key, unique within a bucket sequence."""
        return self.day.isoformat()

    @property
    def label(self) -> str:
        """Short axis label such as ``"Jan 01"`` (not unique across years)."""
        return self.day.strftime("%b %d")

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True, slots=True)
class PeriodTotals:
    """Window-wide sums. ``net`` is always derived, never stored."""

    income: Decimal = ZERO
    expense: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True, slots=True)
class Report:
    """Result of :func:`account_trends.api.compute_report`.

    ``buckets`` is sorted ascending by day; ``skipped`` counts input records
    that were excluded as malformed.
    """

    preset: WindowPreset
    window: ReportWindow
    buckets: tuple[DayBucket, ...]
    totals: PeriodTotals
    skipped: int = 0


# ---------------------------------------------------------------------------
# DTO for raw input records
# ---------------------------------------------------------------------------


def _parse_amount(raw: Any) -> Decimal:
    if isinstance(raw, bool):
        raise ValueError("amount must be numeric, got a boolean")
    if isinstance(raw, Decimal):
        return raw
    if isinstance(raw, (int, float)):
        return Decimal(str(raw))
    if not isinstance(raw, str):
        raise ValueError(f"amount must be numeric, got {type(raw).__name__}")
    s = raw.strip()
    # Sign and currency symbol may come in either order ("-$1.00" or "$-1.00").
    body = s.lstrip("+-$ ")
    signs = s[: len(s) - len(body)].replace("$", "").replace(" ", "")
    if len(signs) > 1:
        raise ValueError(f"ambiguous sign in amount: {raw!r}")
    negative = signs == "-"
    s = body.replace(",", "")
    if not s:
        raise ValueError("amount is empty")
    try:
        d = Decimal(s)
    except InvalidOperation as exc:
        raise ValueError(f"invalid amount: {raw!r}") from exc
    return -d if negative else d


def _parse_when(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, date):
        return datetime.combine(raw, time.min)
    if not isinstance(raw, str):
        raise ValueError(f"date must be a string or datetime, got {type(raw).__name__}")
    s = raw.strip()
    if not s:
        raise ValueError("date is empty")
    try:
        # ISO 8601: "2024-01-01", "2024-01-01T10:00:00", "...Z", "...+02:00"
        return datetime.fromisoformat(s)
    except ValueError:
        pass
    try:
        # Bank-export style MM/DD/YYYY, optionally followed by a time.
        return datetime.strptime(s.split()[0], "%m/%d/%Y")
    except ValueError as exc:
        raise ValueError(f"unparseable date: {raw!r}") from exc


class TransactionPayload(BaseModel):
    """Validated shape of a raw transaction record.

    Mirrors the mapping produced by CSV rows, JSON bodies and the receipt
    scanner. Unknown keys (ids, account references, memos) are ignored.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, frozen=True)

    date: datetime
    type: TransactionType
    amount: Decimal
    description: str | None = None
    category: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, v: Any) -> datetime:
        return _parse_when(v)

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, v: Any) -> Decimal:
        return _parse_amount(v)

    @field_validator("amount")
    @classmethod
    def _amount_non_negative(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("amount must be finite")
        if v < 0:
            raise ValueError("amount must be non-negative")
        return v

    @field_validator("description", "category")
    @classmethod
    def _blank_to_none(cls, v: str | None) -> str | None:
        return v or None

    @classmethod
    def from_record(
        cls, record: Mapping[str, Any], *, position: int | None = None
    ) -> TransactionPayload:
        """Validate ``record``, raising :class:`MalformedTransaction` on failure."""

        try:
            return cls.model_validate(dict(record))
        except ValidationError as exc:
            reasons = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'record'}: {err['msg']}"
                for err in exc.errors()
            )
            raise MalformedTransaction(reasons, position=position) from exc

    def to_transaction(self) -> Transaction:
        return Transaction(
            date=self.date,
            type=self.type,
            amount=self.amount,
            description=self.description,
            category=self.category,
        )
