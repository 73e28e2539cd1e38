"""Window resolution and civil-day helpers.

A single timezone policy applies to every stage of the engine:

- aware instants are converted into the report timezone;
- naive instants are read as wall-clock time in the report timezone.

The bucketizer imports :func:`to_local` from here, so the window boundaries
and the day keys can never be computed under different calendars.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta, tzinfo

from .errors import InvalidPreset
from .models import ReportWindow, WindowPreset

# Lower bound of the "all time" window. Compared against, never converted:
# shifting it into a zone west of UTC would underflow ``datetime``.
MIN_INSTANT = datetime.min.replace(tzinfo=UTC)


def parse_preset(key: WindowPreset | str) -> WindowPreset:
    """Return the :class:`WindowPreset` for ``key`` (case-insensitive).

    Raises :class:`InvalidPreset` for anything outside the closed set.
    """

    if isinstance(key, WindowPreset):
        return key
    if isinstance(key, str):
        try:
            return WindowPreset(key.strip().upper())
        except ValueError:
            pass
    raise InvalidPreset(key)


def to_local(instant: datetime, tz: tzinfo) -> datetime:
    """Express ``instant`` as an aware datetime in ``tz``."""

    if instant.tzinfo is None or instant.utcoffset() is None:
        return instant.replace(tzinfo=tz)
    return instant.astimezone(tz)


def civil_day(instant: datetime, tz: tzinfo) -> date:
    return to_local(instant, tz).date()


def start_of_day(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def end_of_day(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.max, tzinfo=tz)


def resolve_window(
    preset: WindowPreset | str,
    now: datetime,
    *,
    tz: tzinfo = UTC,
) -> ReportWindow:
    """Map ``preset`` to a concrete inclusive ``[start, end]`` range.

    Parameters
    ----------
    preset:
        A :class:`WindowPreset` or its key (``"7D"``, ``"1M"``, ``"3M"``,
        ``"6M"``, ``"ALL"``).
    now:
        Reference instant supplied by the caller. This function never reads
        the process clock.
    tz:
        Report timezone used to find civil-day boundaries.

    Returns
    -------
    ReportWindow
        For a day-count preset ``d``: from the start of the civil day of
        ``now - d days`` to the end of the civil day of ``now``. For ``ALL``:
        from :data:`MIN_INSTANT` to the end of the civil day of ``now``.
    """

    resolved = parse_preset(preset)
    today = civil_day(now, tz)
    end = end_of_day(today, tz)

    if resolved.days is None:
        return ReportWindow(start=MIN_INSTANT, end=end, timezone=tz, start_day=None, end_day=today)

    first = today - timedelta(days=resolved.days)
    return ReportWindow(
        start=start_of_day(first, tz),
        end=end,
        timezone=tz,
        start_day=first,
        end_day=today,
    )


def in_window(instant: datetime, window: ReportWindow) -> bool:
    """Return whether ``instant`` falls inside ``window`` (inclusive)."""

    return window.start <= to_local(instant, window.timezone) <= window.end


__all__ = [
    "MIN_INSTANT",
    "parse_preset",
    "to_local",
    "civil_day",
    "start_of_day",
    "end_of_day",
    "resolve_window",
    "in_window",
]
