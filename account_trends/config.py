"""Environment-driven settings for report computation.

Variables (all optional; the CLI loads a local ``.env`` first):

- ``ACCOUNT_TRENDS_TIMEZONE``: IANA name of the report timezone used to map
  instants to civil days. Default ``UTC``.
- ``ACCOUNT_TRENDS_DEFAULT_PRESET``: window preset used when the caller does
  not pick one. Default ``1M``.

Settings are read on every :func:`load_settings` call so tests and long-lived
hosts observe environment changes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import tzinfo
from zoneinfo import ZoneInfo

from .models import WindowPreset
from .windows import parse_preset

TIMEZONE_ENV = "ACCOUNT_TRENDS_TIMEZONE"
DEFAULT_PRESET_ENV = "ACCOUNT_TRENDS_DEFAULT_PRESET"

DEFAULT_TIMEZONE = "UTC"
DEFAULT_PRESET = WindowPreset.LAST_MONTH


@dataclass(frozen=True, slots=True)
class ReportSettings:
    timezone: tzinfo
    default_preset: WindowPreset


def load_timezone(name: str | None) -> tzinfo:
    """Return the ``ZoneInfo`` for ``name``; blank or ``None`` means UTC.

    Unknown names raise ``zoneinfo.ZoneInfoNotFoundError``.
    """

    key = (name or "").strip() or DEFAULT_TIMEZONE
    return ZoneInfo(key)


def load_report_timezone() -> tzinfo:
    """Return the configured report timezone without touching other settings."""

    return load_timezone(os.getenv(TIMEZONE_ENV))


def load_settings() -> ReportSettings:
    """Read settings from the environment.

    An invalid ``ACCOUNT_TRENDS_DEFAULT_PRESET`` raises
    :class:`~account_trends.errors.InvalidPreset` rather than falling back.
    """

    preset_raw = (os.getenv(DEFAULT_PRESET_ENV) or "").strip()
    return ReportSettings(
        timezone=load_report_timezone(),
        default_preset=parse_preset(preset_raw) if preset_raw else DEFAULT_PRESET,
    )


__all__ = [
    "ReportSettings",
    "load_settings",
    "load_report_timezone",
    "load_timezone",
    "TIMEZONE_ENV",
    "DEFAULT_PRESET_ENV",
]
