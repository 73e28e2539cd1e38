# ruff: noqa: I001
"""CLI for the ``account_trends`` package.

Exposes callable command handlers (``cmd_report``, ``cmd_compare``) that
return process exit codes, and a Typer console interface that wraps them.
Environment variables (``ACCOUNT_TRENDS_*``) are loaded from a local ``.env``
via ``python-dotenv`` before any command runs. Business logic lives in
``account_trends.api`` and the engine modules; this module only parses
arguments, reads files and prints.
"""

from __future__ import annotations

import csv
import json
import sys
from dataclasses import replace
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Annotated
from zoneinfo import ZoneInfoNotFoundError

import typer
from dotenv import load_dotenv
from typer.models import OptionInfo

from .config import load_report_timezone, load_settings, load_timezone
from .errors import ReportError
from .logging_setup import configure_logging, get_logger, level_for_verbosity
from .models import WindowPreset

_logger = get_logger("account_trends.cli")


# ---- Small module-level helpers used by CLI commands -------------------------


def _error(msg: str) -> int:
    print(f"Error: {msg}", file=sys.stderr)
    return 1


def _resolve_context(timezone: str | None, now: str | None) -> tuple[tzinfo, datetime | None]:
    """Resolve the report timezone and the reference instant.

    Raises ``ZoneInfoNotFoundError`` or ``ValueError`` with a message suitable
    for the user.
    """

    tz = load_timezone(timezone) if timezone else load_report_timezone()
    reference: datetime | None = None
    if now:
        try:
            reference = datetime.fromisoformat(now.strip())
        except ValueError as e:
            raise ValueError(f"invalid --now value {now!r}; expected ISO 8601") from e
    return tz, reference


def _load_records(csv_path: str | Path) -> list[dict[str, str]]:
    from .ingest import load_transactions_csv

    return load_transactions_csv(csv_path)


# ---- Command handlers ---------------------------------------------------------


def cmd_report(
    csv_path: str | Path,
    *,
    preset: str | None = None,
    now: str | None = None,
    timezone: str | None = None,
    fill_gaps: bool = False,
    as_json: bool = False,
) -> int:
    """Compute a report from a CSV file and print it to stdout.

    Behavior
    --------
    - Reads ``csv_path`` (columns ``date,type,amount`` at minimum).
    - Resolves the window from ``preset`` (default: configured preset),
      ``now`` (default: current time) and ``timezone`` (default: configured
      report timezone).
    - Prints a table, or JSON when ``as_json`` is set. With ``fill_gaps`` the
      day series is made dense before printing.
    - Notes the number of skipped malformed rows below the table (the JSON
      form carries it as ``skipped``).

    Errors are written to stderr and the function returns ``1``; success
    returns ``0``.
    """

    from .api import compute_report
    from .bucketing import fill_empty_days
    from .render import render_report, report_to_dict

    try:
        tz, reference = _resolve_context(timezone, now)
        selected = preset or load_settings().default_preset
        records = _load_records(csv_path)
        report = compute_report(records, selected, reference, tz=tz)
    except FileNotFoundError:
        return _error(f"File not found: {csv_path}")
    except PermissionError:
        return _error(f"Permission denied: {csv_path}")
    except csv.Error as e:
        return _error(f"Failed to parse CSV: {e}")
    except ZoneInfoNotFoundError:
        return _error(f"Unknown timezone: {timezone or 'from environment'}")
    except (ReportError, ValueError) as e:
        return _error(str(e))

    if fill_gaps:
        report = replace(report, buckets=fill_empty_days(report.buckets, report.window))

    if as_json:
        print(json.dumps(report_to_dict(report), indent=2))
    else:
        print(render_report(report), end="")
    return 0


def cmd_compare(
    csv_path: str | Path,
    *,
    now: str | None = None,
    timezone: str | None = None,
) -> int:
    """Print income/expense/net totals for every window preset.

    The CSV is parsed once; each preset is computed through a
    :class:`~account_trends.cache.ReportCache` keyed on the same dataset.
    """

    from .cache import ReportCache
    from .render import render_comparison

    try:
        tz, reference = _resolve_context(timezone, now)
        records = _load_records(csv_path)
    except FileNotFoundError:
        return _error(f"File not found: {csv_path}")
    except PermissionError:
        return _error(f"Permission denied: {csv_path}")
    except csv.Error as e:
        return _error(f"Failed to parse CSV: {e}")
    except ZoneInfoNotFoundError:
        return _error(f"Unknown timezone: {timezone or 'from environment'}")
    except (ReportError, ValueError) as e:
        return _error(str(e))

    reference = reference or datetime.now(tz)
    cache = ReportCache(max_entries=len(WindowPreset))
    reports = [cache.get_or_compute(records, p, reference, tz=tz) for p in WindowPreset]
    _logger.debug("compare:done presets=%d cache_misses=%d", len(reports), cache.misses)

    print(render_comparison(reports), end="")
    skipped = reports[0].skipped if reports else 0
    if skipped:
        print(f"Skipped {skipped} malformed record(s).", file=sys.stderr)
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Summarize income and expense transactions from a CSV into daily "
        "buckets over a trailing window. Loads ACCOUNT_TRENDS_* settings from a "
        "local .env before running."
    ),
)

# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults).
CSV_PATH_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--csv-path",
    help="Path to a CSV with at least date,type,amount columns",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files itself
)
NOW_OPTION: OptionInfo = typer.Option(
    "--now", help="Reference instant (ISO 8601). Defaults to the current time."
)
TIMEZONE_OPTION: OptionInfo = typer.Option(
    "--timezone",
    help="IANA timezone for civil days (overrides ACCOUNT_TRENDS_TIMEZONE).",
)
LOG_LEVEL_OPTION: OptionInfo = typer.Option(
    "--log-level",
    help="Log level name or number (overrides -v and ACCOUNT_TRENDS_LOG_LEVEL).",
)
VERBOSE_OPTION: OptionInfo = typer.Option(
    "--verbose",
    "-v",
    count=True,
    help="Log more: -v for INFO, -vv for DEBUG.",
)


@app.command("report")
def report_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    preset: Annotated[
        str | None,
        typer.Option(
            "--preset",
            help=(
                "Window preset: 7D, 1M, 3M, 6M or ALL "
                "(default: ACCOUNT_TRENDS_DEFAULT_PRESET or 1M)."
            ),
        ),
    ] = None,
    now: Annotated[str | None, NOW_OPTION] = None,
    timezone: Annotated[str | None, TIMEZONE_OPTION] = None,
    fill_gaps: Annotated[
        bool, typer.Option("--fill-gaps", help="Insert zero rows for days without transactions.")
    ] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON instead of a table.")] = False,
) -> None:
    """Print daily buckets and totals for one window."""

    rc = cmd_report(
        csv_path,
        preset=preset,
        now=now,
        timezone=timezone,
        fill_gaps=fill_gaps,
        as_json=as_json,
    )
    if rc:
        raise typer.Exit(rc)


@app.command("compare")
def compare_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    now: Annotated[str | None, NOW_OPTION] = None,
    timezone: Annotated[str | None, TIMEZONE_OPTION] = None,
) -> None:
    """Print totals for every window preset."""

    rc = cmd_compare(csv_path, now=now, timezone=timezone)
    if rc:
        raise typer.Exit(rc)


@app.command("presets")
def presets_cmd() -> None:
    """List the available window presets."""

    for p in WindowPreset:
        days = "all time" if p.days is None else f"{p.days} days"
        typer.echo(f"{p.key}\t{p.label}\t{days}")


@app.callback()
def _root(
    log_level: Annotated[str | None, LOG_LEVEL_OPTION] = None,
    verbose: Annotated[int, VERBOSE_OPTION] = 0,
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    try:
        configure_logging(log_level or level_for_verbosity(verbose))
    except ValueError as e:
        raise typer.Exit(_error(str(e))) from e


if __name__ == "__main__":  # pragma: no cover
    app()
