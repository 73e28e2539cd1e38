"""Plain-text and JSON views of a :class:`~account_trends.models.Report`.

Rendering returns strings; printing them is the caller's responsibility.
Tables are drawn with ``rich`` into an in-memory console with colors
disabled, so the output is stable across terminals.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
from io import StringIO
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table

from .models import DayBucket, Report

_CENTS = Decimal("0.01")


def format_amount(value: Decimal) -> str:
    """Two decimals, ASCII dot, leading minus for negatives."""

    return f"{value.quantize(_CENTS, rounding=ROUND_HALF_UP):.2f}"


def _print_to_string(renderable: Any, *, width: int) -> str:
    console = Console(
        file=StringIO(),
        width=width,
        color_system=None,
        force_terminal=False,
        highlight=False,
    )
    console.print(renderable)
    return console.file.getvalue()


def _day_labels(buckets: Sequence[DayBucket]) -> list[str]:
    # Short "Jan 01" labels only when they cannot collide across years.
    if len({b.day.year for b in buckets}) <= 1:
        return [b.label for b in buckets]
    return [b.day_key for b in buckets]


def render_report(report: Report, *, width: int = 80) -> str:
    """Return the report as a table of day rows plus a totals footer."""

    totals = report.totals
    table = Table(
        title=f"Transaction Overview ({report.preset.label})",
        box=box.SIMPLE_HEAVY,
        show_footer=True,
    )
    table.add_column("Date", footer="Total")
    table.add_column("Income", justify="right", footer=format_amount(totals.income))
    table.add_column("Expense", justify="right", footer=format_amount(totals.expense))
    table.add_column("Net", justify="right", footer=format_amount(totals.net))

    for label, bucket in zip(_day_labels(report.buckets), report.buckets, strict=True):
        table.add_row(
            label,
            format_amount(bucket.income),
            format_amount(bucket.expense),
            format_amount(bucket.net),
        )

    out = _print_to_string(table, width=width)
    # Notes go below the table; a caption would wrap to the table's width.
    if not report.buckets:
        out += "No transactions in the selected window.\n"
    if report.skipped:
        out += f"{report.skipped} malformed record(s) skipped.\n"
    return out


def render_comparison(reports: Sequence[Report], *, width: int = 80) -> str:
    """Return one totals row per report, e.g. one per preset."""

    table = Table(title="Totals by Window", box=box.SIMPLE_HEAVY)
    table.add_column("Preset")
    table.add_column("Window")
    table.add_column("Income", justify="right")
    table.add_column("Expense", justify="right")
    table.add_column("Net", justify="right")
    for report in reports:
        t = report.totals
        table.add_row(
            report.preset.key,
            report.preset.label,
            format_amount(t.income),
            format_amount(t.expense),
            format_amount(t.net),
        )
    return _print_to_string(table, width=width)


def report_to_dict(report: Report) -> dict[str, Any]:
    """Return a JSON-ready mapping; amounts are two-decimal strings."""

    window = report.window
    return {
        "preset": report.preset.key,
        "label": report.preset.label,
        "window": {
            "start": None if window.is_unbounded else window.start.isoformat(),
            "end": window.end.isoformat(),
            "start_day": window.start_day.isoformat() if window.start_day else None,
            "end_day": window.end_day.isoformat(),
            "timezone": getattr(window.timezone, "key", None) or str(window.timezone),
        },
        "buckets": [
            {
                "day": b.day_key,
                "income": format_amount(b.income),
                "expense": format_amount(b.expense),
                "net": format_amount(b.net),
            }
            for b in report.buckets
        ],
        "totals": {
            "income": format_amount(report.totals.income),
            "expense": format_amount(report.totals.expense),
            "net": format_amount(report.totals.net),
        },
        "skipped": report.skipped,
    }


__all__ = ["format_amount", "render_report", "render_comparison", "report_to_dict"]
