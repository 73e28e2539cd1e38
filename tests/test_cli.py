import json
import textwrap
from pathlib import Path

import pytest
from typer.testing import CliRunner

from account_trends.cli import app

runner = CliRunner()

CSV_TEXT = """
date,type,amount,description
2024-01-01,INCOME,100.00,Salary
2024-01-01,EXPENSE,40.00,Groceries
2024-01-03,EXPENSE,10.00,Coffee
"""


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    # The CLI reads .env from the working directory.
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _write_csv(directory: Path, text: str = CSV_TEXT) -> Path:
    p = directory / "tx.csv"
    p.write_text(textwrap.dedent(text).lstrip("\n"), encoding="utf-8")
    return p


def test_report_prints_table(workdir: Path):
    csv_path = _write_csv(workdir)
    result = runner.invoke(
        app, ["report", "--csv-path", str(csv_path), "--preset", "ALL", "--now", "2024-01-10"]
    )
    assert result.exit_code == 0, result.output
    assert "Transaction Overview (All Time)" in result.output
    jan1 = next(line for line in result.output.splitlines() if "Jan 01" in line)
    assert jan1.split()[-3:] == ["100.00", "40.00", "60.00"]


def test_report_json(workdir: Path):
    csv_path = _write_csv(workdir)
    result = runner.invoke(
        app,
        [
            "report",
            "--csv-path",
            str(csv_path),
            "--preset",
            "7d",
            "--now",
            "2024-01-10T12:00:00+00:00",
            "--json",
        ],
    )
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["preset"] == "7D"
    assert data["window"]["start_day"] == "2024-01-03"
    assert data["buckets"] == [
        {"day": "2024-01-03", "income": "0.00", "expense": "10.00", "net": "-10.00"}
    ]
    assert data["totals"] == {"income": "0.00", "expense": "10.00", "net": "-10.00"}


def test_report_fill_gaps_makes_series_dense(workdir: Path):
    csv_path = _write_csv(workdir)
    result = runner.invoke(
        app,
        [
            "report",
            "--csv-path",
            str(csv_path),
            "--preset",
            "7D",
            "--now",
            "2024-01-10",
            "--fill-gaps",
            "--json",
        ],
    )
    assert result.exit_code == 0, result.output
    days = [b["day"] for b in json.loads(result.stdout)["buckets"]]
    assert days[0] == "2024-01-03"
    assert days[-1] == "2024-01-10"
    assert len(days) == 8


def test_report_mentions_skipped_rows(workdir: Path):
    csv_path = _write_csv(workdir, CSV_TEXT + "2024-01-02,EXPENSE,-5.00,Refund\n")
    result = runner.invoke(
        app, ["report", "--csv-path", str(csv_path), "--preset", "ALL", "--now", "2024-01-10"]
    )
    assert result.exit_code == 0, result.output
    assert "1 malformed record(s) skipped." in result.output
    assert result.output.count("malformed record(s)") == 1


def test_report_uses_default_preset_from_env(workdir: Path, monkeypatch: pytest.MonkeyPatch):
    csv_path = _write_csv(workdir)
    monkeypatch.setenv("ACCOUNT_TRENDS_DEFAULT_PRESET", "7D")
    result = runner.invoke(
        app, ["report", "--csv-path", str(csv_path), "--now", "2024-01-10", "--json"]
    )
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["preset"] == "7D"


def test_report_reads_dotenv(workdir: Path):
    csv_path = _write_csv(workdir)
    (workdir / ".env").write_text(
        "ACCOUNT_TRENDS_DEFAULT_PRESET=ALL\nACCOUNT_TRENDS_TIMEZONE=America/New_York\n",
        encoding="utf-8",
    )
    result = runner.invoke(
        app, ["report", "--csv-path", str(csv_path), "--now", "2024-01-10", "--json"]
    )
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["preset"] == "ALL"
    assert data["window"]["timezone"] == "America/New_York"


@pytest.mark.parametrize(
    ("extra", "fragment"),
    [
        (["--preset", "2W"], "unknown window preset"),
        (["--timezone", "Mars/Olympus_Mons"], "Unknown timezone"),
        (["--now", "yesterday"], "invalid --now value"),
    ],
)
def test_report_rejects_bad_arguments(workdir: Path, extra: list[str], fragment: str):
    csv_path = _write_csv(workdir)
    result = runner.invoke(app, ["report", "--csv-path", str(csv_path), *extra])
    assert result.exit_code == 1
    assert fragment in result.output


def test_report_missing_file(workdir: Path):
    result = runner.invoke(app, ["report", "--csv-path", str(workdir / "missing.csv")])
    assert result.exit_code == 1
    assert "Error: File not found" in result.output


def test_report_bad_header(workdir: Path):
    csv_path = _write_csv(workdir, "when,what\n2024-01-01,x\n")
    result = runner.invoke(app, ["report", "--csv-path", str(csv_path)])
    assert result.exit_code == 1
    assert "Failed to parse CSV" in result.output


def test_compare_lists_every_preset(workdir: Path):
    csv_path = _write_csv(workdir)
    result = runner.invoke(app, ["compare", "--csv-path", str(csv_path), "--now", "2024-01-10"])
    assert result.exit_code == 0, result.output
    rows = {
        line.split()[0]: line.split()[-3:]
        for line in result.output.splitlines()
        if line.strip() and line.split()[0] in {"7D", "1M", "3M", "6M", "ALL"}
    }
    assert set(rows) == {"7D", "1M", "3M", "6M", "ALL"}
    assert rows["7D"] == ["0.00", "10.00", "-10.00"]
    assert rows["ALL"] == ["100.00", "50.00", "50.00"]


def test_presets_command():
    result = runner.invoke(app, ["presets"])
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0].split("\t") == ["7D", "Last 7 Days", "7 days"]
    assert lines[-1].split("\t") == ["ALL", "All Time", "all time"]


def test_verbose_flag_shows_info_logs(workdir: Path):
    csv_path = _write_csv(workdir, CSV_TEXT + "2024-01-02,EXPENSE,-5.00,Refund\n")
    args = ["report", "--csv-path", str(csv_path), "--preset", "ALL", "--now", "2024-01-10"]
    quiet = runner.invoke(app, args)
    verbose = runner.invoke(app, ["-v", *args])
    assert "ingest:skip" in quiet.output
    assert "ingest:done" not in quiet.output
    assert "ingest:done kept=3 skipped=1" in verbose.output


def test_bad_log_level_is_an_error():
    result = runner.invoke(app, ["--log-level", "chatty", "presets"])
    assert result.exit_code == 1
    assert "unknown log level" in result.output


def test_bad_default_preset_only_matters_when_used(workdir: Path, monkeypatch: pytest.MonkeyPatch):
    csv_path = _write_csv(workdir)
    monkeypatch.setenv("ACCOUNT_TRENDS_DEFAULT_PRESET", "bogus")
    base = ["report", "--csv-path", str(csv_path), "--now", "2024-01-10", "--json"]
    explicit = runner.invoke(app, [*base, "--preset", "7D"])
    assert explicit.exit_code == 0, explicit.output
    assert json.loads(explicit.stdout)["preset"] == "7D"
    implicit = runner.invoke(app, base)
    assert implicit.exit_code == 1
    assert "unknown window preset 'bogus'" in implicit.output
