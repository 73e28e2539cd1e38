from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from account_trends import InvalidPreset, WindowPreset, resolve_window
from account_trends.windows import MIN_INSTANT, civil_day, in_window, parse_preset

NOW = datetime(2024, 1, 10, 15, 30, tzinfo=UTC)
NEW_YORK = ZoneInfo("America/New_York")


def test_seven_day_window_spans_whole_civil_days():
    w = resolve_window("7D", NOW)
    assert w.start == datetime(2024, 1, 3, tzinfo=UTC)
    assert w.end == datetime(2024, 1, 10, 23, 59, 59, 999999, tzinfo=UTC)
    assert (w.start_day, w.end_day) == (date(2024, 1, 3), date(2024, 1, 10))
    assert not w.is_unbounded


@pytest.mark.parametrize(("key", "days"), [("7D", 7), ("1M", 30), ("3M", 90), ("6M", 180)])
def test_day_count_presets(key, days):
    w = resolve_window(key, NOW)
    assert w.start_day == date(2024, 1, 10) - timedelta(days=days)
    assert w.start <= w.end


def test_all_time_starts_at_minimum_instant():
    w = resolve_window(WindowPreset.ALL, NOW)
    assert w.start == MIN_INSTANT
    assert w.is_unbounded
    assert w.start_day is None
    assert w.end_day == date(2024, 1, 10)
    assert w.start <= w.end


@pytest.mark.parametrize("key", ["2W", "", "all time", 7, None])
def test_unknown_presets_raise(key):
    with pytest.raises(InvalidPreset):
        resolve_window(key, NOW)


def test_preset_keys_are_case_insensitive():
    assert parse_preset(" all ") is WindowPreset.ALL
    assert parse_preset("7d") is WindowPreset.LAST_7_DAYS


def test_now_is_required():
    with pytest.raises(TypeError):
        resolve_window("7D")  # type: ignore[call-arg]


def test_end_of_day_follows_report_timezone():
    # 03:00 UTC on Jan 10 is still Jan 9 in New York.
    w = resolve_window("7D", datetime(2024, 1, 10, 3, 0, tzinfo=UTC), tz=NEW_YORK)
    assert w.end_day == date(2024, 1, 9)
    assert w.end == datetime(2024, 1, 9, 23, 59, 59, 999999, tzinfo=NEW_YORK)
    assert w.start == datetime(2024, 1, 2, tzinfo=NEW_YORK)


def test_naive_now_is_wall_clock_in_report_timezone():
    w = resolve_window("7D", datetime(2024, 1, 10, 23, 0), tz=NEW_YORK)
    assert w.end_day == date(2024, 1, 10)


def test_window_across_dst_change_keeps_local_midnight():
    # US clocks moved forward on 2024-03-10.
    w = resolve_window("7D", datetime(2024, 3, 12, 12, 0, tzinfo=NEW_YORK), tz=NEW_YORK)
    assert w.start == datetime(2024, 3, 5, tzinfo=NEW_YORK)
    assert w.start.utcoffset() == timedelta(hours=-5)
    assert w.end.utcoffset() == timedelta(hours=-4)


def test_in_window_is_inclusive_at_both_ends():
    w = resolve_window("7D", NOW)
    one_us = timedelta(microseconds=1)
    assert in_window(w.start, w)
    assert in_window(w.end, w)
    assert not in_window(w.start - one_us, w)
    assert not in_window(w.end + one_us, w)


def test_civil_day_converts_aware_and_keeps_naive():
    assert civil_day(datetime(2024, 1, 10, 4, 30, tzinfo=UTC), NEW_YORK) == date(2024, 1, 9)
    assert civil_day(datetime(2024, 1, 10, 4, 30), NEW_YORK) == date(2024, 1, 10)
