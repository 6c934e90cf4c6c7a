from datetime import UTC, datetime

import pytest

from ocwatchdog.utils.time import SECONDS_PER_DAY, TimeUtils


def dt(hour: int, minute: int = 0, second: int = 0, day: int = 3) -> int:
    return TimeUtils.from_civil(datetime(2025, 5, day, hour, minute, second))


def test_apply_offset() -> None:
    assert TimeUtils.apply_offset(100_000, -5) == 100_000 - 18_000
    assert TimeUtils.apply_offset(100_000, 0) == 100_000


def test_civil_round_trip() -> None:
    civil = TimeUtils.to_civil(dt(11, 50, 30))
    assert civil == datetime(2025, 5, 3, 11, 50, 30, tzinfo=UTC)
    assert TimeUtils.from_civil(civil) == dt(11, 50, 30)


def test_daily_candidate_same_day_and_rollover() -> None:
    assert TimeUtils.daily_candidate(dt(11, 56), 17, 55) == dt(17, 55)
    assert TimeUtils.daily_candidate(dt(11, 56), 11, 55) == dt(11, 55, day=4)
    assert TimeUtils.daily_candidate(dt(11, 55), 11, 55) == dt(11, 55)


def test_daily_candidate_across_month_end() -> None:
    now = TimeUtils.from_civil(datetime(2025, 5, 31, 23, 0))
    expected = TimeUtils.from_civil(datetime(2025, 6, 1, 3, 55))
    assert TimeUtils.daily_candidate(now, 3, 55) == expected
    assert expected - now < SECONDS_PER_DAY


@pytest.mark.parametrize(
    ("offset", "expected"), [(0, "UTC"), (-5, "UTC-5"), (2, "UTC+2"), (14, "UTC+14")]
)
def test_format_offset(offset: int, expected: str) -> None:
    assert TimeUtils.format_offset(offset) == expected


def test_format_clock() -> None:
    assert TimeUtils.format_clock(dt(3, 55)) == "03:55"
    assert TimeUtils.format_clock(dt(3, 55), "%Y-%m-%d %H:%M") == "2025-05-03 03:55"


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(7530, "2h 05m 30s"), (270, "4m 30s"), (0, "0m 00s"), (-5, "0m 00s")],
)
def test_format_countdown(seconds: int, expected: str) -> None:
    assert TimeUtils.format_countdown(seconds) == expected


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(900, "15 minutes"), (60, "1 minute"), (30, "30 seconds"), (90, "90 seconds"), (1, "1 second")],
)
def test_format_lead_time(seconds: int, expected: str) -> None:
    assert TimeUtils.format_lead_time(seconds) == expected
