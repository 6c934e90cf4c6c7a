from unittest.mock import Mock

import pytest
from pytest import MonkeyPatch

from ocwatchdog.scheduling import Scheduler
from ocwatchdog.settings import RetryPolicy, WatchdogSettings


class StopLoop(Exception):
    """Raised by the fake sleep to break out of the endless loop."""


def make_watchdog(config: WatchdogSettings, results: list[bool]) -> Mock:
    watchdog = Mock()
    watchdog.config = config
    watchdog.run_cycle.side_effect = results
    return watchdog


def test_run_once_success(config: WatchdogSettings, monkeypatch: MonkeyPatch) -> None:
    sleeps: list[float] = []
    monkeypatch.setattr("ocwatchdog.scheduling.time.sleep", sleeps.append)

    watchdog = make_watchdog(config, [True])
    assert Scheduler(watchdog).run(once=True) is True
    assert watchdog.run_cycle.call_count == 1
    assert sleeps == []


def test_run_once_reports_time_failure(
    config: WatchdogSettings, monkeypatch: MonkeyPatch
) -> None:
    monkeypatch.setattr("ocwatchdog.scheduling.time.sleep", lambda _: None)
    assert Scheduler(make_watchdog(config, [False])).run(once=True) is False


def test_loop_sleeps_interval_and_resets_streak(
    config: WatchdogSettings, monkeypatch: MonkeyPatch
) -> None:
    sleeps: list[float] = []

    def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)
        if len(sleeps) == 3:
            raise StopLoop

    monkeypatch.setattr("ocwatchdog.scheduling.time.sleep", fake_sleep)
    scheduler = Scheduler(make_watchdog(config, [True, False, True]))

    with pytest.raises(StopLoop):
        scheduler.run()

    assert sleeps == [60, 60, 60]
    assert scheduler.error_streak == 0


def test_loop_gives_up_when_retries_exhausted(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setattr("ocwatchdog.scheduling.time.sleep", lambda _: None)
    config = WatchdogSettings(retry=RetryPolicy(max_attempts=3))
    watchdog = make_watchdog(config, [False, False, False, True])

    scheduler = Scheduler(watchdog)
    assert scheduler.run() is False
    assert watchdog.run_cycle.call_count == 3
    assert scheduler.error_streak == 3


def test_loop_backs_off_on_repeated_failures(monkeypatch: MonkeyPatch) -> None:
    sleeps: list[float] = []

    def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)
        if len(sleeps) == 4:
            raise StopLoop

    monkeypatch.setattr("ocwatchdog.scheduling.time.sleep", fake_sleep)
    config = WatchdogSettings(
        interval=10, retry=RetryPolicy(backoff_factor=2.0, max_delay=30)
    )

    with pytest.raises(StopLoop):
        Scheduler(make_watchdog(config, [False, False, False, True])).run()

    assert sleeps == [10, 20, 30, 10]
