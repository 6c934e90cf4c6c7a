import pytest

from ocwatchdog.settings import WatchdogSettings


@pytest.fixture
def config() -> WatchdogSettings:
    return WatchdogSettings(
        hours=[4, 12, 18],
        minute=0,
        offset=0,
        interval=60,
        warn_before=[900, 300, 60],
        turn_off_before=300,
        time_api_url="http://localhost/fake_time.json",
    )
