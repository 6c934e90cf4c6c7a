"""Application settings management.

This package provides:
- WatchdogSettings: restart schedule and service options from config.yaml
- RetryPolicy: failure handling for the poll loop
- RedstoneSettings / PumpSettings: device options
"""

from ocwatchdog.settings.user import (
    DEFAULT_TIME_API_URL,
    PumpSettings,
    RedstoneSettings,
    RetryPolicy,
    WatchdogSettings,
)

__all__ = [
    "DEFAULT_TIME_API_URL",
    "PumpSettings",
    "RedstoneSettings",
    "RetryPolicy",
    "WatchdogSettings",
]
