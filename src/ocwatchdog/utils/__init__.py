"""Common utility functions and helpers for the ocwatchdog package."""

from ocwatchdog.utils.time import TimeUtils

__all__ = [
    "TimeUtils",
]
