# src/ocwatchdog/utils/time.py
"""Time and date handling utilities."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400


class TimeUtils:
    """Time-related utility functions.

    Restart times are worked out with fixed-offset arithmetic: an epoch
    timestamp that has already been shifted by the configured UTC offset is
    read as if it were UTC. No time-zone database is consulted, so daylight
    saving transitions and leap seconds are not modeled.
    """

    @staticmethod
    def apply_offset(unix_time: int, offset_hours: int) -> int:
        """Shift a POSIX timestamp by a whole-hour UTC offset.

        Args:
            unix_time: POSIX timestamp
            offset_hours: UTC offset in hours (e.g. -5)

        Returns:
            Offset-adjusted epoch seconds
        """
        return unix_time + offset_hours * SECONDS_PER_HOUR

    @staticmethod
    def to_civil(adjusted: int) -> datetime:
        """Convert offset-adjusted epoch seconds to a civil datetime."""
        return datetime.fromtimestamp(adjusted, tz=UTC)

    @staticmethod
    def from_civil(dt: datetime) -> int:
        """Convert a civil datetime back to offset-adjusted epoch seconds.

        Args:
            dt: Datetime (assumes UTC if naive)

        Returns:
            Epoch seconds as integer
        """
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return int(dt.timestamp())

    @staticmethod
    def daily_candidate(adjusted_now: int, hour: int, minute: int) -> int:
        """Return the next occurrence of hour:minute at or after ``adjusted_now``.

        The candidate is built on the civil date of ``adjusted_now``; if that
        instant has already passed it is moved forward by exactly one day.
        """
        now_dt = TimeUtils.to_civil(adjusted_now)
        candidate = now_dt.replace(hour=hour, minute=minute, second=0, microsecond=0)
        if candidate < now_dt:
            candidate += timedelta(days=1)
        return TimeUtils.from_civil(candidate)

    @staticmethod
    def format_offset(offset_hours: int) -> str:
        """Format a UTC offset as ``UTC-5`` / ``UTC+2`` / ``UTC``."""
        if offset_hours == 0:
            return "UTC"
        return f"UTC{offset_hours:+d}"

    @staticmethod
    def format_clock(adjusted: int, format_string: str = "%H:%M") -> str:
        """Format offset-adjusted epoch seconds as a wall-clock string."""
        return TimeUtils.to_civil(adjusted).strftime(format_string)

    @staticmethod
    def format_countdown(seconds: int) -> str:
        """Get a countdown string such as ``2h 05m 30s``.

        Args:
            seconds: Seconds remaining (negative values clamp to zero)

        Returns:
            Formatted countdown
        """
        seconds = max(int(seconds), 0)
        hours, remainder = divmod(seconds, SECONDS_PER_HOUR)
        minutes, secs = divmod(remainder, 60)
        if hours:
            return f"{hours}h {minutes:02d}m {secs:02d}s"
        return f"{minutes}m {secs:02d}s"

    @staticmethod
    def format_lead_time(seconds: int) -> str:
        """Format a warning lead-time for announcements.

        Whole minutes read as ``15 minutes`` / ``1 minute``; anything else is
        given in seconds.
        """
        if seconds >= 60 and seconds % 60 == 0:
            minutes = seconds // 60
            return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"
        return f"{seconds} second" if seconds == 1 else f"{seconds} seconds"
