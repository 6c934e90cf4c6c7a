"""Data models for restart scheduling."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from ocwatchdog.utils.time import TimeUtils


@dataclass(frozen=True)
class RestartTarget:
    """The next upcoming restart instant, identified by its timestamp."""

    timestamp: int

    @property
    def civil(self) -> datetime:
        """Target as a civil datetime in the configured offset."""
        return TimeUtils.to_civil(self.timestamp)


@dataclass(frozen=True)
class Evaluation:
    """Outcome of one scheduler evaluation.

    ``warnings`` holds the lead-times that fired during this call, largest
    first. ``arrived_target`` is set when a restart instant was reached.
    """

    now: int
    target: RestartTarget
    seconds_left: int
    warnings: tuple[int, ...] = field(default_factory=tuple)
    arrived_target: RestartTarget | None = None
    actuator_should_be_active: bool = True

    @property
    def arrived(self) -> bool:
        return self.arrived_target is not None
