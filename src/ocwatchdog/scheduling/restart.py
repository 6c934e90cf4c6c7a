"""Restart countdown with tiered warnings and actuator policy."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from ocwatchdog.scheduling.models import Evaluation, RestartTarget
from ocwatchdog.utils.time import TimeUtils

if TYPE_CHECKING:
    from ocwatchdog.display.protocols import Actuator
    from ocwatchdog.settings.user import WatchdogSettings

logger: Final = logging.getLogger(__name__)

# Marker in the fired set for the one-shot arrival event
ARRIVAL: Final = -1


class RestartScheduler:
    """Tracks the next daily restart and decides what to announce.

    All mutable state lives on the instance:

    - the identity of the current restart target,
    - the lead-times already announced for that target,
    - the last actuator state the device acknowledged.

    The warning state is cleared exactly once whenever a new target
    timestamp is observed.
    """

    def __init__(self, config: WatchdogSettings) -> None:
        self.config = config
        self._target: int | None = None
        self._fired: set[int] = set()
        self.actuator_active: bool | None = None

    @property
    def current_target(self) -> RestartTarget | None:
        return RestartTarget(self._target) if self._target is not None else None

    @property
    def fired(self) -> frozenset[int]:
        """Lead-times already announced for the current target."""
        return frozenset(lead for lead in self._fired if lead != ARRIVAL)

    def next_target(self, now: int) -> RestartTarget | None:
        """Return the earliest restart at or after ``now``.

        Args:
            now: Offset-adjusted epoch seconds

        Returns:
            The next target, or None when no restart hours are configured
        """
        if not self.config.hours:
            return None
        candidates = (
            TimeUtils.daily_candidate(now, hour, self.config.minute) for hour in self.config.hours
        )
        return RestartTarget(min(candidates))

    def evaluate(self, now: int | None) -> Evaluation | None:
        """Evaluate one poll cycle.

        Args:
            now: Offset-adjusted epoch seconds, or None if the time source
                failed this cycle

        Returns:
            The evaluation, or None when there is nothing to schedule (time
            unavailable or no restart hours). State is untouched in that case.
        """
        if now is None:
            return None

        target = self.next_target(now)
        if target is None:
            return None

        arrived: RestartTarget | None = None

        if target.timestamp != self._target:
            previous = self._target
            # A target that rolled over between polls still counts as reached
            if previous is not None and previous <= now and ARRIVAL not in self._fired:
                if now - previous <= self.config.interval:
                    arrived = RestartTarget(previous)
                else:
                    logger.info(
                        "Restart at %s passed unobserved", TimeUtils.format_clock(previous)
                    )
            logger.debug(
                "New restart target %s (previous %s)",
                TimeUtils.format_clock(target.timestamp, "%Y-%m-%d %H:%M"),
                previous,
            )
            self._target = target.timestamp
            self._fired.clear()

        seconds_left = target.timestamp - now

        warnings: list[int] = []
        for lead in self.config.warn_before:
            if 0 < seconds_left <= lead and lead not in self._fired:
                self._fired.add(lead)
                warnings.append(lead)

        if seconds_left <= 0 and ARRIVAL not in self._fired:
            self._fired.add(ARRIVAL)
            arrived = target

        return Evaluation(
            now=now,
            target=target,
            seconds_left=seconds_left,
            warnings=tuple(warnings),
            arrived_target=arrived,
            actuator_should_be_active=self.actuator_policy(seconds_left),
        )

    def actuator_policy(self, seconds_left: int) -> bool:
        """Active far from a restart, inactive inside the action window."""
        return not (0 < seconds_left <= self.config.turn_off_before)

    def sync_actuator(self, evaluation: Evaluation, actuator: Actuator) -> bool:
        """Drive the actuator only when the desired state changes.

        The remembered state is updated only after the device acknowledges
        the call, so a failed call is retried on the next cycle.

        Returns:
            True if the actuator is (now) in the desired state
        """
        desired = evaluation.actuator_should_be_active
        if self.actuator_active == desired:
            return True

        try:
            ok = actuator.set_output(desired)
        except Exception as exc:
            logger.warning("Actuator call failed: %s", exc)
            return False

        if not ok:
            logger.warning("Actuator did not acknowledge %s", "on" if desired else "off")
            return False

        logger.info("Redstone signal turned %s", "on" if desired else "off")
        self.actuator_active = desired
        return True
