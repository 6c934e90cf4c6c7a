"""Scheduler package for the restart watchdog."""

import logging
import time
from typing import TYPE_CHECKING, Final

from ocwatchdog.scheduling.models import Evaluation, RestartTarget
from ocwatchdog.scheduling.restart import RestartScheduler

if TYPE_CHECKING:
    from ocwatchdog.controller import Watchdog

logger: Final = logging.getLogger(__name__)

__all__ = ["Evaluation", "RestartScheduler", "RestartTarget", "Scheduler"]


class Scheduler:
    """Manages the poll loop.

    Controls when the watchdog should:
    - Run a cycle
    - Sleep until the next poll
    - Back off or give up after repeated time-source failures

    With the default retry policy failures are retried every interval,
    forever.
    """

    def __init__(self, watchdog: "Watchdog") -> None:
        self.watchdog = watchdog
        self.config = watchdog.config
        self.error_streak = 0

    def run(self, once: bool = False) -> bool:
        """Run the poll loop until exit conditions are met.

        Args:
            once: Run a single cycle then return

        Returns:
            False if the loop gave up after too many failures, True otherwise
        """
        policy = self.config.retry
        interval = self.config.interval

        while True:
            if self.watchdog.run_cycle():
                self.error_streak = 0
            else:
                self.error_streak += 1
                if policy.is_exhausted(self.error_streak):
                    logger.error("%d consecutive time failures → giving up", self.error_streak)
                    return False

            # If running only once, exit now
            if once:
                return self.error_streak == 0

            delay = policy.delay_for(interval, self.error_streak)
            if self.error_streak > 1 and delay > interval:
                logger.warning(
                    "%d consecutive failures → backing off to %.0fs", self.error_streak, delay
                )
            time.sleep(delay)
