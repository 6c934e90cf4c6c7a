# filepath: src/ocwatchdog/controller.py
"""Core controller for the restart watchdog."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final

from ocwatchdog.devices.redstone import RedstoneCapability, RedstoneController, SimulatedRedstone
from ocwatchdog.display.console import ConsoleDisplay
from ocwatchdog.display.protocols import Actuator, Display
from ocwatchdog.scheduling.models import Evaluation
from ocwatchdog.scheduling.restart import RestartScheduler
from ocwatchdog.settings.user import WatchdogSettings
from ocwatchdog.timesource.api import TimeSource, UnixTimeProvider, WorldTimeAPI
from ocwatchdog.utils.time import TimeUtils

logger: Final = logging.getLogger(__name__)

TIME_UNAVAILABLE_MESSAGE: Final = "Failed to get real-world time. Check internet connection."
NO_SCHEDULE_MESSAGE: Final = "No restart hours configured."


class Watchdog:
    """Main controller class for the restart watchdog.

    This class orchestrates one poll cycle:
    - Fetching the current real-world time
    - Evaluating the restart schedule
    - Announcing warnings and the restart itself
    - Driving the redstone signal
    - Rendering status text

    All collaborators can be injected; defaults are built from the loaded
    configuration.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        time_provider: UnixTimeProvider | None = None,
        display: Display | None = None,
        actuator: Actuator | None = None,
        config: WatchdogSettings | None = None,
        debug: bool = False,
    ):
        """Initialize the watchdog controller.

        Args:
            config_path: Path to config.yaml (created with defaults if absent)
            time_provider: Optional custom source of POSIX time
            display: Optional custom status display
            actuator: Optional restart signal; None disables the signal
            config: Pre-loaded settings (skips loading config_path)
            debug: Enable debug logging

        Raises:
            ValueError: If the configured time API URL is unusable
        """
        # Configure logging
        logging.basicConfig(
            level=logging.DEBUG if debug else logging.INFO,
            format="%(asctime)s [%(levelname)s] %(message)s",
        )

        # Load configuration, persisting defaults when missing or malformed
        self.config: WatchdogSettings = config or WatchdogSettings.load_or_create(config_path)

        # Allow dependency injection or create defaults
        provider = time_provider or WorldTimeAPI(
            self.config.time_api_url, timeout=self.config.request_timeout
        )
        self.time_source = TimeSource(provider, self.config.offset)
        self.display = display or ConsoleDisplay()
        self.actuator = actuator
        self.scheduler = RestartScheduler(self.config)
        self.last_evaluation: Evaluation | None = None

        if self.actuator is None:
            logger.info("No redstone actuator attached; restart signal disabled")
        elif not self.config.redstone.enabled:
            logger.info("Redstone signal disabled in config")
            self.actuator = None

    @staticmethod
    def create_simulated_actuator(
        config: WatchdogSettings,
        capability: RedstoneCapability = RedstoneCapability.BASIC_ONLY,
    ) -> RedstoneController:
        """Build a redstone actuator backed by the in-memory card."""
        return RedstoneController(SimulatedRedstone(capability), config.redstone)

    # ── display helpers (failures are non-fatal) ────────────────────────────
    def _write(self, text: str) -> None:
        try:
            self.display.write(text)
        except Exception as exc:
            logger.debug("Display write failed: %s", exc)

    def _clear(self) -> None:
        try:
            self.display.clear()
        except Exception as exc:
            logger.debug("Display clear failed: %s", exc)

    def _beep(self) -> None:
        try:
            self.display.beep()
        except Exception as exc:
            logger.debug("Display beep failed: %s", exc)

    def run_cycle(self) -> bool:
        """Run one poll cycle.

        Returns:
            True if the time was available, False otherwise
        """
        now = self.time_source.now()
        self._clear()

        if now is None:
            self._write(TIME_UNAVAILABLE_MESSAGE)
            return False

        evaluation = self.scheduler.evaluate(now)
        self.last_evaluation = evaluation
        if evaluation is None:
            logger.warning("No restart hours configured")
            self._write(NO_SCHEDULE_MESSAGE)
            self._write_clock(now)
            return True

        self._announce(evaluation)

        if self.actuator is not None:
            self.scheduler.sync_actuator(evaluation, self.actuator)

        self._render_status(evaluation)
        return True

    def _announce(self, evaluation: Evaluation) -> None:
        for lead in evaluation.warnings:
            message = f"Server restart in {TimeUtils.format_lead_time(lead)}!"
            logger.warning(message)
            self._write(message)
            self._beep()

        if evaluation.arrived_target is not None:
            at = TimeUtils.format_clock(evaluation.arrived_target.timestamp)
            logger.warning("Server restart time reached (%s)", at)
            self._write(f"Server restart time reached ({at})!")
            self._beep()

    def _write_clock(self, now: int) -> None:
        offset = TimeUtils.format_offset(self.config.offset)
        self._write(f"Current time ({offset}): {TimeUtils.format_clock(now)}")

    def _render_status(self, evaluation: Evaluation) -> None:
        self._write_clock(evaluation.now)
        self._write(
            f"Next restart: {TimeUtils.format_clock(evaluation.target.timestamp)} "
            f"(in {TimeUtils.format_countdown(evaluation.seconds_left)})"
        )
        if self.actuator is None:
            return
        state = self.scheduler.actuator_active
        label = "unknown" if state is None else ("on" if state else "off")
        self._write(f"Redstone signal: {label}")
