"""Fluid pump balancing.

Keeps a set of fluids topped up: each cycle the pump is pointed at the fluid
that is furthest below its target, run briefly to measure the fill rate, and
then left running for as long as it should take to reach the target.
Targets come from labelled cards named ``"<fluid>: <amount>"``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Final, Protocol, runtime_checkable

from ocwatchdog.display.protocols import Actuator
from ocwatchdog.settings.user import PumpSettings

logger: Final = logging.getLogger(__name__)


@dataclass(frozen=True)
class FluidStack:
    """A fluid and the amount stored in the network."""

    label: str
    amount: int


@runtime_checkable
class FluidNetwork(Protocol):
    """Storage network that reports the fluids it holds."""

    def get_fluids(self) -> list[FluidStack]: ...


@runtime_checkable
class FluidSelector(Protocol):
    """Points the pump at a fluid (e.g. by inserting its card)."""

    def select(self, name: str) -> None: ...


@dataclass(frozen=True)
class PumpCycle:
    """What a single balancing cycle did."""

    fluid: str | None
    pumped_seconds: float = 0.0
    rate: float | None = None
    pump_left_running: bool = False


def parse_card_label(label: str) -> tuple[str, int]:
    """Split a card label into fluid name and target amount.

    Args:
        label: Card label such as ``"Oxygen Gas: 64000"``

    Returns:
        (name, target)

    Raises:
        ValueError: If the label has no ``:`` or the target is not an integer
    """
    name, sep, target = label.partition(":")
    if not sep or not name.strip():
        raise ValueError(f"Card label {label!r} is not of the form 'name: amount'")
    try:
        return name.strip(), int(target.strip())
    except ValueError as exc:
        raise ValueError(f"Card label {label!r} has a non-integer target") from exc


def read_targets(labels: Iterable[str]) -> dict[str, int]:
    """Build the target table from card labels, in card order."""
    targets: dict[str, int] = {}
    for label in labels:
        name, target = parse_card_label(label)
        targets[name] = target
        logger.debug("Card %s -> target %d", name, target)
    return targets


class PumpController:
    """Runs the pump balancing loop.

    The pump itself is any ``Actuator``; on/off maps to the redstone signal
    that enables it.
    """

    def __init__(
        self,
        targets: dict[str, int],
        network: FluidNetwork,
        selector: FluidSelector,
        pump: Actuator,
        settings: PumpSettings | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if not targets:
            raise ValueError("At least one fluid card is required")
        self.targets = dict(targets)
        self.max_target = max(self.targets.values())
        self.network = network
        self.selector = selector
        self.pump = pump
        self.settings = settings or PumpSettings()
        self._sleep = sleep
        logger.info("Read %d fluid cards, max target is %d", len(self.targets), self.max_target)

    def levels(self) -> dict[str, int]:
        """Current amounts of the tracked fluids present in the network."""
        return {
            fluid.label: fluid.amount
            for fluid in self.network.get_fluids()
            if fluid.label in self.targets
        }

    def choose_lowest(self, levels: dict[str, int]) -> tuple[str, int, int] | None:
        """Pick the fluid to pump next.

        A tracked fluid missing from the network wins immediately. Otherwise
        the fluid with the lowest amount that is still below its target is
        chosen.

        Returns:
            (name, current level, target), or None when every fluid is full
        """
        chosen: tuple[str, int, int] | None = None
        min_level = self.max_target
        for name, target in self.targets.items():
            if name not in levels:
                return name, 0, target
            level = levels[name]
            if level < target and level < min_level:
                min_level = level
                chosen = (name, level, target)
        return chosen

    def _set_pump(self, active: bool) -> None:
        if not self.pump.set_output(active):
            logger.warning("Pump did not acknowledge %s", "start" if active else "stop")

    def cycle(self) -> PumpCycle:
        """Run one balancing cycle."""
        logger.info("Stopping pump")
        self._set_pump(False)
        self._sleep(self.settings.settle_seconds)

        logger.info("Finding lowest fluid ...")
        choice = self.choose_lowest(self.levels())
        if choice is None:
            logger.info("All fluids are full!")
            self._sleep(self.settings.idle_seconds)
            return PumpCycle(fluid=None)

        name, start_level, target = choice
        logger.info("Lowest fluid: %s (%d/%d)", name, start_level, target)
        self.selector.select(name)
        self._set_pump(True)
        self._sleep(self.settings.sample_seconds)

        new_level = self.levels().get(name, target)
        if new_level >= target:
            self._set_pump(False)
            logger.info("Done pumping %s", name)
            return PumpCycle(fluid=name, pumped_seconds=self.settings.sample_seconds)

        rate = (new_level - start_level) / self.settings.sample_seconds
        pump_time = self.settings.max_pump_seconds
        stop_when_done = False
        logger.info("Pump rate: %.2f/s", rate)
        if rate > 0:
            time_to_full = (target - new_level) / rate
            if time_to_full < pump_time:
                pump_time = time_to_full
                stop_when_done = True

        self._sleep(pump_time)
        if stop_when_done:
            self._set_pump(False)

        return PumpCycle(
            fluid=name,
            pumped_seconds=self.settings.sample_seconds + pump_time,
            rate=rate,
            pump_left_running=not stop_when_done,
        )

    def run(self) -> None:
        """Balance fluids until interrupted."""
        while True:
            self.cycle()
