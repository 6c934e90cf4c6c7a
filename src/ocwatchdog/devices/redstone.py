"""Redstone card adapter with capability tiers and wireless fallback."""

from __future__ import annotations

import logging
from enum import Enum, IntEnum
from typing import Final, Protocol, runtime_checkable

from ocwatchdog.settings.user import RedstoneSettings

logger: Final = logging.getLogger(__name__)

SIGNAL_ON: Final = 15
SIGNAL_OFF: Final = 0


class Side(IntEnum):
    """Block sides as numbered by the computer mod."""

    BOTTOM = 0
    TOP = 1
    BACK = 2
    FRONT = 3
    RIGHT = 4
    LEFT = 5


class RedstoneCapability(Enum):
    """What a redstone card can do, declared once by the component.

    Tier 1 cards only drive and read plain side signals; tier 2 cards add
    wireless redstone and bundled cables.
    """

    BASIC_ONLY = 1
    WIRELESS_AND_BUNDLED = 2

    @property
    def tier(self) -> int:
        return self.value

    @property
    def has_wireless(self) -> bool:
        return self is RedstoneCapability.WIRELESS_AND_BUNDLED

    @property
    def has_bundled(self) -> bool:
        return self is RedstoneCapability.WIRELESS_AND_BUNDLED


@runtime_checkable
class RedstoneComponent(Protocol):
    """Protocol for a redstone card bridge.

    Tier 2 methods only need to work when ``capability`` says so; the
    controller never calls them on a tier 1 component. Setters return a
    truthy value on success.
    """

    capability: RedstoneCapability

    def set_output(self, side: int, value: int) -> object: ...
    def get_output(self, side: int) -> int: ...
    def get_input(self, side: int) -> int: ...

    def set_wireless_output(self, enabled: bool) -> object: ...
    def get_wireless_output(self) -> bool: ...
    def get_wireless_input(self) -> int: ...
    def set_wireless_frequency(self, frequency: int) -> object: ...
    def get_wireless_frequency(self) -> int: ...

    def set_bundled_output(self, side: int, color: int, value: int) -> object: ...
    def get_bundled_output(self, side: int, color: int) -> int: ...
    def get_bundled_input(self, side: int, color: int) -> int: ...

    def set_wake_threshold(self, threshold: int) -> object: ...
    def get_wake_threshold(self) -> int: ...


class RedstoneController:
    """High-level access to a redstone card.

    The capability is read from the component once, here, instead of being
    probed on every call. As an ``Actuator`` the controller maps
    ``set_output(True/False)`` onto wireless redstone when the card has it,
    falling back to the basic side output.
    """

    def __init__(
        self, component: RedstoneComponent, settings: RedstoneSettings | None = None
    ) -> None:
        """Initialize the controller.

        Args:
            component: Redstone card bridge
            settings: Frequency, default side/color and fallback options
        """
        self.component = component
        self.settings = settings or RedstoneSettings()
        self.capability: RedstoneCapability = component.capability
        self.default_side = self.settings.default_side
        self.bundled_color = self.settings.bundled_color
        self.wireless_frequency: int | None = None

        if self.capability.has_wireless:
            try:
                ok = self.set_wireless_frequency(self.settings.frequency)
            except Exception as exc:
                logger.warning("Wireless frequency setup raised: %s", exc)
                ok = False
            if ok:
                logger.debug("Wireless frequency set to %d", self.settings.frequency)
            else:
                logger.error("Failed to set wireless frequency to %d", self.settings.frequency)

        logger.info("Redstone controller initialized (Tier %d)", self.tier)

    @property
    def tier(self) -> int:
        return self.capability.tier

    @property
    def has_wireless(self) -> bool:
        return self.capability.has_wireless

    @property
    def has_bundled(self) -> bool:
        return self.capability.has_bundled

    def _tier2_unavailable(self, feature: str) -> None:
        logger.error("%s not available on tier %d card", feature, self.tier)

    # ── Actuator ────────────────────────────────────────────────────────────
    def set_output(self, active: bool) -> bool:
        """Switch the restart signal on or off.

        Args:
            active: Desired signal state

        Returns:
            True if the card acknowledged the change
        """
        if self.has_wireless and self.settings.use_wireless:
            try:
                ok = self.component.set_wireless_output(active)
            except Exception as exc:
                logger.debug("Wireless set raised: %s", exc)
                ok = False
            # The card may return nothing on success
            if ok or ok is None:
                return True
            logger.debug("Wireless set failed; ok=%s", ok)
            if not self.settings.fallback_on_failure:
                return False
            logger.warning("Wireless redstone failed, falling back to basic I/O")

        return self.set_level(SIGNAL_ON if active else SIGNAL_OFF)

    # ── Basic I/O ───────────────────────────────────────────────────────────
    def set_level(self, value: int, side: int | None = None) -> bool:
        """Set the basic output signal strength on one side."""
        side = self.default_side if side is None else side
        try:
            return self.component.set_output(side, value) is not None
        except Exception as exc:
            logger.warning("Redstone output on side %d failed: %s", side, exc)
            return False

    def get_output(self, side: int | None = None) -> int:
        side = self.default_side if side is None else side
        return self.component.get_output(side)

    def get_input(self, side: int | None = None) -> int:
        side = self.default_side if side is None else side
        return self.component.get_input(side)

    # ── Wireless (tier 2, with basic fallback for reads) ────────────────────
    def set_wireless_frequency(self, frequency: int) -> bool:
        if not self.has_wireless:
            self._tier2_unavailable("Wireless redstone")
            return False
        self.wireless_frequency = frequency
        return self.component.set_wireless_frequency(frequency) is not None

    def get_wireless_frequency(self) -> int | None:
        if not self.has_wireless:
            return None
        return self.component.get_wireless_frequency()

    def get_wireless_output(self, side: int | None = None) -> bool:
        """Whether the signal is active, via wireless or the basic side."""
        if self.has_wireless:
            return bool(self.component.get_wireless_output())
        return self.get_output(side) > 0

    def get_wireless_input(self, side: int | None = None) -> int:
        if self.has_wireless:
            return self.component.get_wireless_input()
        return self.get_input(side)

    def set_wake_threshold(self, threshold: int) -> bool:
        if not self.has_wireless:
            self._tier2_unavailable("Wake threshold")
            return False
        return self.component.set_wake_threshold(threshold) is not None

    def get_wake_threshold(self) -> int | None:
        if not self.has_wireless:
            return None
        return self.component.get_wake_threshold()

    # ── Bundled (tier 2) ────────────────────────────────────────────────────
    def set_bundled_output(
        self, value: int, color: int | None = None, side: int | None = None
    ) -> bool:
        if not self.has_bundled:
            self._tier2_unavailable("Bundled redstone")
            return False
        color = self.bundled_color if color is None else color
        side = self.default_side if side is None else side
        return self.component.set_bundled_output(side, color, value) is not None

    def get_bundled_output(self, color: int | None = None, side: int | None = None) -> int | None:
        if not self.has_bundled:
            self._tier2_unavailable("Bundled redstone")
            return None
        color = self.bundled_color if color is None else color
        side = self.default_side if side is None else side
        return self.component.get_bundled_output(side, color)

    def get_bundled_input(self, color: int | None = None, side: int | None = None) -> int | None:
        if not self.has_bundled:
            self._tier2_unavailable("Bundled redstone")
            return None
        color = self.bundled_color if color is None else color
        side = self.default_side if side is None else side
        return self.component.get_bundled_input(side, color)


class SimulatedRedstone:
    """In-memory redstone card for running without hardware and for tests.

    Setters return the previous value, the way the real card does, so a
    successful call is never ``None``.
    """

    def __init__(
        self,
        capability: RedstoneCapability = RedstoneCapability.BASIC_ONLY,
        fail_on_methods: list[str] | None = None,
    ) -> None:
        self.capability = capability
        self.fail_on_methods = fail_on_methods or []
        self.outputs: dict[int, int] = {int(side): 0 for side in Side}
        self.inputs: dict[int, int] = {int(side): 0 for side in Side}
        self.bundled: dict[tuple[int, int], int] = {}
        self.wireless_output = False
        self.wireless_input = 0
        self.wireless_frequency = 0
        self.wake_threshold = 0
        self.calls: list[tuple[str, tuple[object, ...]]] = []

    def _record(self, method: str, *args: object) -> None:
        self.calls.append((method, args))
        if method in self.fail_on_methods:
            raise RuntimeError(f"Simulated redstone failure in {method}")

    def _require_tier2(self, method: str) -> None:
        if self.capability is not RedstoneCapability.WIRELESS_AND_BUNDLED:
            raise AttributeError(f"{method} requires a tier 2 card")

    def set_output(self, side: int, value: int) -> int:
        self._record("set_output", side, value)
        previous = self.outputs.get(side, 0)
        self.outputs[side] = value
        logger.debug("[SIM] side %d -> %d", side, value)
        return previous

    def get_output(self, side: int) -> int:
        return self.outputs.get(side, 0)

    def get_input(self, side: int) -> int:
        return self.inputs.get(side, 0)

    def set_wireless_output(self, enabled: bool) -> bool:
        self._require_tier2("set_wireless_output")
        self._record("set_wireless_output", enabled)
        self.wireless_output = enabled
        logger.debug("[SIM] wireless -> %s", enabled)
        return True

    def get_wireless_output(self) -> bool:
        self._require_tier2("get_wireless_output")
        return self.wireless_output

    def get_wireless_input(self) -> int:
        self._require_tier2("get_wireless_input")
        return self.wireless_input

    def set_wireless_frequency(self, frequency: int) -> int:
        self._require_tier2("set_wireless_frequency")
        self._record("set_wireless_frequency", frequency)
        previous = self.wireless_frequency
        self.wireless_frequency = frequency
        return previous

    def get_wireless_frequency(self) -> int:
        self._require_tier2("get_wireless_frequency")
        return self.wireless_frequency

    def set_bundled_output(self, side: int, color: int, value: int) -> int:
        self._require_tier2("set_bundled_output")
        self._record("set_bundled_output", side, color, value)
        previous = self.bundled.get((side, color), 0)
        self.bundled[(side, color)] = value
        return previous

    def get_bundled_output(self, side: int, color: int) -> int:
        self._require_tier2("get_bundled_output")
        return self.bundled.get((side, color), 0)

    def get_bundled_input(self, side: int, color: int) -> int:
        self._require_tier2("get_bundled_input")
        return 0

    def set_wake_threshold(self, threshold: int) -> int:
        self._require_tier2("set_wake_threshold")
        self._record("set_wake_threshold", threshold)
        previous = self.wake_threshold
        self.wake_threshold = threshold
        return previous

    def get_wake_threshold(self) -> int:
        self._require_tier2("get_wake_threshold")
        return self.wake_threshold
