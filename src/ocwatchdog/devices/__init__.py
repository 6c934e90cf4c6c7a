"""Device adapters for in-game hardware."""

from ocwatchdog.devices.redstone import (
    RedstoneCapability,
    RedstoneComponent,
    RedstoneController,
    Side,
    SimulatedRedstone,
)

__all__ = [
    "RedstoneCapability",
    "RedstoneComponent",
    "RedstoneController",
    "Side",
    "SimulatedRedstone",
]
