"""Display package - status output and device protocols."""

from ocwatchdog.display.console import ConsoleDisplay
from ocwatchdog.display.protocols import Actuator, Display

__all__ = ["Actuator", "ConsoleDisplay", "Display"]
