# src/ocwatchdog/display/protocols.py
from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Display(Protocol):
    """Protocol defining the interface for status displays.

    Abstracts where status text ends up (terminal, in-game screen, log) so
    the watchdog can run against any compatible output.
    """

    def write(self, text: str) -> None:
        """Render a line of status text."""
        ...

    def clear(self) -> None:
        """Clear the display."""
        ...

    def beep(self) -> None:
        """Emit an audible alert."""
        ...


@runtime_checkable
class Actuator(Protocol):
    """Protocol for binary output devices driven by the restart policy."""

    def set_output(self, active: bool) -> bool:
        """Switch the output.

        Args:
            active: Desired signal state

        Returns:
            True if the device acknowledged the change
        """
        ...


class MockDisplay:
    """Mock implementation of Display for testing."""

    def __init__(self):
        self.lines: list[str] = []
        self.clear_calls = 0
        self.beep_calls = 0

    def write(self, text: str) -> None:
        """Record the text without rendering it."""
        self.lines.append(text)

    def clear(self) -> None:
        self.clear_calls += 1

    def beep(self) -> None:
        self.beep_calls += 1

    def reset_call_history(self) -> None:
        """Reset the call history for testing."""
        self.lines = []
        self.clear_calls = 0
        self.beep_calls = 0


class ErrorSimulatingDisplay(MockDisplay):
    """Display mock that can simulate hardware errors."""

    def __init__(self, fail_on_methods: list[str] | None = None):
        """Initialize with optional methods that should fail.

        Args:
            fail_on_methods: List of method names that should raise exceptions
        """
        super().__init__()
        self.fail_on_methods = fail_on_methods or []

    def write(self, text: str) -> None:
        if "write" in self.fail_on_methods:
            raise RuntimeError("Simulated display hardware failure")
        super().write(text)

    def clear(self) -> None:
        if "clear" in self.fail_on_methods:
            raise RuntimeError("Simulated display hardware failure")
        super().clear()

    def beep(self) -> None:
        if "beep" in self.fail_on_methods:
            raise RuntimeError("Simulated display hardware failure")
        super().beep()


class MockActuator:
    """Actuator double that records calls and can be told to fail."""

    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.calls: list[bool] = []

    def set_output(self, active: bool) -> bool:
        self.calls.append(active)
        return self.succeed


def create_mock_display() -> MockDisplay:
    """Create and return a mock display for testing."""
    return MockDisplay()


def create_error_simulating_display(
    fail_on_methods: list[str] | None = None,
) -> ErrorSimulatingDisplay:
    """Create a display that will fail on specified methods."""
    return ErrorSimulatingDisplay(fail_on_methods)
