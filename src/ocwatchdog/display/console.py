"""Terminal status display."""

from __future__ import annotations

import logging

import typer

from ocwatchdog.display.protocols import Display


class ConsoleDisplay(Display):
    """Status display writing to the terminal.

    Stands in for an attached screen: lines are echoed, ``clear`` wipes the
    terminal between cycles and ``beep`` rings the terminal bell.
    """

    def __init__(self, clear_screen: bool = True, bell: bool = True) -> None:
        """Initialize the console display.

        Args:
            clear_screen: Clear the terminal when ``clear`` is called
            bell: Ring the terminal bell on ``beep``
        """
        self.logger = logging.getLogger(__name__)
        self.clear_screen = clear_screen
        self.bell = bell

    def write(self, text: str) -> None:
        typer.echo(text)

    def clear(self) -> None:
        if self.clear_screen:
            typer.clear()

    def beep(self) -> None:
        if self.bell:
            typer.echo("\a", nl=False)
        else:
            self.logger.debug("Beep suppressed")
