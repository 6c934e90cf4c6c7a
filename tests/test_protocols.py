import pytest

from ocwatchdog.devices import RedstoneController, SimulatedRedstone
from ocwatchdog.display import Actuator, ConsoleDisplay, Display
from ocwatchdog.display.protocols import (
    ErrorSimulatingDisplay,
    MockActuator,
    MockDisplay,
    create_error_simulating_display,
    create_mock_display,
)


def test_mock_display_records_calls() -> None:
    display = create_mock_display()
    display.clear()
    display.write("Next restart: 12:00")
    display.beep()

    assert display.lines == ["Next restart: 12:00"]
    assert display.clear_calls == 1
    assert display.beep_calls == 1

    display.reset_call_history()
    assert display.lines == []
    assert display.clear_calls == 0
    assert display.beep_calls == 0


def test_error_simulating_display() -> None:
    display = create_error_simulating_display(["beep"])
    display.write("ok")
    with pytest.raises(RuntimeError):
        display.beep()
    assert display.lines == ["ok"]


def test_implementations_satisfy_protocols() -> None:
    assert isinstance(MockDisplay(), Display)
    assert isinstance(ErrorSimulatingDisplay(), Display)
    assert isinstance(ConsoleDisplay(), Display)
    assert isinstance(MockActuator(), Actuator)
    assert isinstance(RedstoneController(SimulatedRedstone()), Actuator)


def test_mock_actuator() -> None:
    actuator = MockActuator(succeed=False)
    assert actuator.set_output(True) is False
    actuator.succeed = True
    assert actuator.set_output(False) is True
    assert actuator.calls == [True, False]


def test_console_display_writes_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    display = ConsoleDisplay(clear_screen=False, bell=False)
    display.clear()
    display.write("Current time (UTC-5): 11:50")
    display.beep()
    assert capsys.readouterr().out == "Current time (UTC-5): 11:50\n"


def test_console_display_bell(capsys: pytest.CaptureFixture[str]) -> None:
    ConsoleDisplay(clear_screen=False).beep()
    assert capsys.readouterr().out == "\a"
