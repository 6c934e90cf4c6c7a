import pytest

from ocwatchdog.display.protocols import MockActuator
from ocwatchdog.pump import (
    FluidStack,
    PumpController,
    PumpCycle,
    parse_card_label,
    read_targets,
)
from ocwatchdog.settings import PumpSettings


class FakeNetwork:
    """Fluid storage whose levels grow while the pump is on."""

    def __init__(self, levels: dict[str, int], pump: MockActuator, fill_rate: int = 0) -> None:
        self.levels = dict(levels)
        self.pump = pump
        self.fill_rate = fill_rate
        self.selected: str | None = None

    def get_fluids(self) -> list[FluidStack]:
        return [FluidStack(label, amount) for label, amount in self.levels.items()]

    def select(self, name: str) -> None:
        self.selected = name

    def advance(self, seconds: float) -> None:
        pumping = bool(self.pump.calls) and self.pump.calls[-1]
        if pumping and self.selected is not None:
            current = self.levels.get(self.selected, 0)
            self.levels[self.selected] = current + int(self.fill_rate * seconds)


@pytest.fixture
def settings() -> PumpSettings:
    return PumpSettings(
        settle_seconds=1, sample_seconds=10, max_pump_seconds=180, idle_seconds=180
    )


def make_controller(
    targets: dict[str, int],
    levels: dict[str, int],
    settings: PumpSettings,
    fill_rate: int = 0,
) -> tuple[PumpController, FakeNetwork, MockActuator, list[float]]:
    pump = MockActuator()
    network = FakeNetwork(levels, pump, fill_rate)
    sleeps: list[float] = []

    def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)
        network.advance(seconds)

    controller = PumpController(targets, network, network, pump, settings, sleep=fake_sleep)
    return controller, network, pump, sleeps


# ── card labels ─────────────────────────────────────────────────────────────
def test_parse_card_label() -> None:
    assert parse_card_label("Oxygen Gas: 64000") == ("Oxygen Gas", 64000)
    assert parse_card_label("water:100") == ("water", 100)


@pytest.mark.parametrize("label", ["Oxygen Gas", ": 100", "Oxygen: lots"])
def test_parse_card_label_rejects_bad_labels(label: str) -> None:
    with pytest.raises(ValueError):
        parse_card_label(label)


def test_read_targets_keeps_card_order() -> None:
    targets = read_targets(["Water: 1000", "Lava: 500"])
    assert list(targets.items()) == [("Water", 1000), ("Lava", 500)]


def test_controller_requires_cards(settings: PumpSettings) -> None:
    with pytest.raises(ValueError):
        make_controller({}, {}, settings)


# ── choosing a fluid ────────────────────────────────────────────────────────
def test_choose_lowest_below_target(settings: PumpSettings) -> None:
    controller, *_ = make_controller(
        {"Water": 1000, "Lava": 1000, "Oil": 1000},
        {"Water": 900, "Lava": 200, "Oil": 1000},
        settings,
    )
    assert controller.choose_lowest(controller.levels()) == ("Lava", 200, 1000)


def test_choose_missing_fluid_first(settings: PumpSettings) -> None:
    controller, *_ = make_controller(
        {"Water": 1000, "Lava": 500}, {"Water": 10}, settings
    )
    assert controller.choose_lowest(controller.levels()) == ("Lava", 0, 500)


def test_choose_none_when_all_full(settings: PumpSettings) -> None:
    controller, *_ = make_controller({"Water": 1000}, {"Water": 1000}, settings)
    assert controller.choose_lowest(controller.levels()) is None


def test_untracked_fluids_are_ignored(settings: PumpSettings) -> None:
    controller, *_ = make_controller({"Water": 1000}, {"Water": 5, "Slime": 1}, settings)
    assert controller.levels() == {"Water": 5}


# ── cycles ──────────────────────────────────────────────────────────────────
def test_cycle_idles_when_full(settings: PumpSettings) -> None:
    controller, _, pump, sleeps = make_controller({"Water": 1000}, {"Water": 1000}, settings)

    assert controller.cycle() == PumpCycle(fluid=None)
    assert pump.calls == [False]
    assert sleeps == [1, 180]


def test_cycle_stops_after_time_to_full(settings: PumpSettings) -> None:
    controller, network, pump, sleeps = make_controller(
        {"Water": 1000}, {"Water": 100}, settings, fill_rate=10
    )

    result = controller.cycle()

    assert network.selected == "Water"
    assert result.fluid == "Water"
    assert result.rate == 10
    # 200 after sampling, 800 left at 10/s
    assert sleeps == [1, 10, 80]
    assert result.pumped_seconds == 90
    assert result.pump_left_running is False
    assert pump.calls == [False, True, False]
    assert network.levels["Water"] == 1000


def test_cycle_caps_long_runs(settings: PumpSettings) -> None:
    controller, _, pump, sleeps = make_controller(
        {"Water": 100_000}, {"Water": 0}, settings, fill_rate=1
    )

    result = controller.cycle()

    assert sleeps == [1, 10, 180]
    assert result.pump_left_running is True
    assert pump.calls == [False, True]


def test_cycle_with_no_progress_runs_max_time(settings: PumpSettings) -> None:
    controller, _, _, sleeps = make_controller({"Water": 1000}, {"Water": 100}, settings)

    result = controller.cycle()

    assert result.rate == 0
    assert sleeps == [1, 10, 180]
    assert result.pump_left_running is True


def test_cycle_done_during_sample(settings: PumpSettings) -> None:
    controller, _, pump, sleeps = make_controller(
        {"Water": 1000}, {"Water": 950}, settings, fill_rate=10
    )

    result = controller.cycle()

    assert result == PumpCycle(fluid="Water", pumped_seconds=10)
    assert sleeps == [1, 10]
    assert pump.calls == [False, True, False]
