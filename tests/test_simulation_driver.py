from dataclasses import replace

from flyingmachine import placement
from flyingmachine.blocks import ActivationState, BlockType, Cell
from flyingmachine.machine_state import initial_state
from flyingmachine.simulation import NullSimulationDriver, SimulationDriver


class PowerEverything(SimulationDriver):
    def __init__(self) -> None:
        self.calls = 0

    def step(self, state):
        self.calls += 1
        blocks = tuple(replace(b, state=ActivationState.ACTIVE) for b in state.blocks)
        return replace(state, blocks=blocks)


def test_tick_is_inert_while_not_simulating():
    driver = PowerEverything()
    state = placement.apply_click(initial_state(), Cell(0, 0), BlockType.OBSERVER)
    assert placement.tick(state, driver) is state
    assert driver.calls == 0


def test_default_driver_leaves_state_untouched():
    state = placement.apply_click(initial_state(), Cell(0, 0), BlockType.OBSERVER)
    state = placement.toggle_simulation(state)
    assert placement.tick(state) is state
    assert NullSimulationDriver().step(state) is state


def test_custom_driver_runs_while_simulating():
    driver = PowerEverything()
    state = placement.apply_click(initial_state(), Cell(0, 0), BlockType.OBSERVER)
    state = placement.toggle_simulation(state)
    after = placement.tick(state, driver)
    assert driver.calls == 1
    assert after.blocks[0].state is ActivationState.ACTIVE
