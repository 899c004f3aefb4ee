"""Extension point for driving the machine over time.

No block behaviour is modelled yet.  The shells call
:func:`flyingmachine.placement.tick` once per frame and the tick is forwarded
to a :class:`SimulationDriver` while the simulation flag is set.  A real
driver (pistons pushing, observers firing) only has to subclass
:class:`SimulationDriver`; placement and rendering stay untouched.
"""

from __future__ import annotations

from .machine_state import MachineState


class SimulationDriver:
    """Advance a :class:`MachineState` by one tick."""

    def step(self, state: MachineState) -> MachineState:
        raise NotImplementedError


class NullSimulationDriver(SimulationDriver):
    """Driver that leaves the machine untouched."""

    def step(self, state: MachineState) -> MachineState:
        return state
