"""Placement rules for the flying machine grid.

Every function here is a pure state transition: it takes a
:class:`~flyingmachine.machine_state.MachineState` and returns the next one.
The rules for a click on a cell are:

* an empty cell receives a new block facing north;
* a cell holding a different block type, or the same type when that type has
  no meaningful facing (redstone, slime, honeycomb), is replaced in place by a
  fresh block facing north;
* a cell holding the same directional type is rotated one step along
  ``NORTH -> EAST -> SOUTH -> WEST -> UP -> DOWN -> NORTH``.

Clicking with nothing selected, or with ``EMPTY`` (a label only), changes nothing.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from .blocks import Block, BlockType, Cell, has_direction
from .machine_state import MachineState, initial_state
from .simulation import NullSimulationDriver, SimulationDriver
from .utils import CELL_SIZE, cell_from_pixel, find_block_index


LOGGER = logging.getLogger(__name__)

_NULL_DRIVER = NullSimulationDriver()


def apply_click(
    state: MachineState, cell: Cell, selected_type: Optional[BlockType]
) -> MachineState:
    """Return the state after clicking ``cell`` with ``selected_type``."""

    if selected_type is None or selected_type is BlockType.EMPTY:
        return state

    index = find_block_index(state, cell)
    if index is None:
        block = Block(Cell(cell.x, cell.y, 0), selected_type)
        LOGGER.debug("Placed %s at (%d, %d)", selected_type.value, cell.x, cell.y)
        return replace(state, blocks=state.blocks + (block,))

    existing = state.blocks[index]
    if existing.type is selected_type and has_direction(selected_type):
        block = existing.rotated()
        LOGGER.debug(
            "Rotated %s at (%d, %d) to %s",
            selected_type.value,
            cell.x,
            cell.y,
            block.direction.value,
        )
    else:
        block = Block(existing.cell, selected_type)
        LOGGER.debug(
            "Replaced %s at (%d, %d) with %s",
            existing.type.value,
            cell.x,
            cell.y,
            selected_type.value,
        )

    blocks = state.blocks[:index] + (block,) + state.blocks[index + 1 :]
    return replace(state, blocks=blocks)


def place_at_pixel(
    state: MachineState, px: float, py: float, cell_size: int = CELL_SIZE
) -> MachineState:
    """Apply a pointer click at surface pixel ``(px, py)``.

    Uses the currently selected block type.
    """

    return apply_click(state, cell_from_pixel(px, py, cell_size), state.selected_block)


def select_block(state: MachineState, block_type: Optional[BlockType]) -> MachineState:
    """Return ``state`` with ``block_type`` selected.  The grid is untouched.

    ``EMPTY`` cannot be placed, so selecting it clears the selection.
    """

    if block_type is BlockType.EMPTY:
        block_type = None
    return replace(state, selected_block=block_type)


def reset() -> MachineState:
    """Return the initial editor state."""

    return initial_state()


def toggle_simulation(state: MachineState) -> MachineState:
    """Flip the simulation flag and nothing else."""

    return replace(state, is_simulating=not state.is_simulating)


def tick(state: MachineState, driver: Optional[SimulationDriver] = None) -> MachineState:
    """Advance the machine by one frame.

    While the simulation flag is off the state is returned as is.  Otherwise
    ``driver`` (a no-op driver by default) computes the next state.
    """

    if not state.is_simulating:
        return state
    return (driver or _NULL_DRIVER).step(state)
