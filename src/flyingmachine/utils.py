"""Utility helpers for the flying machine grid."""

from __future__ import annotations

from typing import Optional

import numpy as np
from numpy.typing import NDArray

from .blocks import BlockType, Cell
from .machine_state import MachineState


# Size of a single grid cell in pixels.
CELL_SIZE = 40

Grid = NDArray[np.uint8]

# Mapping from ``BlockType`` to the integer stored in an occupancy grid.  ``0``
# represents an empty cell.
BLOCK_VALUES = {
    t: i + 1 for i, t in enumerate(t for t in BlockType if t is not BlockType.EMPTY)
}


def cell_from_pixel(px: float, py: float, cell_size: int = CELL_SIZE) -> Cell:
    """Return the cell under the surface-relative pixel ``(px, py)``.

    Floor division keeps negative offsets on the correct side of the origin,
    so a pointer just left of the surface maps to column ``-1``.
    """

    return Cell(int(px // cell_size), int(py // cell_size), 0)


def find_block_index(state: MachineState, cell: Cell) -> Optional[int]:
    """Return the index of the block occupying ``cell`` or ``None``.

    Only ``x`` and ``y`` take part in the comparison.
    """

    for index, block in enumerate(state.blocks):
        if block.cell.same_column(cell):
            return index
    return None


def occupancy_grid(state: MachineState, width: int, height: int) -> Grid:
    """Return a ``(height, width)`` grid of block values for ``state``.

    Blocks outside the window are skipped.  Later blocks overwrite earlier ones
    when they share a cell, which matches the renderer's draw order.
    """

    grid = np.zeros((height, width), dtype=np.uint8)
    for block in state.blocks:
        x, y = block.cell.x, block.cell.y
        if 0 <= y < height and 0 <= x < width:
            grid[y, x] = np.uint8(BLOCK_VALUES[block.type])
    return grid
