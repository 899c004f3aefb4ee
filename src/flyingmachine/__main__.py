"""Simple ASCII demo for the flying machine editor.

Run with: `python -m flyingmachine`

This module builds a small machine through the placement rules and prints the
occupancy grid followed by every block's facing, useful as a minimal smoke
test that placement and rotation behave as expected without a display.
"""

from __future__ import annotations

from . import BlockType, Cell, apply_click, initial_state, occupancy_grid
from .utils import BLOCK_VALUES

# One letter per block type for the printed grid.
GLYPHS = {
    BlockType.STICKY_PISTON: "S",
    BlockType.PISTON: "P",
    BlockType.REDSTONE: "R",
    BlockType.OBSERVER: "O",
    BlockType.SLIME_BLOCK: "L",
    BlockType.HONEYCOMB_BLOCK: "H",
    BlockType.DISPENSER: "D",
}
_VALUE_GLYPHS = {BLOCK_VALUES[t]: g for t, g in GLYPHS.items()}


def main() -> None:
    state = initial_state()
    clicks = [
        (Cell(1, 1), BlockType.STICKY_PISTON),
        (Cell(1, 1), BlockType.STICKY_PISTON),
        (Cell(2, 1), BlockType.SLIME_BLOCK),
        (Cell(3, 1), BlockType.OBSERVER),
        (Cell(3, 1), BlockType.OBSERVER),
        (Cell(3, 1), BlockType.OBSERVER),
        (Cell(1, 2), BlockType.REDSTONE),
    ]
    for cell, block_type in clicks:
        state = apply_click(state, cell, block_type)

    for row in occupancy_grid(state, width=6, height=4):
        print("".join(_VALUE_GLYPHS.get(int(v), ".") for v in row))
    for block in state.blocks:
        print(f"({block.cell.x}, {block.cell.y}) {block.type.value} -> {block.direction.value}")


if __name__ == "__main__":
    main()
