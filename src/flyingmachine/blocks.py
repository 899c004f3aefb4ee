"""Block definitions for the flying machine grid.

A block is one typed, oriented cell on the grid.  The enumerations here are
closed: the renderer and the placement rules both key tables on them, so a
new block type needs an entry in each table below.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Tuple


class BlockType(str, Enum):
    """Every block the editor knows about."""

    STICKY_PISTON = "sticky_piston"
    PISTON = "piston"
    REDSTONE = "redstone"
    OBSERVER = "observer"
    SLIME_BLOCK = "slime_block"
    HONEYCOMB_BLOCK = "honeycomb_block"
    DISPENSER = "dispenser"
    EMPTY = "empty"


class Direction(str, Enum):
    """Facing of a block."""

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"
    UP = "up"
    DOWN = "down"

    def next(self) -> "Direction":
        """Return the direction one click further along the rotation cycle."""

        return _SUCCESSOR[self]


class ActivationState(str, Enum):
    """Power state of a block.  Nothing drives it yet."""

    ACTIVE = "active"
    INACTIVE = "inactive"


# Rotation order used when re-clicking a directional block.
DIRECTION_CYCLE: Tuple[Direction, ...] = (
    Direction.NORTH,
    Direction.EAST,
    Direction.SOUTH,
    Direction.WEST,
    Direction.UP,
    Direction.DOWN,
)

_SUCCESSOR: Dict[Direction, Direction] = {
    d: DIRECTION_CYCLE[(i + 1) % len(DIRECTION_CYCLE)]
    for i, d in enumerate(DIRECTION_CYCLE)
}

# Blocks whose facing carries no meaning.  Clicking them again resets them
# instead of rotating and the renderer draws no direction indicator.
NO_DIRECTION_BLOCKS: FrozenSet[BlockType] = frozenset(
    {BlockType.REDSTONE, BlockType.SLIME_BLOCK, BlockType.HONEYCOMB_BLOCK}
)

# Blocks with distinct side and top textures.
TWO_FACE_BLOCKS: FrozenSet[BlockType] = frozenset(
    {BlockType.STICKY_PISTON, BlockType.PISTON}
)

BLOCK_LABELS: Dict[BlockType, str] = {
    BlockType.STICKY_PISTON: "Sticky Piston",
    BlockType.PISTON: "Piston",
    BlockType.REDSTONE: "Redstone",
    BlockType.OBSERVER: "Observer",
    BlockType.SLIME_BLOCK: "Slime Block",
    BlockType.HONEYCOMB_BLOCK: "Honeycomb Block",
    BlockType.DISPENSER: "Dispenser",
    BlockType.EMPTY: "Air",
}

# ``EMPTY`` only exists as a label and is never offered for placement.
SELECTABLE_BLOCKS: Tuple[BlockType, ...] = tuple(
    t for t in BlockType if t is not BlockType.EMPTY
)


def has_direction(block_type: BlockType) -> bool:
    """Return ``True`` if ``block_type`` can be rotated."""

    return block_type not in NO_DIRECTION_BLOCKS


@dataclass(frozen=True)
class Cell:
    """Grid coordinate.  ``z`` is always ``0`` on the 2D grid."""

    x: int
    y: int
    z: int = 0

    def same_column(self, other: "Cell") -> bool:
        """Return ``True`` if both cells share ``x`` and ``y``."""

        return self.x == other.x and self.y == other.y


@dataclass(frozen=True)
class Block:
    """A placed block."""

    cell: Cell
    type: BlockType
    direction: Direction = Direction.NORTH
    state: ActivationState = ActivationState.INACTIVE

    def rotated(self) -> "Block":
        """Return a copy facing the next direction in the rotation cycle."""

        return Block(self.cell, self.type, self.direction.next(), self.state)
