"""Grid state container for the flying machine editor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .blocks import Block, BlockType


DEFAULT_SELECTION = BlockType.STICKY_PISTON


@dataclass(frozen=True)
class MachineState:
    """Immutable snapshot of the editor.

    ``blocks`` keeps placement order.  Replacing or rotating a block keeps its
    index, so consumers iterating the tuple see a stable order.  The
    ``is_simulating`` flag is toggled by the shells and only consulted by
    :func:`flyingmachine.placement.tick`.
    """

    blocks: Tuple[Block, ...] = ()
    selected_block: Optional[BlockType] = DEFAULT_SELECTION
    is_simulating: bool = False

    def __len__(self) -> int:
        return len(self.blocks)


def initial_state() -> MachineState:
    """Return the state of a freshly opened editor."""

    return MachineState()
