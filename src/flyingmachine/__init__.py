"""Grid editor for flying machines: placement rules and a top-down renderer."""

from .blocks import (
    ActivationState,
    Block,
    BlockType,
    Cell,
    Direction,
    BLOCK_LABELS,
    NO_DIRECTION_BLOCKS,
    SELECTABLE_BLOCKS,
)
from .machine_state import MachineState, initial_state
from .placement import (
    apply_click,
    place_at_pixel,
    reset,
    select_block,
    tick,
    toggle_simulation,
)
from .simulation import NullSimulationDriver, SimulationDriver
from .assets import AssetProvider, SolidFillAssets, TextureAssets
from .renderer import DrawingContext, OrientationRenderer
from .utils import CELL_SIZE, cell_from_pixel, occupancy_grid

__all__ = [
    "ActivationState",
    "Block",
    "BlockType",
    "Cell",
    "Direction",
    "BLOCK_LABELS",
    "NO_DIRECTION_BLOCKS",
    "SELECTABLE_BLOCKS",
    "MachineState",
    "initial_state",
    "apply_click",
    "place_at_pixel",
    "reset",
    "select_block",
    "tick",
    "toggle_simulation",
    "SimulationDriver",
    "NullSimulationDriver",
    "AssetProvider",
    "SolidFillAssets",
    "TextureAssets",
    "DrawingContext",
    "OrientationRenderer",
    "CELL_SIZE",
    "cell_from_pixel",
    "occupancy_grid",
]
