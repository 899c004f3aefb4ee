"""Top-down, direction-aware renderer for the flying machine grid.

The renderer draws onto a :class:`DrawingContext`, a small immediate-mode 2D
API modelled on the HTML5 canvas.  Two implementations ship with the package:
:class:`flyingmachine.pygame_context.PygameContext` for the desktop shell and
:class:`flyingmachine.run_canvas.CanvasContext` for the browser.

Each frame is drawn from scratch:

1. clear the surface;
2. draw the light grid overlay;
3. draw every block in placement order, rotated about its cell centre to
   face its direction, then overlay a direction indicator for blocks whose
   facing matters.

Blocks without a loaded texture are drawn as an outlined white square.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .assets import (
    SIDE,
    TOP,
    AssetProvider,
    SolidFillAssets,
    TextureAssets,
    face_key,
    required_keys,
)
from .blocks import TWO_FACE_BLOCKS, Block, BlockType, Direction, has_direction
from .machine_state import MachineState
from .utils import CELL_SIZE


LOGGER = logging.getLogger(__name__)

Point = Tuple[float, float]
Color = str

GRID_COLOR: Color = "#e0e0e0"
GRID_LINE_WIDTH = 1
FALLBACK_FILL: Color = "#ffffff"
FALLBACK_OUTLINE: Color = "#000000"
FALLBACK_LINE_WIDTH = 2
INDICATOR_COLOR: Color = "#000000"
INDICATOR_LINE_WIDTH = 2
INDICATOR_ALPHA = 0.7

# Arrow length as a fraction of the cell size.
ARROW_LENGTH_RATIO = 0.4
ARROW_HEAD_SIZE = 8
ARROW_HEAD_ANGLE = math.pi / 6
# The Up/Down glyphs are drawn smaller than the arrows.
VERTICAL_INDICATOR_RATIO = 0.6
CENTER_DOT_RADIUS = 2

# Scale applied to a side texture standing in for an up/down face.
VERTICAL_FACE_SCALE = 0.8

# (rotation in radians, scale) applied to a texture for each facing.  Positive
# angles turn clockwise on a y-down surface.
ORIENTATION_TRANSFORMS: Dict[Direction, Tuple[float, float]] = {
    Direction.NORTH: (0.0, 1.0),
    Direction.EAST: (math.pi / 2, 1.0),
    Direction.SOUTH: (math.pi, 1.0),
    Direction.WEST: (-math.pi / 2, 1.0),
    Direction.UP: (0.0, VERTICAL_FACE_SCALE),
    Direction.DOWN: (math.pi, VERTICAL_FACE_SCALE),
}

# Unit vectors on a y-down surface.
_HEADINGS: Dict[Direction, Point] = {
    Direction.NORTH: (0.0, -1.0),
    Direction.SOUTH: (0.0, 1.0),
    Direction.EAST: (1.0, 0.0),
    Direction.WEST: (-1.0, 0.0),
}


class DrawingContext:
    """Immediate-mode drawing surface used by :class:`OrientationRenderer`.

    Coordinates are in surface pixels and go through the current transform,
    which ``save``/``restore`` push and pop.  ``set_alpha`` applies to
    everything drawn until it is changed again.
    """

    width: int
    height: int

    def clear_rect(self, x: float, y: float, w: float, h: float) -> None:
        raise NotImplementedError

    def stroke_line(
        self, x0: float, y0: float, x1: float, y1: float, color: Color, width: int = 1
    ) -> None:
        raise NotImplementedError

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        raise NotImplementedError

    def stroke_rect(
        self, x: float, y: float, w: float, h: float, color: Color, width: int = 1
    ) -> None:
        raise NotImplementedError

    def fill_polygon(self, points: Sequence[Point], color: Color) -> None:
        raise NotImplementedError

    def stroke_circle(
        self, cx: float, cy: float, radius: float, color: Color, width: int = 1
    ) -> None:
        raise NotImplementedError

    def fill_circle(self, cx: float, cy: float, radius: float, color: Color) -> None:
        raise NotImplementedError

    def draw_image(self, image: Any, x: float, y: float, w: float, h: float) -> None:
        raise NotImplementedError

    def save(self) -> None:
        raise NotImplementedError

    def restore(self) -> None:
        raise NotImplementedError

    def translate(self, dx: float, dy: float) -> None:
        raise NotImplementedError

    def rotate(self, radians: float) -> None:
        raise NotImplementedError

    def scale(self, sx: float, sy: float) -> None:
        raise NotImplementedError

    def set_alpha(self, alpha: float) -> None:
        raise NotImplementedError

    def release(self) -> None:
        """Free the underlying surface.  Called once by ``cleanup``."""


@dataclass(frozen=True)
class Visual:
    """Texture chosen for a block plus the transform to draw it with."""

    image: Any
    angle: float = 0.0
    scale: float = 1.0


def resolve_visual(assets: Any, block_type: BlockType, direction: Direction) -> Optional[Visual]:
    """Pick the texture and transform for a block.

    Pistons facing up use their dedicated top texture untransformed.  Any other
    facing, and an up-facing piston whose top texture is missing, uses the
    side texture with :data:`ORIENTATION_TRANSFORMS`.  Returns ``None`` when no
    texture is loaded.
    """

    if block_type in TWO_FACE_BLOCKS:
        if direction is Direction.UP:
            top = assets.get(face_key(block_type, TOP))
            if top is not None:
                return Visual(top)
        image = assets.get(face_key(block_type, SIDE))
    else:
        image = assets.get(block_type.value)
    if image is None:
        return None
    angle, scale = ORIENTATION_TRANSFORMS[direction]
    return Visual(image, angle, scale)


def arrow_geometry(
    cx: float, cy: float, direction: Direction, cell_size: int = CELL_SIZE
) -> Tuple[Point, List[Point]]:
    """Return the arrow tip and the arrowhead triangle for a horizontal facing."""

    dx, dy = _HEADINGS[direction]
    length = cell_size * ARROW_LENGTH_RATIO
    end_x = cx + dx * length
    end_y = cy + dy * length
    angle = math.atan2(end_y - cy, end_x - cx)
    head = [
        (end_x, end_y),
        (
            end_x - ARROW_HEAD_SIZE * math.cos(angle - ARROW_HEAD_ANGLE),
            end_y - ARROW_HEAD_SIZE * math.sin(angle - ARROW_HEAD_ANGLE),
        ),
        (
            end_x - ARROW_HEAD_SIZE * math.cos(angle + ARROW_HEAD_ANGLE),
            end_y - ARROW_HEAD_SIZE * math.sin(angle + ARROW_HEAD_ANGLE),
        ),
    ]
    return (end_x, end_y), head


class OrientationRenderer:
    """Draw :class:`MachineState` snapshots onto a :class:`DrawingContext`.

    Supplying an ``asset_provider`` selects textured drawing; without one
    every block uses the fallback fill.  The renderer owns its context once
    initialised and should be used as a context manager (or have
    :meth:`cleanup` called) by whoever created it.
    """

    def __init__(
        self,
        asset_provider: Optional[AssetProvider] = None,
        *,
        cell_size: int = CELL_SIZE,
    ) -> None:
        self.cell_size = cell_size
        self._provider = asset_provider
        self._assets = self._new_assets()
        self._context: Optional[DrawingContext] = None
        self._last_state: Optional[MachineState] = None

    def _new_assets(self):
        if self._provider is None:
            return SolidFillAssets()
        return TextureAssets(self._provider)

    @property
    def context(self) -> Optional[DrawingContext]:
        return self._context

    @property
    def textured(self) -> bool:
        return self._provider is not None

    @property
    def assets(self):
        return self._assets

    async def initialize(self, context: DrawingContext) -> None:
        """Bind ``context`` and load every asset.

        The empty grid is drawn straight away.  Once loading finishes the last
        rendered state is redrawn with textures, unless the renderer was
        cleaned up or re-initialised in the meantime.
        """

        if self._context is not None and self._context is not context:
            self._context.release()
        self._assets.release()
        self._context = context
        assets = self._assets = self._new_assets()
        self.redraw()

        await assets.load(required_keys())

        if self._context is not context or self._assets is not assets:
            LOGGER.debug("Renderer torn down while loading assets")
            assets.release()
            return
        self.redraw()

    def render(self, state: MachineState) -> None:
        """Draw ``state``.  Does nothing before ``initialize`` or after ``cleanup``."""

        if self._context is None:
            return
        self._last_state = state
        self._draw(self._context, state)

    def redraw(self) -> None:
        """Draw the last rendered state again, or just the grid."""

        if self._context is None:
            return
        self._draw(self._context, self._last_state)

    def cleanup(self) -> None:
        """Release the context and all asset handles.  Safe to call repeatedly."""

        context = self._context
        self._context = None
        self._last_state = None
        if context is not None:
            context.release()
        self._assets.release()

    def __enter__(self) -> "OrientationRenderer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()
        return None

    # Drawing ----------------------------------------------------------
    def _draw(self, ctx: DrawingContext, state: Optional[MachineState]) -> None:
        ctx.clear_rect(0, 0, ctx.width, ctx.height)
        self._draw_grid(ctx)
        if state is None:
            return
        for block in state.blocks:
            self._draw_block(ctx, block)

    def _draw_grid(self, ctx: DrawingContext) -> None:
        size = self.cell_size
        for x in range(0, ctx.width + 1, size):
            ctx.stroke_line(x, 0, x, ctx.height, GRID_COLOR, GRID_LINE_WIDTH)
        for y in range(0, ctx.height + 1, size):
            ctx.stroke_line(0, y, ctx.width, y, GRID_COLOR, GRID_LINE_WIDTH)

    def _draw_block(self, ctx: DrawingContext, block: Block) -> None:
        size = self.cell_size
        x = block.cell.x * size
        y = block.cell.y * size

        visual = resolve_visual(self._assets, block.type, block.direction)
        if visual is not None:
            ctx.save()
            ctx.translate(x + size / 2, y + size / 2)
            if visual.angle:
                ctx.rotate(visual.angle)
            if visual.scale != 1.0:
                ctx.scale(visual.scale, visual.scale)
            ctx.draw_image(visual.image, -size / 2, -size / 2, size, size)
            ctx.restore()
        else:
            ctx.fill_rect(x, y, size, size, FALLBACK_FILL)
            ctx.stroke_rect(x, y, size, size, FALLBACK_OUTLINE, FALLBACK_LINE_WIDTH)

        if has_direction(block.type):
            ctx.set_alpha(INDICATOR_ALPHA)
            self._draw_indicator(ctx, x + size / 2, y + size / 2, block.direction)
            ctx.set_alpha(1.0)

    def _draw_indicator(
        self, ctx: DrawingContext, cx: float, cy: float, direction: Direction
    ) -> None:
        half = self.cell_size * ARROW_LENGTH_RATIO * VERTICAL_INDICATOR_RATIO / 2

        if direction is Direction.UP:
            ctx.stroke_circle(cx, cy, half, INDICATOR_COLOR, INDICATOR_LINE_WIDTH)
            ctx.fill_circle(cx, cy, CENTER_DOT_RADIUS, INDICATOR_COLOR)
            return
        if direction is Direction.DOWN:
            ctx.stroke_line(
                cx - half, cy - half, cx + half, cy + half, INDICATOR_COLOR, INDICATOR_LINE_WIDTH
            )
            ctx.stroke_line(
                cx + half, cy - half, cx - half, cy + half, INDICATOR_COLOR, INDICATOR_LINE_WIDTH
            )
            return

        (end_x, end_y), head = arrow_geometry(cx, cy, direction, self.cell_size)
        ctx.stroke_line(cx, cy, end_x, end_y, INDICATOR_COLOR, INDICATOR_LINE_WIDTH)
        ctx.fill_polygon(head, INDICATOR_COLOR)
