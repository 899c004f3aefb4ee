"""pygame backend for the renderer.

:class:`PygameContext` implements :class:`~flyingmachine.renderer.DrawingContext`
on top of a ``pygame.Surface``.  pygame has no transform state of its own, so
the context keeps the current affine transform as a 3x3 numpy matrix and
pushes copies on ``save``.  Images are drawn with ``pygame.transform.rotozoom``
using the rotation and uniform scale extracted from that matrix.

Translucent drawing (``set_alpha`` below ``1``) goes to an ``SRCALPHA`` layer
that is composited onto the surface when the alpha changes again.
"""

from __future__ import annotations

import asyncio
import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pygame
from numpy.typing import NDArray

from .assets import TEXTURE_FILES, AssetProvider
from .renderer import Color, DrawingContext, Point


BACKGROUND: Color = "#ffffff"

Matrix = NDArray[np.float64]


def _translation(dx: float, dy: float) -> Matrix:
    return np.array([[1.0, 0.0, dx], [0.0, 1.0, dy], [0.0, 0.0, 1.0]])


def _rotation(radians: float) -> Matrix:
    c, s = math.cos(radians), math.sin(radians)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def _scaling(sx: float, sy: float) -> Matrix:
    return np.array([[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]])


class PygameContext(DrawingContext):
    """Drawing context backed by a pygame surface."""

    def __init__(self, surface: pygame.Surface, background: Color = BACKGROUND) -> None:
        self.surface: Optional[pygame.Surface] = surface
        self.width, self.height = surface.get_size()
        self.background = pygame.Color(background)
        self._matrix: Matrix = np.identity(3)
        self._stack: List[Matrix] = []
        self._alpha = 1.0
        self._layer: Optional[pygame.Surface] = None

    # Transform state --------------------------------------------------
    def save(self) -> None:
        self._stack.append(self._matrix.copy())

    def restore(self) -> None:
        if self._stack:
            self._matrix = self._stack.pop()

    def translate(self, dx: float, dy: float) -> None:
        self._matrix = self._matrix @ _translation(dx, dy)

    def rotate(self, radians: float) -> None:
        self._matrix = self._matrix @ _rotation(radians)

    def scale(self, sx: float, sy: float) -> None:
        self._matrix = self._matrix @ _scaling(sx, sy)

    def transform_point(self, x: float, y: float) -> Point:
        px, py, _ = self._matrix @ np.array([x, y, 1.0])
        return float(px), float(py)

    def _rect_points(self, x: float, y: float, w: float, h: float) -> List[Point]:
        return [
            self.transform_point(x, y),
            self.transform_point(x + w, y),
            self.transform_point(x + w, y + h),
            self.transform_point(x, y + h),
        ]

    def _uniform_scale(self) -> float:
        return math.sqrt(abs(float(np.linalg.det(self._matrix[:2, :2]))))

    # Alpha ------------------------------------------------------------
    @property
    def _target(self) -> pygame.Surface:
        return self._layer if self._layer is not None else self.surface

    def set_alpha(self, alpha: float) -> None:
        alpha = max(0.0, min(1.0, alpha))
        if alpha == self._alpha:
            return
        self._flush_layer()
        self._alpha = alpha
        if alpha < 1.0 and self.surface is not None:
            self._layer = pygame.Surface(self.surface.get_size(), pygame.SRCALPHA)

    def _flush_layer(self) -> None:
        if self._layer is None:
            return
        if self.surface is not None:
            self._layer.set_alpha(round(255 * self._alpha))
            self.surface.blit(self._layer, (0, 0))
        self._layer = None

    # Primitives -------------------------------------------------------
    def clear_rect(self, x: float, y: float, w: float, h: float) -> None:
        points = self._rect_points(x, y, w, h)
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        rect = pygame.Rect(
            math.floor(min(xs)),
            math.floor(min(ys)),
            math.ceil(max(xs) - min(xs)),
            math.ceil(max(ys) - min(ys)),
        )
        self.surface.fill(self.background, rect)

    def stroke_line(
        self, x0: float, y0: float, x1: float, y1: float, color: Color, width: int = 1
    ) -> None:
        pygame.draw.line(
            self._target,
            pygame.Color(color),
            self.transform_point(x0, y0),
            self.transform_point(x1, y1),
            width,
        )

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        pygame.draw.polygon(self._target, pygame.Color(color), self._rect_points(x, y, w, h))

    def stroke_rect(
        self, x: float, y: float, w: float, h: float, color: Color, width: int = 1
    ) -> None:
        pygame.draw.polygon(
            self._target, pygame.Color(color), self._rect_points(x, y, w, h), width
        )

    def fill_polygon(self, points: Sequence[Point], color: Color) -> None:
        pygame.draw.polygon(
            self._target,
            pygame.Color(color),
            [self.transform_point(px, py) for px, py in points],
        )

    def stroke_circle(
        self, cx: float, cy: float, radius: float, color: Color, width: int = 1
    ) -> None:
        pygame.draw.circle(
            self._target,
            pygame.Color(color),
            self.transform_point(cx, cy),
            radius * self._uniform_scale(),
            width,
        )

    def fill_circle(self, cx: float, cy: float, radius: float, color: Color) -> None:
        pygame.draw.circle(
            self._target,
            pygame.Color(color),
            self.transform_point(cx, cy),
            radius * self._uniform_scale(),
        )

    def draw_image(self, image: Any, x: float, y: float, w: float, h: float) -> None:
        sized = pygame.transform.scale(image, (max(1, round(w)), max(1, round(h))))
        # pygame rotates counter-clockwise, the matrix angle is clockwise on screen.
        angle = math.degrees(math.atan2(self._matrix[1, 0], self._matrix[0, 0]))
        drawn = pygame.transform.rotozoom(sized, -angle, self._uniform_scale())
        cx, cy = self.transform_point(x + w / 2, y + h / 2)
        self._target.blit(drawn, drawn.get_rect(center=(round(cx), round(cy))))

    def release(self) -> None:
        self._flush_layer()
        self._stack.clear()
        self._matrix = np.identity(3)
        self.surface = None


class FileAssetProvider(AssetProvider):
    """Load textures from a directory with ``pygame.image.load``."""

    def __init__(self, asset_dir: str | Path, files: Optional[Dict[str, str]] = None) -> None:
        self.asset_dir = Path(asset_dir)
        self.files = dict(TEXTURE_FILES if files is None else files)

    def path_for(self, key: str) -> Path:
        try:
            return self.asset_dir / self.files[key]
        except KeyError:
            raise KeyError(f"No texture registered for {key}") from None

    async def resolve(self, key: str) -> pygame.Surface:
        path = self.path_for(key)
        # Let other handlers run between file loads.
        await asyncio.sleep(0)
        return pygame.image.load(str(path))
