"""Test doubles shared by the renderer tests."""

from __future__ import annotations

import asyncio

from flyingmachine.assets import AssetProvider
from flyingmachine.renderer import DrawingContext


class RecordingContext(DrawingContext):
    """Drawing context that records every call as ``(name, args)``."""

    def __init__(self, width: int = 200, height: int = 120) -> None:
        self.width = width
        self.height = height
        self.calls: list[tuple] = []
        self.released = 0

    def _record(self, name, *args):
        self.calls.append((name, *args))

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]

    def of(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]

    def clear_rect(self, x, y, w, h):
        self._record("clear_rect", x, y, w, h)

    def stroke_line(self, x0, y0, x1, y1, color, width=1):
        self._record("stroke_line", x0, y0, x1, y1, color, width)

    def fill_rect(self, x, y, w, h, color):
        self._record("fill_rect", x, y, w, h, color)

    def stroke_rect(self, x, y, w, h, color, width=1):
        self._record("stroke_rect", x, y, w, h, color, width)

    def fill_polygon(self, points, color):
        self._record("fill_polygon", list(points), color)

    def stroke_circle(self, cx, cy, radius, color, width=1):
        self._record("stroke_circle", cx, cy, radius, color, width)

    def fill_circle(self, cx, cy, radius, color):
        self._record("fill_circle", cx, cy, radius, color)

    def draw_image(self, image, x, y, w, h):
        self._record("draw_image", image, x, y, w, h)

    def save(self):
        self._record("save")

    def restore(self):
        self._record("restore")

    def translate(self, dx, dy):
        self._record("translate", dx, dy)

    def rotate(self, radians):
        self._record("rotate", radians)

    def scale(self, sx, sy):
        self._record("scale", sx, sy)

    def set_alpha(self, alpha):
        self._record("set_alpha", alpha)

    def release(self):
        self.released += 1


class ScriptedProvider(AssetProvider):
    """Provider returning ``"img:<key>"`` except for keys listed in ``failing``."""

    def __init__(self, failing=(), gate: asyncio.Event | None = None) -> None:
        self.failing = set(failing)
        self.gate = gate
        self.requested: list[str] = []
        self.released: list[str] = []

    async def resolve(self, key: str):
        self.requested.append(key)
        if self.gate is not None:
            await self.gate.wait()
        if key in self.failing:
            raise FileNotFoundError(key)
        return f"img:{key}"

    def release(self, image) -> None:
        self.released.append(image)
