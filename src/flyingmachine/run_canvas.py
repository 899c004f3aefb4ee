"""Canvas-based web front-end for the flying machine editor.

This front-end draws directly to the HTML5 canvas via PyScript/pyodide's JS
bridge.  Page buttons call the module-level :func:`select`,
:func:`toggle_simulation`, :func:`reset`, :func:`start` and :func:`stop`
helpers; clicks on the canvas place blocks.
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence

from js import Image, document, window  # type: ignore
from pyodide.ffi import create_proxy  # type: ignore

from . import placement
from .assets import TEXTURE_FILES, AssetProvider
from .blocks import BLOCK_LABELS, SELECTABLE_BLOCKS, BlockType
from .machine_state import MachineState, initial_state
from .renderer import Color, DrawingContext, OrientationRenderer, Point
from .simulation import NullSimulationDriver, SimulationDriver


LOGGER = logging.getLogger(__name__)

TEXTURE_URL = "/textures/"


class CanvasContext(DrawingContext):
    """Drawing context forwarding to a ``CanvasRenderingContext2D``."""

    def __init__(self, canvas: Any) -> None:
        self.canvas = canvas
        self.ctx = canvas.getContext("2d")
        self.width = int(canvas.width)
        self.height = int(canvas.height)

    def clear_rect(self, x: float, y: float, w: float, h: float) -> None:
        self.ctx.clearRect(x, y, w, h)

    def stroke_line(
        self, x0: float, y0: float, x1: float, y1: float, color: Color, width: int = 1
    ) -> None:
        ctx = self.ctx
        ctx.strokeStyle = color
        ctx.lineWidth = width
        ctx.beginPath()
        ctx.moveTo(x0, y0)
        ctx.lineTo(x1, y1)
        ctx.stroke()

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        self.ctx.fillStyle = color
        self.ctx.fillRect(x, y, w, h)

    def stroke_rect(
        self, x: float, y: float, w: float, h: float, color: Color, width: int = 1
    ) -> None:
        self.ctx.strokeStyle = color
        self.ctx.lineWidth = width
        self.ctx.strokeRect(x, y, w, h)

    def fill_polygon(self, points: Sequence[Point], color: Color) -> None:
        if not points:
            return
        ctx = self.ctx
        ctx.fillStyle = color
        ctx.beginPath()
        first, *rest = points
        ctx.moveTo(*first)
        for px, py in rest:
            ctx.lineTo(px, py)
        ctx.closePath()
        ctx.fill()

    def stroke_circle(
        self, cx: float, cy: float, radius: float, color: Color, width: int = 1
    ) -> None:
        ctx = self.ctx
        ctx.strokeStyle = color
        ctx.lineWidth = width
        ctx.beginPath()
        ctx.arc(cx, cy, radius, 0, math.pi * 2)
        ctx.stroke()

    def fill_circle(self, cx: float, cy: float, radius: float, color: Color) -> None:
        ctx = self.ctx
        ctx.fillStyle = color
        ctx.beginPath()
        ctx.arc(cx, cy, radius, 0, math.pi * 2)
        ctx.fill()

    def draw_image(self, image: Any, x: float, y: float, w: float, h: float) -> None:
        self.ctx.drawImage(image, x, y, w, h)

    def save(self) -> None:
        self.ctx.save()

    def restore(self) -> None:
        self.ctx.restore()

    def translate(self, dx: float, dy: float) -> None:
        self.ctx.translate(dx, dy)

    def rotate(self, radians: float) -> None:
        self.ctx.rotate(radians)

    def scale(self, sx: float, sy: float) -> None:
        self.ctx.scale(sx, sy)

    def set_alpha(self, alpha: float) -> None:
        self.ctx.globalAlpha = alpha

    def release(self) -> None:
        if self.ctx is not None:
            self.ctx.clearRect(0, 0, self.width, self.height)
        self.ctx = None
        self.canvas = None


class CanvasAssetProvider(AssetProvider):
    """Load textures as browser ``Image`` elements."""

    def __init__(self, base_url: str = TEXTURE_URL, files: Optional[Dict[str, str]] = None) -> None:
        self.base_url = base_url
        self.files = dict(TEXTURE_FILES if files is None else files)

    async def resolve(self, key: str) -> Any:
        img = Image.new()
        img.src = self.base_url + self.files[key]
        # ``decode`` rejects when the image cannot be fetched or decoded.
        await img.decode()
        return img


@dataclass
class Runner:
    state: MachineState = field(default_factory=initial_state)
    running: bool = False
    renderer: Optional[OrientationRenderer] = None
    driver: SimulationDriver = field(default_factory=NullSimulationDriver)
    raf_handle: Optional[int] = None
    click_proxy: Any = None
    tick_proxy: Any = None

    def _log(self, msg: str) -> None:
        LOGGER.info(msg)
        el = document.getElementById("diagnostics")
        if el:
            div = document.createElement("div")
            div.textContent = msg
            el.prepend(div)

    def _update_status(self) -> None:
        """Update the status readout in the DOM if present."""
        el = document.getElementById("status")
        if el:
            selected = self.state.selected_block
            label = BLOCK_LABELS[selected] if selected else "None"
            mode = "Simulating" if self.state.is_simulating else "Editing"
            el.textContent = f"{mode} | {label} | Blocks: {len(self.state.blocks)}"

    def _draw(self) -> None:
        if self.renderer is not None:
            self.renderer.render(self.state)
        self._update_status()

    def _tick(self, ts: float) -> None:
        if not self.running:
            return
        try:
            next_state = placement.tick(self.state, self.driver)
            if next_state is not self.state:
                self.state = next_state
                self._draw()
        except Exception as exc:
            # Keep the animation loop alive with a fresh machine.
            self._log(f"Crash detected: {exc}")
            self.state = placement.reset()
            self._draw()
        self._schedule()

    def _schedule(self) -> None:
        # One proxy serves every frame; it is destroyed in ``stop``.
        if self.tick_proxy is None:
            self.tick_proxy = create_proxy(self._tick)
        self.raf_handle = window.requestAnimationFrame(self.tick_proxy)

    def _on_click(self, evt) -> None:
        if not self.running:
            return
        self.state = placement.place_at_pixel(self.state, evt.offsetX, evt.offsetY)
        self._draw()

    def select(self, name: Optional[str]) -> None:
        """Select the block type whose value is ``name``; ``None`` clears it."""
        if name is None:
            block_type = None
        else:
            try:
                block_type = BlockType(name)
            except ValueError:
                self._log(f"Unknown block type: {name}")
                return
            if block_type not in SELECTABLE_BLOCKS:
                self._log(f"Block type not placeable: {name}")
                return
        self.state = placement.select_block(self.state, block_type)
        self._update_status()

    def toggle_simulation(self) -> None:
        self.state = placement.toggle_simulation(self.state)
        self._log("Simulation started" if self.state.is_simulating else "Simulation stopped")
        self._draw()

    def reset(self) -> None:
        self.state = placement.reset()
        self._log("Reset")
        self._draw()

    def start(self) -> None:
        if self.running:
            self._log("Already running")
            return
        canvas = document.getElementById("canvas")
        if not canvas:
            self._log("Canvas element not found")
            return
        self.state = initial_state()
        self.renderer = OrientationRenderer(CanvasAssetProvider())
        asyncio.ensure_future(self.renderer.initialize(CanvasContext(canvas)))
        self.click_proxy = create_proxy(self._on_click)
        canvas.addEventListener("click", self.click_proxy)
        self.running = True
        self._draw()
        self._schedule()
        self._log("Editor started")

    def stop(self) -> None:
        if not self.running:
            self._log("Stop ignored: not running")
            return
        self.running = False
        if self.raf_handle is not None:
            window.cancelAnimationFrame(self.raf_handle)
            self.raf_handle = None
        if self.click_proxy is not None:
            canvas = document.getElementById("canvas")
            if canvas:
                canvas.removeEventListener("click", self.click_proxy)
            self.click_proxy.destroy()
            self.click_proxy = None
        if self.tick_proxy is not None:
            self.tick_proxy.destroy()
            self.tick_proxy = None
        if self.renderer is not None:
            self.renderer.cleanup()
            self.renderer = None
        self._log("Editor stopped")


runner = Runner()


def start() -> None:
    runner.start()


def stop() -> None:
    runner.stop()


def select(name: Optional[str]) -> None:
    runner.select(name)


def toggle_simulation() -> None:
    runner.toggle_simulation()


def reset() -> None:
    runner.reset()
