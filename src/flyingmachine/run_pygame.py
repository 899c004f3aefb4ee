"""pygame front-end for the flying machine editor.

Controls:

* left click places the selected block, or rotates / replaces the one there;
* ``1``..``7`` select a block type and ``0`` clears the selection;
* ``S`` toggles the simulation flag;
* ``R`` resets the grid.

The loop runs on asyncio so texture loading can proceed between frames, and
the renderer is held as a scoped resource for the lifetime of the loop.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

import pygame

from . import placement
from .blocks import BLOCK_LABELS, SELECTABLE_BLOCKS
from .machine_state import MachineState, initial_state
from .pygame_context import FileAssetProvider, PygameContext
from .renderer import OrientationRenderer
from .simulation import NullSimulationDriver, SimulationDriver
from .utils import CELL_SIZE


LOGGER = logging.getLogger(__name__)

# Frames per second to run the editor loop at
FPS = 60
# Default window size in pixels
WINDOW_WIDTH = 800
WINDOW_HEIGHT = 600
# Default texture directory
ASSET_DIR = Path("textures")

# Number keys bound to the selectable blocks in enum order.
BLOCK_KEYS = {pygame.K_1 + i: block for i, block in enumerate(SELECTABLE_BLOCKS)}


def caption(state: MachineState) -> str:
    """Return the window caption for ``state``."""

    selected = BLOCK_LABELS[state.selected_block] if state.selected_block else "None"
    status = "Simulating" if state.is_simulating else "Editing"
    return f"Flying Machine - {status} - {selected} - Blocks: {len(state.blocks)}"


def handle_event(event: pygame.event.Event, state: MachineState) -> MachineState:
    """Return the state after processing one input event."""

    if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
        return placement.place_at_pixel(state, *event.pos)
    if event.type != pygame.KEYDOWN:
        return state
    if event.key in BLOCK_KEYS:
        return placement.select_block(state, BLOCK_KEYS[event.key])
    if event.key == pygame.K_0:
        return placement.select_block(state, None)
    if event.key == pygame.K_s:
        state = placement.toggle_simulation(state)
        LOGGER.info("Simulation %s", "started" if state.is_simulating else "stopped")
        return state
    if event.key == pygame.K_r:
        LOGGER.info("Reset")
        return placement.reset()
    return state


class MachineRunner:
    """Manage the editor loop with start/stop controls."""

    def __init__(
        self,
        *,
        width: int = WINDOW_WIDTH,
        height: int = WINDOW_HEIGHT,
        asset_dir: Optional[Path] = ASSET_DIR,
        driver: Optional[SimulationDriver] = None,
    ) -> None:
        self.width = width
        self.height = height
        self.asset_dir = asset_dir
        self.driver = driver or NullSimulationDriver()
        self._running = False
        self._task: asyncio.Task | None = None
        self._loader: asyncio.Future | None = None
        self._state: MachineState = initial_state()

    @property
    def running(self) -> bool:
        return self._running

    @property
    def state(self) -> MachineState:
        return self._state

    def _make_renderer(self) -> OrientationRenderer:
        provider = FileAssetProvider(self.asset_dir) if self.asset_dir else None
        return OrientationRenderer(provider, cell_size=CELL_SIZE)

    async def _run_loop(self) -> None:
        # Ensure SDL/pygame binds to the visible canvas in the page when running on Web.
        os.environ.setdefault("SDL_HINT_EMSCRIPTEN_CANVAS_ELEMENT_ID", "#canvas")
        os.environ.setdefault("SDL_HINT_EMSCRIPTEN_KEYBOARD_ELEMENT", "#canvas")
        pygame.init()
        screen = pygame.display.set_mode((self.width, self.height))
        clock = pygame.time.Clock()
        self._state = initial_state()

        with self._make_renderer() as renderer:
            loader = self._loader = asyncio.ensure_future(
                renderer.initialize(PygameContext(screen))
            )
            LOGGER.info("Editor started")
            self._running = True
            rendered: MachineState | None = None
            while self._running:
                clock.tick(FPS)
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self._running = False
                    else:
                        self._state = handle_event(event, self._state)

                self._state = placement.tick(self._state, self.driver)
                # Texture arrival is redrawn by the renderer itself.
                if self._state is not rendered:
                    renderer.render(self._state)
                    rendered = self._state
                    pygame.display.set_caption(caption(self._state))
                pygame.display.flip()

                # Yield so asset loading and the host event loop can progress
                await asyncio.sleep(0)

            if not loader.done():
                loader.cancel()

        pygame.quit()
        LOGGER.info("Editor stopped")

    def start(self) -> None:
        if self._task and not self._task.done():
            LOGGER.info("Editor already running")
            return
        try:
            loop = asyncio.get_running_loop()
            self._task = loop.create_task(self._run_loop())
        except RuntimeError:
            # No running loop (plain Python); run until the window closes
            asyncio.run(self._run_loop())

    async def stop_async(self) -> None:
        if not self._running:
            return
        self._running = False
        if self._task:
            await self._task

    def stop(self) -> None:
        if not self._running:
            LOGGER.info("Stop ignored: editor not running")
            return
        self._running = False


# Module-level runner instance for convenience from PyScript
runner = MachineRunner()


def start() -> None:
    runner.start()


def stop() -> None:
    runner.stop()


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Flying machine grid editor.")
    parser.add_argument("--width", type=int, default=WINDOW_WIDTH, help="Window width in pixels.")
    parser.add_argument("--height", type=int, default=WINDOW_HEIGHT, help="Window height in pixels.")
    parser.add_argument(
        "--assets",
        type=Path,
        default=ASSET_DIR,
        help="Directory holding the block textures.",
    )
    parser.add_argument(
        "--no-textures",
        dest="textures",
        action="store_false",
        help="Draw every block with the plain fallback fill.",
    )
    parser.set_defaults(textures=True)
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(message)s"
    )
    editor = MachineRunner(
        width=args.width,
        height=args.height,
        asset_dir=args.assets if args.textures else None,
    )
    editor.start()


if __name__ == "__main__":  # pragma: no cover - manual execution only
    main()
