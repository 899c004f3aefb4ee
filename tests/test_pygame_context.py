import asyncio
import logging
import math
import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame
import pytest

from flyingmachine.blocks import Block, BlockType, Cell
from flyingmachine.machine_state import MachineState
from flyingmachine.pygame_context import FileAssetProvider, PygameContext
from flyingmachine.renderer import OrientationRenderer

RED = (255, 0, 0)
BLUE = (0, 0, 255)
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)


def rgb(surface, x, y):
    return tuple(surface.get_at((x, y)))[:3]


def test_transform_stack_composes_and_restores():
    ctx = PygameContext(pygame.Surface((40, 40)))
    ctx.translate(10, 20)
    ctx.save()
    ctx.rotate(math.pi / 2)
    assert ctx.transform_point(1, 0) == pytest.approx((10, 21))
    ctx.scale(2, 2)
    assert ctx.transform_point(1, 0) == pytest.approx((10, 22))
    ctx.restore()
    assert ctx.transform_point(1, 0) == pytest.approx((11, 20))


def test_draw_image_rotates_clockwise():
    target = pygame.Surface((40, 40))
    target.fill(WHITE)
    image = pygame.Surface((40, 40))
    image.fill(BLUE)
    image.fill(RED, pygame.Rect(0, 0, 20, 40))  # left half red

    ctx = PygameContext(target)
    ctx.save()
    ctx.translate(20, 20)
    ctx.rotate(math.pi / 2)
    ctx.draw_image(image, -20, -20, 40, 40)
    ctx.restore()

    assert rgb(target, 20, 5) == RED
    assert rgb(target, 20, 35) == BLUE


def test_translucent_fill_is_blended_on_alpha_reset():
    target = pygame.Surface((10, 10))
    target.fill(WHITE)
    ctx = PygameContext(target)
    ctx.set_alpha(0.5)
    ctx.fill_rect(0, 0, 10, 10, "#000000")
    assert rgb(target, 5, 5) == WHITE
    ctx.set_alpha(1.0)
    r, g, b = rgb(target, 5, 5)
    assert 100 < r < 160
    assert r == g == b


def test_release_drops_surface():
    ctx = PygameContext(pygame.Surface((10, 10)))
    ctx.save()
    ctx.release()
    assert ctx.surface is None


def test_file_provider_loads_and_reports_missing(tmp_path):
    image = pygame.Surface((4, 4))
    image.fill(RED)
    pygame.image.save(image, str(tmp_path / "observer.bmp"))
    provider = FileAssetProvider(tmp_path, files={"observer": "observer.bmp", "redstone": "nope.bmp"})

    loaded = asyncio.run(provider.resolve("observer"))
    assert loaded.get_size() == (4, 4)

    with pytest.raises((FileNotFoundError, pygame.error)):
        asyncio.run(provider.resolve("redstone"))
    with pytest.raises(KeyError):
        provider.path_for("dispenser")


def test_renderer_falls_back_when_texture_directory_is_empty(tmp_path, caplog):
    target = pygame.Surface((120, 120))
    renderer = OrientationRenderer(FileAssetProvider(tmp_path))
    with caplog.at_level(logging.WARNING, logger="flyingmachine.assets"):
        asyncio.run(renderer.initialize(PygameContext(target)))
    assert "Failed to load asset" in caplog.text

    renderer.render(MachineState(blocks=(Block(Cell(1, 1), BlockType.REDSTONE),)))

    assert rgb(target, 40, 60) == BLACK
    assert rgb(target, 60, 60) == WHITE
    renderer.cleanup()
