import numpy as np

from flyingmachine import placement
from flyingmachine.blocks import BlockType, Cell
from flyingmachine.machine_state import initial_state
from flyingmachine.utils import BLOCK_VALUES, cell_from_pixel, find_block_index, occupancy_grid


def test_cell_from_pixel_floors_by_cell_size():
    assert cell_from_pixel(0, 0) == Cell(0, 0, 0)
    assert cell_from_pixel(39.9, 40) == Cell(0, 1, 0)
    assert cell_from_pixel(85, 130) == Cell(2, 3, 0)
    assert cell_from_pixel(-1, 5) == Cell(-1, 0, 0)
    assert cell_from_pixel(30, 30, cell_size=10) == Cell(3, 3, 0)


def test_find_block_index_matches_x_and_y_only():
    state = placement.apply_click(initial_state(), Cell(1, 2), BlockType.PISTON)
    state = placement.apply_click(state, Cell(4, 4), BlockType.REDSTONE)
    assert find_block_index(state, Cell(4, 4, 9)) == 1
    assert find_block_index(state, Cell(2, 1)) is None


def test_occupancy_grid_marks_blocks_inside_window():
    state = initial_state()
    state = placement.apply_click(state, Cell(0, 0), BlockType.OBSERVER)
    state = placement.apply_click(state, Cell(2, 1), BlockType.SLIME_BLOCK)
    state = placement.apply_click(state, Cell(9, 9), BlockType.PISTON)

    grid = occupancy_grid(state, width=3, height=2)

    assert grid.dtype == np.uint8
    assert grid.shape == (2, 3)
    assert grid[0, 0] == BLOCK_VALUES[BlockType.OBSERVER]
    assert grid[1, 2] == BLOCK_VALUES[BlockType.SLIME_BLOCK]
    assert int(np.count_nonzero(grid)) == 2


def test_block_values_skip_empty():
    assert BlockType.EMPTY not in BLOCK_VALUES
    assert 0 not in BLOCK_VALUES.values()
