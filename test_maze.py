"""
Maze generation tests
"""
import random

import numpy as np
import pytest

from error_handling import ExitNotFound, InvalidDimension
from maze_generator import CellKind, MazeGenerator, find_cell, force_odd, generate_maze
from maze_solver import reachable_cells

SIZES = [(5, 5), (6, 8), (15, 15), (25, 25), (35, 25), (4, 21)]
SEEDS = range(12)


def walkable_cells(grid):
    return {(int(x), int(y)) for y, x in np.argwhere(grid != CellKind.WALL)}


@pytest.mark.parametrize("width,height", SIZES)
def test_dimensions_are_forced_odd(width, height):
    grid = generate_maze(width, height, rng=random.Random(0))
    assert grid.shape == (force_odd(height), force_odd(width))
    assert grid.shape[0] % 2 == 1 and grid.shape[1] % 2 == 1


@pytest.mark.parametrize("width,height", SIZES)
def test_exactly_one_start_and_exit(width, height):
    for seed in SEEDS:
        grid = generate_maze(width, height, rng=random.Random(seed))
        assert np.count_nonzero(grid == CellKind.START) == 1
        assert np.count_nonzero(grid == CellKind.EXIT) == 1
        assert find_cell(grid, CellKind.START) == (1, 1)


@pytest.mark.parametrize("width,height", SIZES)
def test_border_is_all_wall(width, height):
    for seed in SEEDS:
        grid = generate_maze(width, height, rng=random.Random(seed))
        assert np.all(grid[0, :] == CellKind.WALL)
        assert np.all(grid[-1, :] == CellKind.WALL)
        assert np.all(grid[:, 0] == CellKind.WALL)
        assert np.all(grid[:, -1] == CellKind.WALL)


@pytest.mark.parametrize("width,height", SIZES)
def test_every_walkable_cell_reachable_from_start(width, height):
    for seed in SEEDS:
        grid = generate_maze(width, height, rng=random.Random(seed))
        start = find_cell(grid, CellKind.START)
        assert reachable_cells(grid, start) == walkable_cells(grid)


def test_unseeded_generation_is_connected():
    for _ in range(20):
        grid = generate_maze(35, 25)
        assert reachable_cells(grid, (1, 1)) == walkable_cells(grid)


def test_exit_is_on_bottom_inner_row():
    for seed in SEEDS:
        grid = generate_maze(25, 25, rng=random.Random(seed))
        x, y = find_cell(grid, CellKind.EXIT)
        assert y == grid.shape[0] - 2
        assert 1 <= x <= grid.shape[1] - 2


def test_same_seed_gives_same_maze():
    first = generate_maze(35, 25, rng=random.Random(42))
    second = generate_maze(35, 25, rng=random.Random(42))
    assert np.array_equal(first, second)


def test_start_has_branches():
    grid = generate_maze(15, 15, rng=random.Random(3))
    for x, y in [(2, 1), (1, 2), (2, 2)]:
        assert grid[y, x] != CellKind.WALL


def test_carving_alone_produces_a_perfect_maze():
    gen = MazeGenerator(21, 15, rng=random.Random(7))
    gen.grid = np.full((gen.rows, gen.cols), CellKind.WALL, dtype=np.uint8)
    gen.carve_paths()

    lattice = [(x, y) for y in range(1, gen.rows, 2) for x in range(1, gen.cols, 2)]
    assert all(gen.grid[y, x] == CellKind.OPEN for x, y in lattice)
    # Spanning tree: V lattice cells joined by V - 1 opened walls
    assert np.count_nonzero(gen.grid == CellKind.OPEN) == 2 * len(lattice) - 1


def test_loops_only_added_near_start():
    for seed in SEEDS:
        grid = generate_maze(35, 25, rng=random.Random(seed))
        rows, cols = grid.shape
        # Carving never opens even/even cells, so any open one outside the box is a loop
        for y in range(2, rows - 1, 2):
            for x in range(2, cols - 1, 2):
                if x >= 10 or y >= 10:
                    assert grid[y, x] == CellKind.WALL


@pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-5, 10), (10, -1), (1, 10), (10, 1)])
def test_invalid_dimensions_rejected(width, height):
    with pytest.raises(InvalidDimension):
        generate_maze(width, height)


@pytest.mark.parametrize("value", [2.5, "15", None, True])
def test_non_integer_dimensions_rejected(value):
    with pytest.raises(InvalidDimension):
        generate_maze(value, 15)


def test_exit_not_found_when_only_start_is_open():
    # 3x3 has a single carvable cell, which is the start
    with pytest.raises(ExitNotFound):
        generate_maze(3, 3, rng=random.Random(0))


def test_narrow_maze_still_has_exit():
    grid = generate_maze(3, 9, rng=random.Random(0))
    assert grid.shape == (9, 3)
    assert find_cell(grid, CellKind.EXIT) == (1, 7)
    assert reachable_cells(grid, (1, 1)) == walkable_cells(grid)
