"""
Maze analysis tests
"""
import random

import numpy as np

from analyze_maze import analyze, main, render_ascii
from maze_generator import CellKind, MazeGenerator, generate_maze


def test_render_ascii(build_grid):
    grid = build_grid(["#####", "#S..E", "#####"])
    assert render_ascii(grid) == "#####\n#S  E\n#####"
    assert render_ascii(grid, [(1, 1), (2, 1), (3, 1), (4, 1)]) == "#####\n#S..E\n#####"


def test_analyze_generated_maze():
    grid = generate_maze(35, 25, rng=random.Random(5))
    stats = analyze(grid)

    assert stats['rows'] == 25 and stats['cols'] == 35
    assert stats['start'] == (1, 1)
    assert stats['connected'] is True
    assert stats['border_intact'] is True
    assert stats['solution_length'] > 0
    # The forced start branches always close at least one loop
    assert stats['loops'] >= 1


def test_perfect_maze_has_no_loops():
    gen = MazeGenerator(21, 21, rng=random.Random(2))
    gen.grid = np.full((gen.rows, gen.cols), CellKind.WALL, dtype=np.uint8)
    gen.carve_paths()
    gen.grid[1, 1] = CellKind.START
    gen.place_exit()

    stats = analyze(gen.grid)
    assert stats['loops'] == 0
    assert stats['dead_ends'] >= 1


def test_main_prints_maze(capsys):
    assert main(['--width', '15', '--height', '9', '--seed', '3', '--solve']) == 0
    out = capsys.readouterr().out
    assert 'S' in out and 'E' in out
    assert 'connected: True' in out
