#!/usr/bin/env python3
"""
Maze structure analysis: ASCII dump and statistics for generated mazes
"""

import argparse
import random

import numpy as np

from maze_generator import CellKind, find_cell, generate_maze
from maze_solver import is_walkable, neighbors, reachable_cells, solve_maze

SYMBOLS = {
    CellKind.OPEN: ' ',
    CellKind.WALL: '#',
    CellKind.START: 'S',
    CellKind.EXIT: 'E',
}


def render_ascii(grid, path=None):
    """Render a grid as text, marking path cells with '.'"""
    on_path = set(map(tuple, path or []))
    lines = []
    for y, row in enumerate(grid):
        chars = []
        for x, cell in enumerate(row):
            kind = CellKind(int(cell))
            if kind == CellKind.OPEN and (x, y) in on_path:
                chars.append('.')
            else:
                chars.append(SYMBOLS[kind])
        lines.append(''.join(chars))
    return '\n'.join(lines)


def analyze(grid):
    """Structural statistics for a maze grid"""
    rows, cols = grid.shape
    start = find_cell(grid, CellKind.START)
    end = find_cell(grid, CellKind.EXIT)

    walkable = [(int(x), int(y)) for y, x in np.argwhere(grid != CellKind.WALL)]
    degrees = {pos: len(neighbors(grid, pos)) for pos in walkable}
    edges = sum(degrees.values()) // 2
    reachable = reachable_cells(grid, start) if start else set()
    solution = solve_maze(grid, start, end) if start and end else []

    border = np.concatenate([grid[0, :], grid[-1, :], grid[:, 0], grid[:, -1]])

    return {
        'rows': int(rows),
        'cols': int(cols),
        'start': start,
        'exit': end,
        'open_cells': len(walkable),
        'dead_ends': sum(1 for d in degrees.values() if d == 1),
        # Independent cycles of the cell graph
        'loops': edges - len(walkable) + 1 if walkable else 0,
        'connected': len(reachable) == len(walkable),
        'border_intact': bool(np.all(border == CellKind.WALL)),
        'solution_length': len(solution) - 1 if solution else None,
    }


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Generate and analyze a maze")
    p.add_argument('--width', type=int, default=35, help='maze width (forced odd)')
    p.add_argument('--height', type=int, default=25, help='maze height (forced odd)')
    p.add_argument('--seed', type=int, default=None, help='random seed for reproducible mazes')
    p.add_argument('--solve', action='store_true', help='overlay the shortest path from start to exit')
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    grid = generate_maze(args.width, args.height, rng=random.Random(args.seed))
    stats = analyze(grid)

    path = solve_maze(grid, stats['start'], stats['exit']) if args.solve else None
    print(render_ascii(grid, path))
    print()
    for key, value in stats.items():
        print(f"{key}: {value}")
    return 0 if stats['connected'] and is_walkable(grid, stats['exit']) else 1


if __name__ == "__main__":
    raise SystemExit(main())
