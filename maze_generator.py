#!/usr/bin/env python3
"""
Maze Generator using the Recursive Backtracking Algorithm
- Carves a perfect maze over the odd-coordinate lattice starting at (1,1)
- Start at (1,1), exit near the bottom-right inner corner
- Opens a few extra walls near the start so the maze has loops
"""

import random
from enum import IntEnum
from typing import List, Optional, Tuple

import numpy as np

from error_handling import ExitNotFound, InvalidDimension
from monitoring import performance_monitor

Position = Tuple[int, int]

# Up, Down, Left, Right, two cells away on the carve lattice
CARVE_DIRECTIONS = [(0, -2), (0, 2), (-2, 0), (2, 0)]

# Cells forced open next to the start so it always branches
START_BRANCHES = [(2, 1), (1, 2), (2, 2)]

LOOP_BOX = 10
LOOP_PROBABILITY = 0.3


class CellKind(IntEnum):
    """Kind of a single grid position"""
    OPEN = 0
    WALL = 1
    START = 2
    EXIT = 3


def force_odd(value: int) -> int:
    return value if value % 2 == 1 else value + 1


def find_cell(grid: np.ndarray, kind: CellKind) -> Optional[Position]:
    """Return the (x, y) of the first cell of the given kind, row by row"""
    matches = np.argwhere(grid == kind)
    if len(matches) == 0:
        return None
    y, x = matches[0]
    return int(x), int(y)


def grid_to_list(grid: np.ndarray) -> List[List[int]]:
    return grid.astype(int).tolist()


class MazeGenerator:
    """Maze generator using an explicit-stack recursive backtracker"""

    def __init__(self, width: int, height: int, rng: Optional[random.Random] = None):
        for name, value in (('width', width), ('height', height)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise InvalidDimension(f"{name} must be an integer, got {value!r}")
            if value < 1:
                raise InvalidDimension(f"{name} must be positive, got {value}")
            if value == 1:
                raise InvalidDimension(f"{name} of 1 leaves no interior to carve")

        self.width = int(width)
        self.height = int(height)
        self.cols = force_odd(self.width)
        self.rows = force_odd(self.height)
        self.rng = rng or random
        self.grid = None
        self.start = None
        self.end = None

    def is_interior(self, x: int, y: int) -> bool:
        return 0 < x < self.cols - 1 and 0 < y < self.rows - 1

    def get_unvisited_neighbors(self, x: int, y: int) -> List[Tuple[int, int, int, int]]:
        """Lattice neighbours two cells away that are still walls"""
        neighbors = []
        for dx, dy in CARVE_DIRECTIONS:
            nx, ny = x + dx, y + dy
            if self.is_interior(nx, ny) and self.grid[ny, nx] == CellKind.WALL:
                neighbors.append((nx, ny, dx // 2, dy // 2))
        return neighbors

    def carve_paths(self):
        """Randomized depth-first carve from (1,1) until the stack empties"""
        self.grid[1, 1] = CellKind.OPEN
        stack = [(1, 1)]

        while stack:
            x, y = stack[-1]
            neighbors = self.get_unvisited_neighbors(x, y)
            if neighbors:
                nx, ny, wx, wy = self.rng.choice(neighbors)
                self.grid[ny, nx] = CellKind.OPEN
                self.grid[y + wy, x + wx] = CellKind.OPEN
                stack.append((nx, ny))
            else:
                stack.pop()

    def open_start_branches(self):
        for x, y in START_BRANCHES:
            if self.is_interior(x, y):
                self.grid[y, x] = CellKind.OPEN

    def touches_open(self, x: int, y: int) -> bool:
        for dx, dy in ((0, -1), (0, 1), (-1, 0), (1, 0)):
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.cols and 0 <= ny < self.rows and self.grid[ny, nx] != CellKind.WALL:
                return True
        return False

    def add_loops(self):
        """Knock out random walls near the start to create short cycles"""
        for y in range(1, min(self.rows, LOOP_BOX)):
            for x in range(1, min(self.cols, LOOP_BOX)):
                if self.grid[y, x] != CellKind.WALL:
                    continue
                if self.rng.random() >= LOOP_PROBABILITY:
                    continue
                # Keep a one-cell margin from the outer border
                if not (1 < x < self.cols - 2 and 1 < y < self.rows - 2):
                    continue
                # An isolated pillar would be unreachable
                if self.touches_open(x, y):
                    self.grid[y, x] = CellKind.OPEN

    def place_exit(self) -> Position:
        """Scan leftward along the bottom inner row for the exit cell"""
        y = self.rows - 2
        for x in range(self.cols - 2, 0, -1):
            if self.grid[y, x] == CellKind.OPEN:
                self.grid[y, x] = CellKind.EXIT
                return x, y
        raise ExitNotFound(f"no open cell for the exit in row {y} of a {self.cols}x{self.rows} maze")

    def generate(self) -> np.ndarray:
        """Generate a new maze grid, indexed grid[y, x]"""
        self.grid = np.full((self.rows, self.cols), CellKind.WALL, dtype=np.uint8)

        self.carve_paths()

        self.grid[1, 1] = CellKind.START
        self.start = (1, 1)

        self.open_start_branches()
        self.add_loops()
        self.end = self.place_exit()

        return self.grid


@performance_monitor.time_operation('maze_generation')
def generate_maze(width: int, height: int, rng: Optional[random.Random] = None) -> np.ndarray:
    """Generate a maze for the given dimensions, each forced to odd"""
    return MazeGenerator(width, height, rng=rng).generate()
