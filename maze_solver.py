#!/usr/bin/env python3
"""
Breadth-first maze solver used by the hint feature
"""

from collections import deque
from typing import Dict, List, Optional, Sequence, Set, Tuple

import numpy as np

from maze_generator import CellKind
from monitoring import performance_monitor

Position = Tuple[int, int]

# Up, Down, Left, Right
MOVES = [(0, -1), (0, 1), (-1, 0), (1, 0)]


def is_walkable(grid: np.ndarray, pos: Position) -> bool:
    """A cell is walkable when it is inside the grid and not a wall"""
    x, y = pos
    rows, cols = grid.shape
    return 0 <= x < cols and 0 <= y < rows and grid[y, x] != CellKind.WALL


def neighbors(grid: np.ndarray, pos: Position) -> List[Position]:
    x, y = pos
    return [(x + dx, y + dy) for dx, dy in MOVES if is_walkable(grid, (x + dx, y + dy))]


@performance_monitor.time_operation('maze_solve')
def solve_maze(grid: np.ndarray, start: Position, end: Position) -> List[Position]:
    """
    Shortest path from start to end over non-wall cells.

    Returns a list of (x, y) positions including both endpoints, [start]
    when start == end, and [] when end cannot be reached.
    """
    start, end = tuple(start), tuple(end)
    if not is_walkable(grid, start) or not is_walkable(grid, end):
        return []

    queue = deque([start])
    parent: Dict[Position, Optional[Position]] = {start: None}

    while queue:
        current = queue.popleft()

        if current == end:
            path = []
            while current is not None:
                path.append(current)
                current = parent[current]
            return path[::-1]

        for nxt in neighbors(grid, current):
            if nxt not in parent:
                parent[nxt] = current
                queue.append(nxt)

    return []


def reachable_cells(grid: np.ndarray, start: Position) -> Set[Position]:
    """All walkable cells connected to start"""
    start = tuple(start)
    if not is_walkable(grid, start):
        return set()

    visited = {start}
    stack = [start]
    while stack:
        for nxt in neighbors(grid, stack.pop()):
            if nxt not in visited:
                visited.add(nxt)
                stack.append(nxt)
    return visited


def is_valid_path(grid: np.ndarray, path: Sequence[Position]) -> bool:
    """Check that a path only steps between 4-adjacent, walkable, unrepeated cells"""
    if not path:
        return False

    seen = set()
    previous = None
    for pos in path:
        pos = tuple(pos)
        if not is_walkable(grid, pos) or pos in seen:
            return False
        if previous is not None:
            if abs(pos[0] - previous[0]) + abs(pos[1] - previous[1]) != 1:
                return False
        seen.add(pos)
        previous = pos
    return True
