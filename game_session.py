#!/usr/bin/env python3
"""
Game session controller: one playthrough of a maze under a countdown timer.

A session owns its grid for its whole lifetime. The only background
activity is the countdown, a single repeating tick source that is
cancelled whenever the session leaves the playing state or is started
again. Ticks arrive on the timer thread, so every operation runs under
the session lock.
"""

import functools
import logging
import threading
import time
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from error_handling import ExitNotFound, InvalidDirection, UnknownDifficulty
from game_timer import RepeatingTimer
from maze_generator import CellKind, find_cell, generate_maze, grid_to_list
from maze_solver import solve_maze

logger = logging.getLogger('maze_game.session')

Position = Tuple[int, int]


class Status(Enum):
    PLAYING = 'playing'
    WON = 'won'
    LOST = 'lost'


@dataclass(frozen=True)
class Difficulty:
    name: str
    width: int
    height: int
    time_budget: int  # seconds

    def to_dict(self):
        return asdict(self)


LEVELS = {
    'Easy': Difficulty('Easy', 15, 15, 30),
    'Medium': Difficulty('Medium', 25, 25, 45),
    'Hard': Difficulty('Hard', 35, 25, 60),
}

DIRECTIONS = {
    'up': (0, -1),
    'down': (0, 1),
    'left': (-1, 0),
    'right': (1, 0),
}

KEY_BINDINGS = {
    'ArrowUp': ('move', 'up'), 'w': ('move', 'up'), 'W': ('move', 'up'),
    'ArrowDown': ('move', 'down'), 's': ('move', 'down'), 'S': ('move', 'down'),
    'ArrowLeft': ('move', 'left'), 'a': ('move', 'left'), 'A': ('move', 'left'),
    'ArrowRight': ('move', 'right'), 'd': ('move', 'right'), 'D': ('move', 'right'),
    'h': ('hint', None), 'H': ('hint', None),
    'r': ('restart', None), 'R': ('restart', None),
}


def get_difficulty(level) -> Difficulty:
    """Resolve a Difficulty from an instance or a level name (case-insensitive)"""
    if isinstance(level, Difficulty):
        return level
    if isinstance(level, str):
        for name, difficulty in LEVELS.items():
            if name.lower() == level.strip().lower():
                return difficulty
    raise UnknownDifficulty(f"unknown level {level!r}, expected one of {', '.join(LEVELS)}")


class GameSession:
    """State machine for one game: playing -> won | lost"""

    def __init__(self, timer_factory: Callable = RepeatingTimer, tick_interval: float = 1.0,
                 listener: Optional[Callable] = None, rng=None):
        self.timer_factory = timer_factory
        self.tick_interval = tick_interval
        self.listener = listener
        self.rng = rng
        self.lock = threading.RLock()
        self.timer = None
        self.generation = 0

        self.difficulty = None
        self.grid = None
        self.start_position = None
        self.player = None
        self.exit = None
        self.status = None
        self.remaining = 0
        self.hint_path: List[Position] = []
        self.last_activity = time.time()

    # --- timer -----------------------------------------------------------

    def _start_timer(self):
        self._stop_timer()
        self.timer = self.timer_factory(self.tick_interval, functools.partial(self._on_timer, self.generation))
        self.timer.start()

    def _stop_timer(self):
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None

    def _on_timer(self, generation):
        # Ignore a tick from a timer that belonged to an earlier game
        with self.lock:
            if generation == self.generation:
                self.tick()

    def _notify(self, event):
        if self.listener is not None:
            self.listener(event, self)

    # --- operations ------------------------------------------------------

    def start(self, level) -> 'GameSession':
        """Generate a fresh maze and reset every piece of session state"""
        difficulty = get_difficulty(level)
        grid = generate_maze(difficulty.width, difficulty.height, rng=self.rng)
        return self.begin(difficulty, grid)

    def begin(self, difficulty: Difficulty, grid) -> 'GameSession':
        """Take ownership of a grid and play it under the difficulty's time budget"""
        start = find_cell(grid, CellKind.START)
        end = find_cell(grid, CellKind.EXIT)
        if start is None:
            raise ValueError("grid has no start cell")
        if end is None:
            raise ExitNotFound("grid has no exit cell")
        grid.flags.writeable = False

        with self.lock:
            self._stop_timer()
            self.generation += 1
            self.difficulty = difficulty
            self.grid = grid
            self.start_position = start
            self.player = start
            self.exit = end
            self.remaining = difficulty.time_budget
            self.hint_path = []
            self.status = Status.PLAYING
            self.last_activity = time.time()
            self._start_timer()

        logger.debug(f"Started {difficulty.name} game on a {grid.shape[1]}x{grid.shape[0]} grid")
        self._notify('started')
        return self

    def restart(self) -> 'GameSession':
        return self.start(self.difficulty)

    def move(self, dx: int, dy: int) -> bool:
        """Try to move the player one cell; returns whether the player moved"""
        if (dx, dy) not in DIRECTIONS.values():
            raise InvalidDirection(f"({dx}, {dy}) is not a single orthogonal step")

        with self.lock:
            if self.status is not Status.PLAYING:
                return False
            self.last_activity = time.time()

            x, y = self.player[0] + dx, self.player[1] + dy
            rows, cols = self.grid.shape
            if not (0 <= x < cols and 0 <= y < rows):
                return False
            if self.grid[y, x] == CellKind.WALL:
                return False

            self.player = (x, y)
            won = self.grid[y, x] == CellKind.EXIT
            if won:
                self.status = Status.WON
                self._stop_timer()

        if won:
            self._notify('won')
        return True

    def move_direction(self, direction: str) -> bool:
        try:
            dx, dy = DIRECTIONS[direction.lower()]
        except (KeyError, AttributeError):
            raise InvalidDirection(f"unknown direction {direction!r}") from None
        return self.move(dx, dy)

    def tick(self):
        """Count down one second; running out of time loses the game"""
        with self.lock:
            if self.status is not Status.PLAYING:
                return
            self.remaining = max(0, self.remaining - 1)
            lost = self.remaining == 0
            if lost:
                self.status = Status.LOST
                self._stop_timer()

        if lost:
            self._notify('lost')

    def hint(self) -> List[Position]:
        """Compute the shortest path from the player to the exit"""
        with self.lock:
            if self.status is not Status.PLAYING:
                return self.hint_path
            self.last_activity = time.time()
            self.hint_path = solve_maze(self.grid, self.player, self.exit)
            path = self.hint_path

        self._notify('hint')
        return path

    def handle_key(self, key: str) -> Optional[str]:
        """Dispatch a keyboard key; returns the action taken, if any"""
        if not isinstance(key, str):
            return None
        binding = KEY_BINDINGS.get(key)
        if binding is None:
            return None

        action, direction = binding
        if action == 'move':
            self.move_direction(direction)
        elif action == 'hint':
            self.hint()
        elif action == 'restart':
            self.restart()
        return action

    def close(self):
        with self.lock:
            self._stop_timer()

    # --- views -----------------------------------------------------------

    @property
    def elapsed(self) -> int:
        if self.difficulty is None:
            return 0
        return self.difficulty.time_budget - self.remaining

    @property
    def timer_active(self) -> bool:
        return self.timer is not None

    def to_dict(self, include_grid=True):
        with self.lock:
            data = {
                'level': self.difficulty.name if self.difficulty else None,
                'status': self.status.value if self.status else None,
                'player': list(self.player) if self.player else None,
                'start': list(self.start_position) if self.start_position else None,
                'exit': list(self.exit) if self.exit else None,
                'remaining': self.remaining,
                'elapsed': self.elapsed,
                'time_budget': self.difficulty.time_budget if self.difficulty else 0,
                'hint': [list(p) for p in self.hint_path],
            }
            if self.grid is not None:
                data['rows'], data['cols'] = (int(v) for v in self.grid.shape)
                if include_grid:
                    data['grid'] = grid_to_list(self.grid)
            return data
