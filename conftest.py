import os

# Keep test runs from writing log files into the working directory
os.environ.setdefault('MAZE_LOG_DIR', '')

import numpy as np
import pytest

from maze_generator import CellKind

CHARS = {
    '#': CellKind.WALL,
    ' ': CellKind.OPEN,
    '.': CellKind.OPEN,
    'S': CellKind.START,
    'E': CellKind.EXIT,
}


class FakeTimer:
    """Timer stand-in that only fires when the test calls fire()"""

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True
        return self

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function()


class FakeTimerFactory:
    def __init__(self):
        self.timers = []

    def __call__(self, interval, function):
        timer = FakeTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def active(self):
        return [t for t in self.timers if t.started and not t.cancelled]


@pytest.fixture
def timer_factory():
    return FakeTimerFactory()


@pytest.fixture
def build_grid():
    """Build a grid from rows of text: '#' wall, ' ' or '.' open, 'S' start, 'E' exit"""
    def build(lines):
        return np.array([[CHARS[c] for c in line] for line in lines], dtype=np.uint8)
    return build
