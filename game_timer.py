#!/usr/bin/env python3
"""
Repeating countdown tick source for game sessions
"""

import logging
import threading

logger = logging.getLogger('maze_game.timer')


class RepeatingTimer:
    """Calls a function every `interval` seconds on a daemon thread until cancelled"""

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.finished = threading.Event()
        self.thread = threading.Thread(target=self._run, daemon=True)

    def start(self):
        self.thread.start()
        return self

    def cancel(self):
        self.finished.set()

    @property
    def active(self):
        return self.thread.is_alive() and not self.finished.is_set()

    def _run(self):
        while not self.finished.wait(self.interval):
            try:
                self.function()
            except Exception:
                logger.exception("Timer callback failed, stopping timer")
                self.finished.set()
