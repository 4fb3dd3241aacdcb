#!/usr/bin/env python3
"""
In-memory storage for live game sessions
"""

import random
import threading
import time

from error_handling import GameNotFound
from game_session import GameSession
from game_timer import RepeatingTimer


class GameStore:
    def __init__(self, timer_factory=RepeatingTimer, tick_interval=1.0, ttl_minutes=30, listener=None):
        self.timer_factory = timer_factory
        self.tick_interval = tick_interval
        self.ttl_seconds = ttl_minutes * 60
        self.listener = listener
        self.games = {}
        self.lock = threading.Lock()

    def _new_id(self):
        while True:
            game_id = f"maze_{int(time.time())}_{random.randint(1000, 9999)}"
            if game_id not in self.games:
                return game_id

    def _new_session(self, game_id, level):
        def listener(event, session):
            if self.listener is not None:
                self.listener(event, game_id, session)

        session = GameSession(
            timer_factory=self.timer_factory,
            tick_interval=self.tick_interval,
            listener=listener,
        )
        return session.start(level)

    def create(self, level):
        """Start a new game and return (game_id, session)"""
        with self.lock:
            game_id = self._new_id()
            # Reserve the id while the maze is generated
            self.games[game_id] = None

        try:
            session = self._new_session(game_id, level)
        except Exception:
            with self.lock:
                self.games.pop(game_id, None)
            raise

        with self.lock:
            self.games[game_id] = session
        return game_id, session

    def get(self, game_id):
        with self.lock:
            session = self.games.get(game_id)
        if session is None:
            raise GameNotFound(f"game {game_id!r} does not exist or has expired")
        return session

    def restart(self, game_id, level=None):
        """Replace a game wholesale with a freshly generated one under the same id"""
        old = self.get(game_id)
        session = self._new_session(game_id, level or old.difficulty)
        with self.lock:
            discarded = game_id not in self.games
            if not discarded:
                old = self.games.get(game_id)
                self.games[game_id] = session
        if discarded:
            session.close()
            raise GameNotFound(f"game {game_id!r} was discarded during restart")
        if old is not None:
            old.close()
        return session

    def discard(self, game_id):
        with self.lock:
            session = self.games.pop(game_id, None)
        if session is None:
            raise GameNotFound(f"game {game_id!r} does not exist or has expired")
        session.close()

    def cleanup_expired(self):
        """Drop games idle for longer than the TTL; returns how many were removed"""
        cutoff = time.time() - self.ttl_seconds
        with self.lock:
            expired = [game_id for game_id, session in self.games.items()
                       if session is not None and session.last_activity < cutoff]
            sessions = [self.games.pop(game_id) for game_id in expired]
        for session in sessions:
            session.close()
        return len(sessions)

    def clear(self):
        with self.lock:
            sessions = [s for s in self.games.values() if s is not None]
            self.games.clear()
        for session in sessions:
            session.close()

    def stats(self):
        with self.lock:
            sessions = [s for s in self.games.values() if s is not None]
        by_status = {}
        for session in sessions:
            status = session.status.value
            by_status[status] = by_status.get(status, 0) + 1
        return {
            'active_games': len(sessions),
            'by_status': by_status,
            'running_timers': sum(1 for s in sessions if s.timer_active),
        }

    def __len__(self):
        with self.lock:
            return sum(1 for s in self.games.values() if s is not None)
