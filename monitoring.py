#!/usr/bin/env python3
"""
Logging, timing and health reporting for the Maze Runner game service
"""

import json
import logging
import logging.handlers
import os
import threading
import time
from datetime import datetime, timedelta, timezone
from functools import wraps

from flask import g, jsonify, request

from config import CONFIG

MB = 1024 * 1024

FORMATS = {
    'detailed': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    'access': '%(asctime)s - %(message)s',
}

# file name, logger attribute, minimum level, format, size cap
LOG_FILES = [
    ('access.log', 'logger', logging.INFO, 'access', 10 * MB),
    ('error.log', 'logger', logging.ERROR, 'detailed', 5 * MB),
    ('game.log', 'game_logger', logging.INFO, 'detailed', 5 * MB),
]


def utc_now():
    return datetime.now(timezone.utc).isoformat()


class MazeGameLogger:
    """Service logger; each record carries a JSON payload behind a tag"""

    def __init__(self, log_dir='logs', log_level='INFO'):
        self.logger = logging.getLogger('maze_game')
        self.logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
        self.logger.handlers.clear()
        # Game events have their own logger so game.log can stay quiet about requests
        self.game_logger = logging.getLogger('maze_game.events')

        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(FORMATS['detailed']))
        self.logger.addHandler(console)

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            for filename, target, level, fmt, max_bytes in LOG_FILES:
                handler = logging.handlers.RotatingFileHandler(
                    os.path.join(log_dir, filename), maxBytes=max_bytes, backupCount=5)
                handler.setLevel(level)
                handler.setFormatter(logging.Formatter(FORMATS[fmt]))
                getattr(self, target).addHandler(handler)

    def _emit(self, logger, level, tag, payload):
        payload = dict(payload, timestamp=utc_now())
        logger.log(level, f"{tag}: {json.dumps(payload, default=str)}")

    def log_request(self, endpoint, method, status_code, elapsed, ip=None, user_agent=None):
        self._emit(self.logger, logging.INFO, 'ACCESS', {
            'method': method,
            'endpoint': endpoint,
            'status_code': status_code,
            'response_time_ms': round(elapsed * 1000, 2),
            'ip': ip or 'unknown',
            'user_agent': user_agent or 'unknown',
        })

    def log_game_event(self, event_type, data):
        """started, won, lost or hint, with the game's id and position"""
        self._emit(self.game_logger, logging.INFO, 'GAME', {'event_type': event_type, 'data': data})

    def log_error(self, error, context=None):
        self._emit(self.logger, logging.ERROR, 'ERROR', {
            'error': str(error),
            'type': type(error).__name__,
            'context': context or {},
        })


class PerformanceMonitor:
    """Call counts and durations for maze generation and solving"""

    def __init__(self, logger, slow_threshold=0.1):
        self.logger = logger
        self.slow_threshold = slow_threshold
        self.stats = {}
        self.lock = threading.Lock()

    def time_operation(self, name):
        def decorator(func):
            @wraps(func)
            def timed(*args, **kwargs):
                began = time.perf_counter()
                failed = True
                try:
                    result = func(*args, **kwargs)
                    failed = False
                    return result
                finally:
                    self.record(name, time.perf_counter() - began, failed)
            return timed
        return decorator

    def record(self, name, duration, failed=False):
        with self.lock:
            entry = self.stats.setdefault(name, {'count': 0, 'failures': 0, 'total': 0.0, 'max': 0.0})
            entry['count'] += 1
            entry['failures'] += int(failed)
            entry['total'] += duration
            entry['max'] = max(entry['max'], duration)

        if duration > self.slow_threshold:
            self.logger.logger.warning(f"SLOW: {name} took {duration * 1000:.1f}ms")

    def get_metrics(self):
        with self.lock:
            return {
                name: {
                    'count': entry['count'],
                    'failures': entry['failures'],
                    'avg_duration_ms': round(entry['total'] / entry['count'] * 1000, 3),
                    'max_duration_ms': round(entry['max'] * 1000, 3),
                }
                for name, entry in self.stats.items()
            }


class HealthMonitor:
    def __init__(self, logger, game_store):
        self.logger = logger
        self.game_store = game_store
        self.started = time.time()

    def get_system_health(self):
        uptime = int(time.time() - self.started)
        try:
            games = dict(self.game_store.stats(), status='healthy')
        except Exception as e:
            self.logger.log_error(e, {'operation': 'game_store_stats'})
            games = {'status': 'unhealthy', 'error': str(e)}

        return {
            'timestamp': utc_now(),
            'uptime_seconds': uptime,
            'uptime_formatted': str(timedelta(seconds=uptime)),
            'games': games,
            'overall_status': games['status'],
        }


maze_logger = MazeGameLogger(log_dir=CONFIG['log_dir'], log_level=CONFIG['log_level'])
performance_monitor = PerformanceMonitor(maze_logger)


def setup_monitoring(app, game_store):
    """Install access logging and the /admin endpoints on the app"""
    health_monitor = HealthMonitor(maze_logger, game_store)

    @app.before_request
    def mark_request_start():
        g.request_started = time.time()

    @app.after_request
    def log_access(response):
        started = g.get('request_started')
        if started is not None:
            maze_logger.log_request(
                request.endpoint,
                request.method,
                response.status_code,
                time.time() - started,
                request.headers.get('X-Forwarded-For', request.remote_addr),
                request.headers.get('User-Agent'),
            )
        return response

    @app.route('/admin/health')
    def health_check():
        return jsonify(health_monitor.get_system_health())

    @app.route('/admin/metrics')
    def get_metrics():
        return jsonify(performance_monitor.get_metrics())

    return health_monitor
