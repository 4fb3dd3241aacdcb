#!/usr/bin/env python3
"""
Configuration for the Maze Runner game service
"""

import os
from datetime import timedelta

CONFIG = {
    'host': os.environ.get('MAZE_HOST', '127.0.0.1'),
    'port': int(os.environ.get('MAZE_PORT', 8080)),
    'secret_key': os.environ.get('MAZE_SECRET_KEY', 'maze_runner_dev_secret_key'),
    'log_dir': os.environ.get('MAZE_LOG_DIR', 'logs'),
    'log_level': os.environ.get('MAZE_LOG_LEVEL', 'INFO'),
    'tick_interval': float(os.environ.get('MAZE_TICK_INTERVAL', 1.0)),  # seconds
    'game_ttl_minutes': int(os.environ.get('MAZE_GAME_TTL_MINUTES', 30)),
    'default_level': os.environ.get('MAZE_DEFAULT_LEVEL', 'Hard'),
    'recent_events': 20,
}


def configure_app(app, overrides=None):
    """Apply CONFIG (plus any overrides) to a Flask app"""
    settings = dict(CONFIG)
    settings.update(overrides or {})

    app.secret_key = settings['secret_key']
    app.config['HOST'] = settings['host']
    app.config['PORT'] = settings['port']
    app.config.update(
        PERMANENT_SESSION_LIFETIME=timedelta(minutes=settings['game_ttl_minutes']),
        MAZE=settings,
    )
    return settings
