#!/usr/bin/env python3
"""
Maze Runner game server

JSON API for the browser front end: start a game, move the player,
ask for a shortest-path hint and restart. The countdown runs server side.
"""

import threading
import time

from flask import Flask, jsonify, request

from config import configure_app
from error_handling import InvalidDirection, setup_error_handling
from game_session import DIRECTIONS, KEY_BINDINGS, LEVELS, get_difficulty
from game_store import GameStore
from monitoring import maze_logger, setup_monitoring

app = Flask(__name__)
settings = configure_app(app)

analytics = {
    'games_started': 0,
    'games_won': 0,
    'games_lost': 0,
    'hints_used': 0,
    'recent_events': []
}
analytics_lock = threading.Lock()

EVENT_COUNTERS = {
    'started': 'games_started',
    'won': 'games_won',
    'lost': 'games_lost',
    'hint': 'hints_used',
}


def record_event(event, game_id, session):
    """Session listener: update analytics and log the event"""
    data = {
        'game_id': game_id,
        'level': session.difficulty.name,
        'remaining': session.remaining,
        'player': list(session.player),
    }
    with analytics_lock:
        analytics[EVENT_COUNTERS[event]] += 1
        analytics['recent_events'].append(dict(data, type=event, timestamp=int(time.time())))
        # Keep only the most recent events
        analytics['recent_events'] = analytics['recent_events'][-settings['recent_events']:]
    maze_logger.log_game_event(event, data)


game_store = GameStore(
    tick_interval=settings['tick_interval'],
    ttl_minutes=settings['game_ttl_minutes'],
    listener=record_event,
)

setup_error_handling(app, maze_logger)
setup_monitoring(app, game_store)


def game_response(game_id, session, include_grid=True, status_code=200, **extra):
    data = session.to_dict(include_grid=include_grid)
    data['game_id'] = game_id
    data.update(extra)
    return jsonify(data), status_code


def wants_grid(default):
    value = request.args.get('grid')
    if value is None:
        return default
    return value.lower() in ('1', 'true', 'yes')


def request_data():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@app.route('/')
def index():
    return jsonify({
        'service': 'maze-runner',
        'levels': list(LEVELS),
        'endpoints': sorted(str(rule) for rule in app.url_map.iter_rules() if rule.endpoint != 'static'),
    })


@app.route('/api/levels', methods=['GET'])
def get_levels():
    return jsonify({
        'default': settings['default_level'],
        'levels': [difficulty.to_dict() for difficulty in LEVELS.values()],
        'directions': list(DIRECTIONS),
        'keys': sorted(KEY_BINDINGS),
    })


@app.route('/api/game', methods=['POST'])
def start_game():
    game_store.cleanup_expired()
    level = request_data().get('level', settings['default_level'])
    game_id, session = game_store.create(get_difficulty(level))
    return game_response(game_id, session, status_code=201)


@app.route('/api/game/<game_id>', methods=['GET'])
def get_game(game_id):
    session = game_store.get(game_id)
    return game_response(game_id, session, include_grid=wants_grid(True))


@app.route('/api/game/<game_id>', methods=['DELETE'])
def discard_game(game_id):
    game_store.discard(game_id)
    return jsonify({'game_id': game_id, 'discarded': True})


@app.route('/api/game/<game_id>/move', methods=['POST'])
def move(game_id):
    session = game_store.get(game_id)
    data = request_data()

    if 'key' in data:
        before = session.player
        action = session.handle_key(data['key'])
        if action is None:
            raise InvalidDirection(f"key {data['key']!r} is not bound to an action")
        moved = action == 'move' and session.player != before
    elif 'direction' in data:
        moved = session.move_direction(data['direction'])
    elif 'dx' in data and 'dy' in data:
        dx, dy = data['dx'], data['dy']
        # bool is an int subclass; JSON true must not count as a step
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in (dx, dy)):
            raise InvalidDirection(f"dx/dy must be integers, got {dx!r}, {dy!r}")
        moved = session.move(dx, dy)
    else:
        raise InvalidDirection("expected 'direction', 'key' or 'dx'/'dy' in the request body")

    return game_response(game_id, session, include_grid=wants_grid(False), moved=bool(moved))


@app.route('/api/game/<game_id>/hint', methods=['POST'])
def hint(game_id):
    session = game_store.get(game_id)
    session.hint()
    return game_response(game_id, session, include_grid=wants_grid(False))


@app.route('/api/game/<game_id>/restart', methods=['POST'])
def restart_game(game_id):
    level = request_data().get('level')
    session = game_store.restart(game_id, get_difficulty(level) if level else None)
    return game_response(game_id, session)


@app.route('/api/analytics', methods=['GET'])
def get_analytics():
    with analytics_lock:
        finished = analytics['games_won'] + analytics['games_lost']
        win_rate = (analytics['games_won'] / finished * 100) if finished > 0 else 0
        return jsonify({
            'games_started': analytics['games_started'],
            'games_won': analytics['games_won'],
            'games_lost': analytics['games_lost'],
            'hints_used': analytics['hints_used'],
            'win_rate': round(win_rate, 2),
            'recent_events': list(analytics['recent_events']),
            'store': game_store.stats(),
        })


if __name__ == '__main__':
    maze_logger.logger.info("Starting Maze Runner server...")
    maze_logger.logger.info(f"Open http://{settings['host']}:{settings['port']} in your browser")
    app.run(host=settings['host'], port=settings['port'], debug=False, threaded=True)
