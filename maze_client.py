#!/usr/bin/env python3
"""
HTTP client for the Maze Runner game server, with an autoplay mode that
follows the server's hint path to the exit.
"""

import argparse
import logging
import sys
import time

import requests

logger = logging.getLogger('maze_game.client')

DEFAULT_URL = "http://127.0.0.1:8080"

# Step (dx, dy) -> direction name understood by the server
STEP_DIRECTIONS = {
    (0, -1): 'up',
    (0, 1): 'down',
    (-1, 0): 'left',
    (1, 0): 'right',
}


class MazeClientError(Exception):
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self.payload = payload
        message = payload.get('message') or payload.get('error') or 'request failed'
        super().__init__(f"{status_code}: {message}")


class MazeClient:
    def __init__(self, base_url=DEFAULT_URL, timeout=5.0, session=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method, path, **kwargs):
        response = self.session.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        try:
            payload = response.json()
        except ValueError:
            payload = {'error': response.text}
        if not response.ok:
            raise MazeClientError(response.status_code, payload)
        return payload

    def levels(self):
        return self._request('GET', '/api/levels')

    def start(self, level=None):
        body = {'level': level} if level else {}
        return self._request('POST', '/api/game', json=body)

    def state(self, game_id, grid=True):
        return self._request('GET', f'/api/game/{game_id}', params={'grid': int(grid)})

    def move(self, game_id, direction):
        return self._request('POST', f'/api/game/{game_id}/move', json={'direction': direction})

    def hint(self, game_id):
        return self._request('POST', f'/api/game/{game_id}/hint')

    def restart(self, game_id, level=None):
        body = {'level': level} if level else {}
        return self._request('POST', f'/api/game/{game_id}/restart', json=body)

    def discard(self, game_id):
        return self._request('DELETE', f'/api/game/{game_id}')

    def analytics(self):
        return self._request('GET', '/api/analytics')


def path_directions(path):
    """Convert a list of [x, y] positions into direction names"""
    directions = []
    for (x1, y1), (x2, y2) in zip(path, path[1:]):
        directions.append(STEP_DIRECTIONS[(x2 - x1, y2 - y1)])
    return directions


def autoplay(client, level=None, delay=0.0):
    """Start a game and walk the hint path until the game ends"""
    game = client.start(level)
    game_id = game['game_id']
    logger.info(f"Started {game['level']} game {game_id} ({game['cols']}x{game['rows']}, {game['remaining']}s)")

    state = client.hint(game_id)
    for direction in path_directions(state['hint']):
        state = client.move(game_id, direction)
        if state['status'] != 'playing':
            break
        if delay:
            time.sleep(delay)

    logger.info(f"Game {game_id} finished: {state['status']} with {state['remaining']}s left")
    return state


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Maze Runner API client")
    p.add_argument('--url', default=DEFAULT_URL, help='server base URL')
    p.add_argument('--level', default=None, help='difficulty level (Easy, Medium, Hard)')
    p.add_argument('--delay', type=float, default=0.0, help='pause between moves (seconds)')
    p.add_argument('--levels', action='store_true', help='list difficulty levels and exit')
    return p.parse_args(argv)


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    args = parse_args(argv)
    client = MazeClient(args.url)

    try:
        if args.levels:
            for level in client.levels()['levels']:
                print(f"{level['name']}: {level['width']}x{level['height']}, {level['time_budget']}s")
            return 0
        state = autoplay(client, args.level, args.delay)
    except requests.exceptions.ConnectionError:
        logger.error(f"Could not connect to {args.url}, is the server running?")
        return 1
    except MazeClientError as e:
        logger.error(f"Server rejected request: {e}")
        return 1

    return 0 if state['status'] == 'won' else 2


if __name__ == '__main__':
    sys.exit(main())
