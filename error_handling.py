#!/usr/bin/env python3
"""
Error taxonomy and Flask error handlers for the Maze Runner game service
"""

import traceback
from typing import Any, Dict

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException


class MazeError(Exception):
    """Base class for game errors that map onto an HTTP status"""
    status_code = 500
    error = 'Maze error'

    def to_dict(self) -> Dict[str, Any]:
        return {'error': self.error, 'type': type(self).__name__, 'message': str(self)}


class InvalidDimension(MazeError):
    """Maze generation called with a width or height that cannot be carved"""
    status_code = 400
    error = 'Invalid dimension'


class ExitNotFound(MazeError):
    """No cell was available for the exit"""
    status_code = 500
    error = 'Exit not found'


class UnknownDifficulty(MazeError):
    status_code = 400
    error = 'Unknown difficulty'


class InvalidDirection(MazeError):
    status_code = 400
    error = 'Invalid direction'


class GameNotFound(MazeError):
    status_code = 404
    error = 'Game not found'


class FlaskErrorHandler:
    """Flask error handler with structured logging"""

    def __init__(self, app: Flask, logger):
        self.app = app
        self.logger = logger
        self.setup_handlers()

    def _request_context(self) -> Dict[str, Any]:
        return {
            'request_method': request.method,
            'request_url': request.url,
            'user_agent': request.headers.get('User-Agent'),
        }

    def setup_handlers(self):
        """Setup Flask error handlers"""

        @self.app.errorhandler(MazeError)
        def maze_error(error):
            if error.status_code >= 500:
                self.logger.log_error(error, self._request_context())
            else:
                self.logger.logger.warning(f"{type(error).__name__}: {error}")
            return jsonify(error.to_dict()), error.status_code

        @self.app.errorhandler(HTTPException)
        def http_error(error):
            if error.code and error.code >= 500:
                self.logger.log_error(error, self._request_context())
            return jsonify({'error': error.name, 'message': error.description}), error.code

        @self.app.errorhandler(Exception)
        def handle_exception(error):
            """Catch-all exception handler"""
            context = self._request_context()
            context['traceback'] = traceback.format_exc()
            self.logger.log_error(error, context)

            # Don't expose internal errors in production
            if self.app.debug:
                return jsonify({'error': 'Internal error', 'message': str(error),
                                'traceback': context['traceback']}), 500
            return jsonify({'error': 'Internal server error', 'message': 'Something went wrong'}), 500


def setup_error_handling(app: Flask, logger) -> Flask:
    """Register JSON error handlers on the app"""
    FlaskErrorHandler(app, logger)
    return app
