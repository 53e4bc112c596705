"""Application factory for the videousers app."""

import logging
from http import HTTPStatus as status

from flask import Flask, Response, current_app, jsonify
from werkzeug.exceptions import HTTPException

from . import app_logging
from .auth import Auth
from .routes import api
from .services import assets, sessions, users

logger = logging.getLogger(__name__)


def create_web_app() -> Flask:
    """Initialize and configure the videousers application."""
    app = Flask('videousers')
    app.config.from_pyfile('config.py')
    app_logging.setup_logger(app.config['LOGLEVEL'])

    users.init_app(app)
    sessions.init_app(app)
    assets.init_app(app)

    Auth(app)   # Attaches the authenticated user to each request.
    app.register_blueprint(api.blueprint)
    app.after_request(apply_response_headers)

    if app.config['CREATE_DB']:
        with app.app_context():
            users.create_all()

    register_error_handlers(app)
    return app


def apply_response_headers(response: Response) -> Response:
    """Apply CORS and anti-framing headers to all responses."""
    origin = current_app.config.get('CORS_ORIGIN', '*')
    response.headers['Access-Control-Allow-Origin'] = origin
    if origin != '*':
        response.headers['Access-Control-Allow-Credentials'] = 'true'
    response.headers['Content-Security-Policy'] = "frame-ancestors 'none'"
    response.headers['X-Frame-Options'] = 'DENY'
    return response


def register_error_handlers(app: Flask) -> None:
    """Register error handlers for the Flask app."""
    app.errorhandler(HTTPException)(jsonify_exception)
    app.errorhandler(Exception)(jsonify_unhandled)


def jsonify_exception(error: HTTPException) -> Response:
    """Render HTTP exceptions in the error envelope."""
    code = error.code or status.INTERNAL_SERVER_ERROR
    response: Response = jsonify(status_code=code,
                                 message=error.description,
                                 success=False)
    response.status_code = code
    return response


def jsonify_unhandled(error: Exception) -> Response:
    """Log an unexpected exception, and render it as a 500 error envelope."""
    logger.exception('Unhandled exception: %s', error)
    code = status.INTERNAL_SERVER_ERROR
    response: Response = jsonify(status_code=int(code),
                                 message='Something went wrong',
                                 success=False)
    response.status_code = code
    return response
