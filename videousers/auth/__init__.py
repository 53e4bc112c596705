"""Provides tools for working with authenticated user sessions."""

from typing import Optional
import logging

from flask import Flask, request

from . import decorators, exceptions, tokens
from .. import domain
from ..services import sessions

logger = logging.getLogger(__name__)


class Auth(object):
    """
    Attaches the authenticated user to the request.

    Intended for use in a Flask application factory, for example:

    .. code-block:: python

       from flask import Flask
       from videousers.auth import Auth
       from videousers.routes import api


       def create_web_app() -> Flask:
          app = Flask('videousers')
          app.config.from_pyfile('config.py')
          Auth(app)
          app.register_blueprint(api.blueprint)
          return app


    After :meth:`.load_user` has run, ``request.auth`` holds a
    :class:`.domain.User` or ``None``. If an access token was presented but
    could not be verified, the error is kept on ``request.auth_error`` so that
    :func:`.decorators.authenticated` can report it.
    """

    def __init__(self, app: Optional[Flask] = None) -> None:
        """
        Initialize ``app`` with the request hook.

        Parameters
        ----------
        app : :class:`Flask`

        """
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """
        Attach :meth:`.load_user` to the Flask app.

        Parameters
        ----------
        app : :class:`Flask`

        """
        self.app = app
        self.app.config.setdefault('ACCESS_TOKEN_COOKIE_NAME', 'accessToken')
        self.app.before_request(self.load_user)

    def get_access_token(self) -> Optional[str]:
        """Get the access token from the cookie, or else a bearer header."""
        cookie_name = self.app.config['ACCESS_TOKEN_COOKIE_NAME']
        token = request.cookies.get(cookie_name)
        if token:
            return token
        header = request.headers.get('Authorization', '')
        if header.startswith('Bearer '):
            return header[len('Bearer '):].strip() or None
        return None

    def load_user(self) -> None:
        """Look for a valid access token, and attach its user to the request."""
        user: Optional[domain.User] = None
        error: Optional[Exception] = None
        token = self.get_access_token()
        if token is not None:
            try:
                user = sessions.load_user(token)
            except exceptions.InvalidToken as e:
                logger.debug('Access token rejected: %s', e)
                error = e
        request.auth = user
        request.auth_error = error
