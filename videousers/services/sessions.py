"""
Internal service API for user sessions.

A session is a pair of signed tokens. The access token carries the user's
identity claims and is presented on each request; the refresh token carries
only the user id and is exchanged for a new pair when the access token runs
out. The most recently issued refresh token is kept in the user's record, so
each user has at most one active session and a rotated-out refresh token can
not be replayed.
"""

import logging
from functools import wraps
from typing import Optional

from flask import Flask

from .. import domain
from ..auth import tokens
from ..auth.exceptions import InvalidToken, SessionCreationFailed, \
    SessionDeletionFailed
from ..context import get_application_config, get_application_global
from . import users

logger = logging.getLogger(__name__)


class SessionStore(object):
    """Issues, rotates and clears sessions backed by the credential store."""

    def __init__(self, access_secret: str, refresh_secret: str,
                 access_expiry: int = 86400,
                 refresh_expiry: int = 864000) -> None:
        """Set the secrets and lifetimes of the two tokens."""
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self._access_expiry = access_expiry
        self._refresh_expiry = refresh_expiry

    def issue_session_tokens(self, user_id: str) -> domain.SessionTokens:
        """
        Create a new session for a user.

        The new refresh token replaces any refresh token previously stored
        for the user.

        Parameters
        ----------
        user_id : str

        Returns
        -------
        :class:`.domain.SessionTokens`

        Raises
        ------
        :class:`.SessionCreationFailed`
            The user could not be loaded, or the session could not be stored.

        """
        try:
            user = users.get_user_by_id(user_id)
            access_token = tokens.encode_access_token(
                user, self._access_secret, self._access_expiry
            )
            refresh_token = tokens.encode_refresh_token(
                user.user_id, self._refresh_secret, self._refresh_expiry
            )
            users.set_refresh_token(user.user_id, refresh_token)
        except (users.NoSuchUser, users.StoreUnavailable) as e:
            raise SessionCreationFailed(f'Failed to create: {e}') from e
        logger.debug('Issued session tokens for user %s', user_id)
        return domain.SessionTokens(access_token=access_token,
                                    refresh_token=refresh_token)

    def refresh_session(self, refresh_token: Optional[str]) \
            -> domain.SessionTokens:
        """
        Exchange a refresh token for a new pair of session tokens.

        Parameters
        ----------
        refresh_token : str
            Must be the refresh token most recently issued to its user.

        Returns
        -------
        :class:`.domain.SessionTokens`

        Raises
        ------
        :class:`.InvalidToken`
            The token is missing, forged, expired, issued to a user who no
            longer exists, or has already been rotated out.
        :class:`.SessionCreationFailed`

        """
        user_id = tokens.decode_subject(refresh_token, self._refresh_secret)
        try:
            stored = users.get_refresh_token(user_id)
        except users.NoSuchUser as e:
            raise InvalidToken('Token subject does not exist') from e
        if stored is None or stored != refresh_token:
            logger.debug('Refresh token for %s is not current', user_id)
            raise InvalidToken('Refresh token is expired or used')
        return self.issue_session_tokens(user_id)

    def clear_session(self, user_id: str) -> None:
        """
        Remove the stored refresh token of a user.

        Raises
        ------
        :class:`.SessionDeletionFailed`

        """
        try:
            users.clear_refresh_token(user_id)
        except users.StoreUnavailable as e:
            raise SessionDeletionFailed(f'Failed to delete: {e}') from e
        logger.debug('Cleared session for user %s', user_id)

    def load_user(self, access_token: str) -> domain.User:
        """
        Resolve an access token to the user it was issued to.

        Raises
        ------
        :class:`.InvalidToken`
            The token does not verify, or its subject no longer exists.

        """
        user_id = tokens.decode_subject(access_token, self._access_secret)
        try:
            return users.get_user_by_id(user_id)
        except users.NoSuchUser as e:
            raise InvalidToken('Token subject does not exist') from e


def init_app(app: Optional[Flask] = None) -> None:
    """Set default configuration parameters for an application instance."""
    if app is not None:
        app.config.setdefault('ACCESS_TOKEN_SECRET', 'foosecret')
        app.config.setdefault('REFRESH_TOKEN_SECRET', 'barsecret')
        app.config.setdefault('ACCESS_TOKEN_EXPIRY', 86400)
        app.config.setdefault('REFRESH_TOKEN_EXPIRY', 864000)


def get_session(app: Optional[Flask] = None) -> SessionStore:
    """Get a new session store."""
    config = get_application_config(app)
    return SessionStore(
        access_secret=config['ACCESS_TOKEN_SECRET'],
        refresh_secret=config['REFRESH_TOKEN_SECRET'],
        access_expiry=int(config.get('ACCESS_TOKEN_EXPIRY', 86400)),
        refresh_expiry=int(config.get('REFRESH_TOKEN_EXPIRY', 864000))
    )


def current_session() -> SessionStore:
    """Get/create :class:`.SessionStore` for this context."""
    g = get_application_global()
    if not g:
        return get_session()
    if 'sessions' not in g:
        g.sessions = get_session()
    return g.sessions   # type: ignore


@wraps(SessionStore.issue_session_tokens)
def issue_session_tokens(user_id: str) -> domain.SessionTokens:
    """Create a new session for a user."""
    return current_session().issue_session_tokens(user_id)


@wraps(SessionStore.refresh_session)
def refresh_session(refresh_token: Optional[str]) -> domain.SessionTokens:
    """Exchange a refresh token for a new pair of session tokens."""
    return current_session().refresh_session(refresh_token)


@wraps(SessionStore.clear_session)
def clear_session(user_id: str) -> None:
    """Remove the stored refresh token of a user."""
    return current_session().clear_session(user_id)


@wraps(SessionStore.load_user)
def load_user(access_token: str) -> domain.User:
    """Resolve an access token to the user it was issued to."""
    return current_session().load_user(access_token)
