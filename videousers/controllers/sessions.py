"""Controller for exchanging a refresh token for a new session."""

from http import HTTPStatus as status
from typing import Optional
import logging

from werkzeug.exceptions import InternalServerError, Unauthorized

from ..auth.exceptions import InvalidToken, SessionCreationFailed
from ..services import sessions
from .util import ResponseData

logger = logging.getLogger(__name__)

UNAUTHORIZED = 'Unauthorized request'
INVALID_REFRESH_TOKEN = 'Invalid refresh token'


def refresh(refresh_token: Optional[str]) -> ResponseData:
    """
    Rotate the session tokens of a user.

    Parameters
    ----------
    refresh_token : str
        The refresh token presented by the client, from the cookie or the
        request body.

    Returns
    -------
    dict
        Both new tokens. Also the cookies to set.
    int
    dict

    """
    if not refresh_token:
        raise Unauthorized(UNAUTHORIZED)
    try:
        session_tokens = sessions.refresh_session(refresh_token)
    except InvalidToken as e:
        logger.debug('Refresh rejected: %s', e)
        raise Unauthorized(INVALID_REFRESH_TOKEN) from e
    except SessionCreationFailed as e:
        logger.error('Could not create session: %s', e)
        raise InternalServerError('Could not refresh session') from e
    return {
        'data': {'access_token': session_tokens.access_token,
                 'refresh_token': session_tokens.refresh_token},
        'message': 'Access token refreshed',
        'cookies': {'access_token': session_tokens.access_token,
                    'refresh_token': session_tokens.refresh_token}
    }, status.OK, {}
