"""Controllers for channel profiles and watch history."""

from http import HTTPStatus as status
from typing import Optional
import logging

from werkzeug.exceptions import BadRequest, InternalServerError, NotFound

from .. import domain
from ..services import profiles, users
from .util import ResponseData

logger = logging.getLogger(__name__)


def get_channel_profile(username: Optional[str],
                        caller: Optional[domain.User] = None) -> ResponseData:
    """
    Get the public profile of a channel.

    Parameters
    ----------
    username : str
        The channel's username.
    caller : :class:`.domain.User`
        The authenticated user, if any; determines ``is_subscribed``.

    """
    if not username or not username.strip():
        raise BadRequest('Username is missing')
    caller_id = caller.user_id if caller is not None else None
    try:
        channel = profiles.channel_profile(username.strip(), caller_id)
    except users.NoSuchUser as e:
        raise NotFound('Channel does not exist') from e
    except users.StoreUnavailable as e:
        raise InternalServerError('Could not load channel') from e
    return {'data': domain.to_dict(channel),
            'message': 'User channel fetched successfully'}, status.OK, {}


def get_watch_history(user: domain.User) -> ResponseData:
    """Get the watch history of the authenticated user."""
    try:
        history = profiles.watch_history(user.user_id)
    except users.NoSuchUser as e:
        raise NotFound('User does not exist') from e
    except users.StoreUnavailable as e:
        raise InternalServerError('Could not load watch history') from e
    return {'data': domain.to_list(history),
            'message': 'Watch history fetched successfully'}, status.OK, {}
