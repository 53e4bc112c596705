"""
Enforce authentication on Flask routes.

Routes decorated with :func:`authenticated` are only called if
:class:`videousers.auth.Auth` resolved an access token to a user. The user is
available to the route as ``request.auth``.

.. code-block:: python

   from videousers.auth.decorators import authenticated


   @blueprint.route('/current-user', methods=['GET'])
   @authenticated
   def current_user():
       ...

"""

from typing import Any, Callable
from functools import wraps
import logging

from flask import request
from werkzeug.exceptions import Unauthorized

logger = logging.getLogger(__name__)

UNAUTHORIZED = 'Unauthorized request'
INVALID_TOKEN = 'Invalid access token'


def authenticated(func: Callable) -> Callable:
    """Decorator that rejects requests without an authenticated user."""
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        """
        Check for an authenticated user before executing the route.

        Raises
        ------
        :class:`.Unauthorized`
            Raised when no user could be resolved for the request.

        """
        if getattr(request, 'auth', None) is None:
            error = getattr(request, 'auth_error', None)
            if error is not None:
                logger.debug('Invalid access token; aborting')
                raise Unauthorized(INVALID_TOKEN) from error
            logger.debug('No access token; aborting')
            raise Unauthorized(UNAUTHORIZED)
        return func(*args, **kwargs)
    return wrapper
