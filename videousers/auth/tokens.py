"""Functions for working with signed session tokens."""

import uuid
from datetime import datetime, timedelta
from typing import Any, Dict

import jwt
from pytz import UTC

from . import exceptions
from .. import domain

ALGORITHM = 'HS256'


def encode(claims: Dict[str, Any], secret: str, expiry: int) -> str:
    """Sign ``claims`` as a JWT that expires ``expiry`` seconds from now."""
    issued = datetime.now(tz=UTC)
    payload = dict(claims, iat=issued,
                   exp=issued + timedelta(seconds=expiry))
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def decode(token: str, secret: str) -> Dict[str, Any]:
    """Verify the signature and expiry of a JWT, and return its claims."""
    if not token:
        raise exceptions.MissingToken('No token provided')
    try:
        data: Dict[str, Any] = jwt.decode(token, secret,
                                          algorithms=[ALGORITHM])
    except jwt.exceptions.ExpiredSignatureError as e:
        raise exceptions.ExpiredToken('Token has expired') from e
    except jwt.exceptions.InvalidTokenError as e:
        raise exceptions.InvalidToken('Not a valid token') from e
    return data


def encode_access_token(user: domain.User, secret: str, expiry: int) -> str:
    """Generate an access token carrying the identity claims of ``user``."""
    return encode({'user_id': user.user_id,
                   'email': user.email,
                   'username': user.username,
                   'full_name': user.full_name}, secret, expiry)


def encode_refresh_token(user_id: str, secret: str, expiry: int) -> str:
    """
    Generate a refresh token carrying only the user id.

    Each token gets a unique ``jti``, so that two tokens issued for the same
    user within the same second are still distinct.
    """
    return encode({'user_id': user_id, 'jti': uuid.uuid4().hex},
                  secret, expiry)


def decode_subject(token: str, secret: str) -> str:
    """Verify a token and get the id of the user it was issued to."""
    claims = decode(token, secret)
    user_id = claims.get('user_id')
    if not user_id:
        raise exceptions.InvalidToken('Token has no subject')
    return str(user_id)
