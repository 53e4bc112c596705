"""Password authentication against the credential store."""

import logging

from sqlalchemy.exc import SQLAlchemyError

from ... import domain
from . import util
from .exceptions import NoSuchUser, StoreUnavailable
from .models import DBUser

logger = logging.getLogger(__name__)


def authenticate(email: str, password: str) -> domain.User:
    """
    Validate e-mail/password. If successful, retrieve user details.

    Parameters
    ----------
    email : str
        Compared case-insensitively.
    password : str
        Password (as entered).

    Returns
    -------
    :class:`domain.User`

    Raises
    ------
    :class:`NoSuchUser`
        No user has this e-mail address.
    :class:`PasswordAuthenticationFailed`
        The password does not match.

    """
    try:
        with util.transaction() as session:
            db_user = (
                session.query(DBUser)
                .filter(DBUser.email == email.lower())
                .first()
            )
            if db_user is None:
                logger.debug('No user with email %s', email)
                raise NoSuchUser('User does not exist')
            util.check_password(password, db_user.password)
            return db_user.to_domain()
    except SQLAlchemyError as e:
        raise StoreUnavailable('Could not authenticate') from e


def change_password(user_id: str, old_password: str,
                    new_password: str) -> None:
    """
    Replace the password of a user, after checking the current one.

    Raises
    ------
    :class:`NoSuchUser`
    :class:`PasswordAuthenticationFailed`
        ``old_password`` does not match.

    """
    try:
        with util.transaction() as session:
            db_user = session.get(DBUser, user_id)
            if db_user is None:
                raise NoSuchUser('User does not exist')
            util.check_password(old_password, db_user.password)
            db_user.password = util.hash_password(new_password)
            session.commit()
    except SQLAlchemyError as e:
        raise StoreUnavailable('Could not change password') from e
    logger.debug('Changed password for user %s', user_id)
