"""Provide methods for working with user accounts."""

from typing import Optional, Generator
from contextlib import contextmanager
import logging

from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm.session import Session

from ... import domain
from . import util
from .exceptions import NoSuchUser, UserExists, StoreUnavailable
from .models import DBUser

logger = logging.getLogger(__name__)


@contextmanager
def _store(action: str) -> Generator[Session, None, None]:
    """Run a unit of work, translating database errors to service errors."""
    try:
        with util.transaction() as session:
            yield session
    except IntegrityError as e:
        raise UserExists(f'Could not {action}: username or email taken') \
            from e
    except SQLAlchemyError as e:
        raise StoreUnavailable(f'Could not {action}') from e


def _get(session: Session, user_id: str) -> DBUser:
    db_user: Optional[DBUser] = session.get(DBUser, user_id)
    if db_user is None:
        raise NoSuchUser(f'No user with id {user_id}')
    return db_user


def exists(username: str, email: str) -> bool:
    """
    Determine whether a user with this username or e-mail already exists.

    Both values are compared in their normalized (lowercased) form.

    Parameters
    ----------
    username : str
    email : str

    Returns
    -------
    bool

    """
    with _store('look up user') as session:
        data = (
            session.query(DBUser.user_id)
            .filter(or_(DBUser.username == username.lower(),
                        DBUser.email == email.lower()))
            .first()
        )
        return data is not None


def register(full_name: str, email: str, username: str, password: str,
             avatar: str, cover_image: str = '') -> domain.User:
    """
    Create a new user.

    Parameters
    ----------
    full_name : str
    email : str
        Stored lowercased.
    username : str
        Stored lowercased.
    password : str
        Plaintext password; only a salted hash is stored.
    avatar : str
        Public URL of the already-uploaded avatar.
    cover_image : str
        Public URL of the already-uploaded cover image, or an empty string.

    Returns
    -------
    :class:`.domain.User`
        The created user, without password or refresh token.

    Raises
    ------
    :class:`.UserExists`
        Username or e-mail is already taken.
    :class:`.StoreUnavailable`
        The record could not be written.

    """
    with _store('create user') as session:
        db_user = DBUser(
            full_name=full_name,
            email=email.lower(),
            username=username.lower(),
            password=util.hash_password(password),
            avatar=avatar,
            cover_image=cover_image or ''
        )
        session.add(db_user)
        session.commit()
        logger.debug('Created user %s', db_user.user_id)
        return db_user.to_domain()


def get_user_by_id(user_id: str) -> domain.User:
    """Load a sanitized user by id."""
    with _store('load user') as session:
        return _get(session, user_id).to_domain()


def update_details(user_id: str, full_name: str, email: str) -> domain.User:
    """
    Update the full name and e-mail address of a user.

    Raises
    ------
    :class:`.NoSuchUser`
    :class:`.UserExists`
        The new e-mail address belongs to another user.

    """
    with _store('update user') as session:
        db_user = _get(session, user_id)
        db_user.full_name = full_name
        db_user.email = email.lower()
        session.commit()
        return db_user.to_domain()


def set_avatar(user_id: str, url: str) -> domain.User:
    """Point the avatar of a user at a new remote asset."""
    with _store('update avatar') as session:
        db_user = _get(session, user_id)
        db_user.avatar = url
        session.commit()
        return db_user.to_domain()


def set_cover_image(user_id: str, url: str) -> domain.User:
    """Point the cover image of a user at a new remote asset."""
    with _store('update cover image') as session:
        db_user = _get(session, user_id)
        db_user.cover_image = url
        session.commit()
        return db_user.to_domain()


def get_refresh_token(user_id: str) -> Optional[str]:
    """Get the refresh token currently stored for a user, if any."""
    with _store('load session') as session:
        token: Optional[str] = _get(session, user_id).refresh_token
        return token


def _write_refresh_token(session: Session, user_id: str,
                         token: Optional[str]) -> int:
    # Session state is not a change to the account, so ``updated`` is kept.
    result = session.execute(
        update(DBUser)
        .where(DBUser.user_id == user_id)
        .values(refresh_token=token, updated=DBUser.updated)
    )
    session.commit()
    return result.rowcount


def set_refresh_token(user_id: str, token: str) -> None:
    """
    Store ``token`` as the user's refresh token, replacing any prior one.

    Raises
    ------
    :class:`.NoSuchUser`

    """
    with _store('store session') as session:
        if _write_refresh_token(session, user_id, token) == 0:
            raise NoSuchUser(f'No user with id {user_id}')


def clear_refresh_token(user_id: str) -> None:
    """Remove the stored refresh token of a user. Safe to call repeatedly."""
    with _store('clear session') as session:
        _write_refresh_token(session, user_id, None)
