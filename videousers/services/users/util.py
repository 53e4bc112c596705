"""Database session helpers and password hashing for the user store."""

from typing import Generator, Optional
from contextlib import contextmanager
import logging

from flask import Flask
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.session import Session
from werkzeug.security import generate_password_hash, check_password_hash

from .models import db
from .exceptions import PasswordAuthenticationFailed

logger = logging.getLogger(__name__)

PASSWORD_HASH_METHOD = 'pbkdf2:sha256'


@contextmanager
def transaction() -> Generator[Session, None, None]:
    """
    Run a unit of work against the user store.

    Pending changes are committed when the block exits; anything raised in the
    block rolls the session back and is re-raised.
    """
    session = db.session
    try:
        yield session
        # Read-only blocks leave nothing to commit.
        if session.new or session.dirty or session.deleted:
            session.commit()
    except SQLAlchemyError as e:
        logger.error('Rolling back user store transaction: %s', e)
        session.rollback()
        raise
    except Exception as e:
        logger.debug('Rolling back user store transaction: %s', e)
        session.rollback()
        raise


def init_app(app: Optional[Flask]) -> None:
    """Bind the user store to ``app``."""
    db.init_app(app)


def create_all() -> None:
    """Create the users, subscriptions, videos and watch history tables."""
    db.create_all()


def drop_all() -> None:
    db.drop_all()


def hash_password(password: str) -> str:
    """Generate a salted, one-way hash of a password."""
    return generate_password_hash(password, method=PASSWORD_HASH_METHOD)


def check_password(password: str, encrypted: str) -> None:
    """Check a password against a hash generated by :func:`hash_password`."""
    if not encrypted or not check_password_hash(encrypted, password):
        raise PasswordAuthenticationFailed('Incorrect password')


def is_available() -> bool:
    """Report whether the user store answers a trivial query."""
    try:
        db.session.execute(text('SELECT 1')).all()
    except SQLAlchemyError as e:
        logger.error('User store is unavailable: %s', e)
        return False
    return True
