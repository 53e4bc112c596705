"""SQLAlchemy models for the credential store."""

import uuid
from datetime import datetime

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, \
    String, Text, UniqueConstraint, text
from sqlalchemy.orm import relationship

from ... import domain

db: SQLAlchemy = SQLAlchemy()


def _new_id() -> str:
    return uuid.uuid4().hex


class DBUser(db.Model):  # type: ignore
    """
    A registered user.

    The password is stored only as a salted hash. ``refresh_token`` is a single
    slot: it holds the most recently issued refresh token, or NULL when the
    user has no active session.
    """

    __tablename__ = 'users'

    user_id = Column(String(32), primary_key=True, default=_new_id)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    full_name = Column(String(255), nullable=False, index=True)
    avatar = Column(String(1024), nullable=False)
    cover_image = Column(String(1024), nullable=False,
                         server_default=text("''"), default='')
    password = Column(String(255), nullable=False)
    refresh_token = Column(Text, nullable=True)
    created = Column(DateTime, default=datetime.now)
    updated = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    watch_history = relationship('DBWatchHistory', back_populates='user',
                                 order_by='DBWatchHistory.position')

    def to_domain(self) -> domain.User:
        """Generate a sanitized :class:`.domain.User` from this record."""
        return domain.User(
            user_id=self.user_id,
            username=self.username,
            email=self.email,
            full_name=self.full_name,
            avatar=self.avatar,
            cover_image=self.cover_image or '',
            created=self.created,
            updated=self.updated
        )


class DBSubscription(db.Model):  # type: ignore
    """
    A subscription edge between two users.

    ``subscriber_id`` is the subscribing user, ``channel_id`` is the user being
    subscribed to.
    """

    __tablename__ = 'subscriptions'
    __table_args__ = (
        UniqueConstraint('subscriber_id', 'channel_id'),
    )

    subscription_id = Column(String(32), primary_key=True, default=_new_id)
    subscriber_id = Column(ForeignKey('users.user_id'), nullable=False,
                           index=True)
    channel_id = Column(ForeignKey('users.user_id'), nullable=False,
                        index=True)
    created = Column(DateTime, default=datetime.now)


class DBVideo(db.Model):  # type: ignore
    """A published (or draft) video, owned by a user."""

    __tablename__ = 'videos'

    video_id = Column(String(32), primary_key=True, default=_new_id)
    owner_id = Column(ForeignKey('users.user_id'), nullable=False, index=True)
    video_file = Column(String(1024), nullable=False)
    thumbnail = Column(String(1024), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default='')
    duration = Column(Float, nullable=False, default=0)
    views = Column(Integer, nullable=False, default=0)
    is_published = Column(Integer, nullable=False, default=1)
    created = Column(DateTime, default=datetime.now)
    updated = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    owner = relationship('DBUser')


class DBWatchHistory(db.Model):  # type: ignore
    """
    One entry in a user's watch history.

    ``position`` orders the entries of a single user's history.
    """

    __tablename__ = 'watch_history'

    user_id = Column(ForeignKey('users.user_id'), primary_key=True)
    position = Column(Integer, primary_key=True, autoincrement=False)
    video_id = Column(ForeignKey('videos.video_id'), nullable=False)
    watched = Column(DateTime, default=datetime.now)

    user = relationship('DBUser', back_populates='watch_history')
    video = relationship('DBVideo')
