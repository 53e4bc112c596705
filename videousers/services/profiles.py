"""
Read-only aggregate queries across users, subscriptions and videos.

Each query is assembled from stages: match the user, derive the aggregate
columns, then project onto the columns exposed to clients.
"""

import logging
from typing import Any, List, Optional

from sqlalchemy import false, func, literal, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, aliased

from .. import domain
from .users import util
from .users.exceptions import NoSuchUser, StoreUnavailable
from .users.models import DBUser, DBSubscription, DBVideo, DBWatchHistory

logger = logging.getLogger(__name__)


def _subscribers_count() -> Any:
    return (
        select(func.count(DBSubscription.subscription_id))
        .where(DBSubscription.channel_id == DBUser.user_id)
        .correlate(DBUser)
        .scalar_subquery()
    )


def _subscribed_to_count() -> Any:
    return (
        select(func.count(DBSubscription.subscription_id))
        .where(DBSubscription.subscriber_id == DBUser.user_id)
        .correlate(DBUser)
        .scalar_subquery()
    )


def _is_subscribed(caller_id: Optional[str]) -> Any:
    if caller_id is None:
        return false()
    subscriber_ids = (
        select(DBSubscription.subscriber_id)
        .where(DBSubscription.channel_id == DBUser.user_id)
        .correlate(DBUser)
    )
    return literal(caller_id).in_(subscriber_ids)


def channel_profile(username: str, caller_id: Optional[str] = None) \
        -> domain.ChannelProfile:
    """
    Get the public profile of a channel.

    Parameters
    ----------
    username : str
        Matched case-insensitively.
    caller_id : str
        Id of the requesting user, if authenticated. An anonymous caller is
        never subscribed.

    Returns
    -------
    :class:`.domain.ChannelProfile`

    Raises
    ------
    :class:`.NoSuchUser`
        No channel has this username.

    """
    try:
        with util.transaction() as session:
            query: Query = (
                session.query(
                    DBUser.full_name,
                    DBUser.username,
                    _subscribers_count().label('subscribers_count'),
                    _subscribed_to_count().label(
                        'channels_subscribed_to_count'
                    ),
                    _is_subscribed(caller_id).label('is_subscribed'),
                    DBUser.avatar,
                    DBUser.cover_image,
                    DBUser.email
                )
                .filter(DBUser.username == username.lower())
            )
            row = query.first()
    except SQLAlchemyError as e:
        raise StoreUnavailable('Could not load channel') from e
    if row is None:
        raise NoSuchUser(f'No channel named {username}')
    return domain.ChannelProfile(
        full_name=row.full_name,
        username=row.username,
        subscribers_count=int(row.subscribers_count or 0),
        channels_subscribed_to_count=int(
            row.channels_subscribed_to_count or 0
        ),
        is_subscribed=bool(row.is_subscribed),
        avatar=row.avatar,
        cover_image=row.cover_image or '',
        email=row.email
    )


def watch_history(user_id: str) -> List[domain.WatchedVideo]:
    """
    Get the videos a user has watched, in watch-history order.

    Each video carries the full name, username and avatar of its owner.
    Entries that refer to videos which no longer exist are skipped.

    Raises
    ------
    :class:`.NoSuchUser`

    """
    owner = aliased(DBUser)
    try:
        with util.transaction() as session:
            if session.get(DBUser, user_id) is None:
                raise NoSuchUser(f'No user with id {user_id}')
            rows = (
                session.query(DBVideo, owner.full_name, owner.username,
                              owner.avatar)
                .select_from(DBWatchHistory)
                .join(DBVideo, DBVideo.video_id == DBWatchHistory.video_id)
                .outerjoin(owner, owner.user_id == DBVideo.owner_id)
                .filter(DBWatchHistory.user_id == user_id)
                .order_by(DBWatchHistory.position)
                .all()
            )
            history = [_to_watched(*row) for row in rows]
    except SQLAlchemyError as e:
        raise StoreUnavailable('Could not load watch history') from e
    logger.debug('Loaded %i watched videos for %s', len(history), user_id)
    return history


def _to_watched(video: DBVideo, full_name: Optional[str],
                username: Optional[str], avatar: Optional[str]) \
        -> domain.WatchedVideo:
    if username is None:
        video_owner = None
    else:
        video_owner = domain.VideoOwner(full_name=full_name,
                                        username=username, avatar=avatar)
    return domain.WatchedVideo(
        video_id=video.video_id,
        title=video.title,
        description=video.description,
        video_file=video.video_file,
        thumbnail=video.thumbnail,
        duration=video.duration,
        views=video.views,
        is_published=bool(video.is_published),
        owner=video_owner,
        created=video.created
    )
