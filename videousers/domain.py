"""Defines the core data structures for the videousers service."""

from typing import Any, Optional, NamedTuple, List
from datetime import datetime


class User(NamedTuple):
    """
    A registered user, as exposed outside of the credential store.

    Never carries the password hash or the stored refresh token.
    """

    user_id: str
    """Unique identifier for the user."""

    username: str
    """Unique, lowercased handle; also the channel name."""

    email: str
    """Unique, lowercased e-mail address."""

    full_name: str

    avatar: str
    """Public URL of the avatar image on the media host."""

    cover_image: str = ''
    """Public URL of the cover image, or an empty string."""

    created: Optional[datetime] = None
    updated: Optional[datetime] = None


class SessionTokens(NamedTuple):
    """The pair of bearer tokens issued for an authenticated session."""

    access_token: str
    """Short-lived token carrying the user's identity claims."""

    refresh_token: str
    """Longer-lived token carrying only the user id."""


class Asset(NamedTuple):
    """A file stored on the remote media host."""

    url: str
    public_id: str
    resource_type: str = 'image'


class VideoOwner(NamedTuple):
    """The owner of a video, as embedded in the watch history."""

    full_name: str
    username: str
    avatar: str


class WatchedVideo(NamedTuple):
    """A video from a user's watch history, with its owner embedded."""

    video_id: str
    title: str
    description: str
    video_file: str
    thumbnail: str
    duration: float
    views: int
    is_published: bool
    owner: Optional[VideoOwner] = None
    created: Optional[datetime] = None


class ChannelProfile(NamedTuple):
    """Public view of a user's channel."""

    full_name: str
    username: str
    subscribers_count: int
    """Number of users subscribed to this channel."""

    channels_subscribed_to_count: int
    """Number of channels this user is subscribed to."""

    is_subscribed: bool
    """Whether the requesting user is among this channel's subscribers."""

    avatar: str
    cover_image: str
    email: str


def to_dict(obj: tuple) -> dict:
    """
    Generate a dict representation of a NamedTuple instance.

    Child NamedTuple instances are converted recursively, and datetimes are
    rendered in ISO-8601 format.

    Parameters
    ----------
    obj : tuple
        A NamedTuple instance.

    Returns
    -------
    dict

    """
    if not hasattr(obj, '_asdict'):  # NamedTuple-generated classes have this.
        return {}
    data = obj._asdict()  # type: ignore

    def _cast(value: Any) -> Any:
        if hasattr(value, '_asdict'):
            value = to_dict(value)
        elif isinstance(value, datetime):
            value = value.isoformat()
        elif isinstance(value, list):
            value = [_cast(o) for o in value]
        return value

    return {key: _cast(value) for key, value in data.items()}


def to_list(objs: List[tuple]) -> List[dict]:
    """Generate a list of dicts from a list of NamedTuple instances."""
    return [to_dict(obj) for obj in objs]
