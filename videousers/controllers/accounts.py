"""
Controllers for account registration, login and profile maintenance.

Each controller returns a ``(data, status_code, headers)`` tuple. ``data``
holds the ``data`` and ``message`` of the response envelope and, for the
controllers that start or end a session, the ``cookies`` that the route
should set (a ``None`` value means the cookie is removed).
"""

from http import HTTPStatus as status
from typing import Callable, Optional, Tuple
import logging

from werkzeug.datastructures import FileStorage, MultiDict
from werkzeug.exceptions import BadRequest, Conflict, InternalServerError, \
    NotFound, Unauthorized

from .. import domain
from ..auth.exceptions import SessionCreationFailed, SessionDeletionFailed
from ..services import assets, sessions, users
from .forms import RegistrationForm, LoginForm, PasswordForm, \
    AccountDetailsForm
from .util import ResponseData, save_upload

logger = logging.getLogger(__name__)

ALL_FIELDS_REQUIRED = 'All fields are required'
USER_EXISTS = 'User with email or username already exists'
AVATAR_REQUIRED = 'Avatar file is required'
AVATAR_UPLOAD_FAILED = 'Error uploading avatar file to cloudinary'
CREATE_FAILED = 'Error creating user in the database'
CREDENTIALS_REQUIRED = 'Email and password are required'
NO_SUCH_USER = 'User does not exist'
BAD_CREDENTIALS = 'Invalid user credentials'
TOKENS_FAILED = 'Something went wrong while generating tokens'
BAD_OLD_PASSWORD = 'Invalid old password'
EMAIL_TAKEN = 'Email is already in use'
STORE_FAILED = 'Something went wrong while updating the user'

AVATAR_FIELDS = ('avatar',)
COVER_IMAGE_FIELDS = ('coverImage', 'cover_image')
"""Accepted multipart names for the cover image, preferred first."""


def _discard(*uploaded: Optional[domain.Asset]) -> None:
    """Remove assets that were uploaded for a write that did not happen."""
    for asset in uploaded:
        if asset is not None and not assets.destroy(asset):
            logger.error('Orphaned asset on media host: %s', asset.public_id)


def _get_file(files: MultiDict,
              fields: Tuple[str, ...]) -> Optional[FileStorage]:
    for field in fields:
        upload = files.get(field)
        if upload is not None and upload.filename:
            return upload
    return None


def register(form_data: MultiDict, files: MultiDict) -> ResponseData:
    """
    Create a new account.

    Parameters
    ----------
    form_data : MultiDict
        Should include ``full_name``, ``email``, ``username`` and
        ``password``.
    files : MultiDict
        Must include an ``avatar`` file; may include a ``coverImage`` file
        (``cover_image`` is also accepted).

    Returns
    -------
    dict
        The created user, without password or refresh token.
    int
        Status code. 201 if all goes well.
    dict
        Headers to add to the response.

    """
    form = RegistrationForm(form_data)
    if not form.validate():
        logger.debug('Registration data is not valid: %s', form.errors)
        raise BadRequest(ALL_FIELDS_REQUIRED)

    try:
        taken = users.exists(form.username.data.strip(),
                             form.email.data.strip())
    except users.StoreUnavailable as e:
        raise InternalServerError(CREATE_FAILED) from e
    if taken:
        logger.debug('Username or email already registered')
        raise Conflict(USER_EXISTS)

    avatar_path = save_upload(_get_file(files, AVATAR_FIELDS))
    if avatar_path is None:
        raise BadRequest(AVATAR_REQUIRED)
    avatar = assets.upload(avatar_path)
    if avatar is None:
        raise BadRequest(AVATAR_UPLOAD_FAILED)
    # The cover image is optional, so a failed upload leaves it empty.
    cover_image = assets.upload(
        save_upload(_get_file(files, COVER_IMAGE_FIELDS))
    )

    try:
        user = users.register(
            full_name=form.full_name.data.strip(),
            email=form.email.data.strip(),
            username=form.username.data.strip(),
            password=form.password.data,
            avatar=avatar.url,
            cover_image=cover_image.url if cover_image else ''
        )
    except users.UserExists as e:
        _discard(avatar, cover_image)
        raise Conflict(USER_EXISTS) from e
    except users.StoreUnavailable as e:
        logger.error('Could not create user: %s', e)
        _discard(avatar, cover_image)
        raise InternalServerError(CREATE_FAILED) from e
    logger.debug('Registered user %s', user.user_id)
    return {'data': domain.to_dict(user),
            'message': 'User created successfully'}, status.CREATED, {}


def login(form_data: MultiDict) -> ResponseData:
    """
    Authenticate with e-mail and password, and start a session.

    Returns
    -------
    dict
        The user and both session tokens. Also the cookies to set.
    int
    dict

    """
    form = LoginForm(form_data)
    if not form.validate():
        raise BadRequest(CREDENTIALS_REQUIRED)

    try:
        user = users.authenticate(form.email.data.strip(),
                                  form.password.data)
    except users.NoSuchUser as e:
        raise NotFound(NO_SUCH_USER) from e
    except users.PasswordAuthenticationFailed as e:
        logger.debug('Authentication failed for %s', form.email.data)
        raise Unauthorized(BAD_CREDENTIALS) from e
    except users.StoreUnavailable as e:
        raise InternalServerError(TOKENS_FAILED) from e

    try:
        session_tokens = sessions.issue_session_tokens(user.user_id)
    except SessionCreationFailed as e:
        logger.error('Could not create session: %s', e)
        raise InternalServerError(TOKENS_FAILED) from e

    return {
        'data': {
            'user': domain.to_dict(user),
            'access_token': session_tokens.access_token,
            'refresh_token': session_tokens.refresh_token
        },
        'message': 'User logged in successfully',
        'cookies': {
            'access_token': session_tokens.access_token,
            'refresh_token': session_tokens.refresh_token
        }
    }, status.OK, {}


def logout(user: domain.User) -> ResponseData:
    """End the session of the authenticated user, and remove its cookies."""
    try:
        sessions.clear_session(user.user_id)
    except SessionDeletionFailed as e:
        logger.error('Logout failed: %s', e)
        raise InternalServerError('Could not log out') from e
    return {'data': {}, 'message': 'User logged out',
            'cookies': {'access_token': None, 'refresh_token': None}}, \
        status.OK, {}


def change_password(user: domain.User, form_data: MultiDict) -> ResponseData:
    """Replace the password of the authenticated user."""
    form = PasswordForm(form_data)
    if not form.validate():
        raise BadRequest('Old and new password are required')
    try:
        users.change_password(user.user_id, form.old_password.data,
                              form.new_password.data)
    except users.PasswordAuthenticationFailed as e:
        raise Unauthorized(BAD_OLD_PASSWORD) from e
    except users.NoSuchUser as e:
        raise NotFound(NO_SUCH_USER) from e
    except users.StoreUnavailable as e:
        raise InternalServerError(STORE_FAILED) from e
    return {'data': {}, 'message': 'Password changed successfully'}, \
        status.OK, {}


def get_current_user(user: domain.User) -> ResponseData:
    """Describe the authenticated user."""
    return {'data': domain.to_dict(user),
            'message': 'Current user fetched successfully'}, status.OK, {}


def update_user_details(user: domain.User,
                        form_data: MultiDict) -> ResponseData:
    """Update the full name and e-mail address of the authenticated user."""
    form = AccountDetailsForm(form_data)
    if not form.validate():
        raise BadRequest(ALL_FIELDS_REQUIRED)
    try:
        updated = users.update_details(user.user_id,
                                       full_name=form.full_name.data.strip(),
                                       email=form.email.data.strip())
    except users.UserExists as e:
        raise Conflict(EMAIL_TAKEN) from e
    except users.NoSuchUser as e:
        raise NotFound(NO_SUCH_USER) from e
    except users.StoreUnavailable as e:
        raise InternalServerError(STORE_FAILED) from e
    return {'data': domain.to_dict(updated),
            'message': 'Account details updated successfully'}, status.OK, {}


def _replace_image(user: domain.User, files: MultiDict,
                   fields: Tuple[str, ...], label: str,
                   store: Callable[[str, str], domain.User]) \
        -> domain.User:
    path = save_upload(_get_file(files, fields))
    if path is None:
        raise BadRequest(f'{label} file is missing')
    asset = assets.upload(path)
    if asset is None:
        raise BadRequest(f'Error while uploading {label.lower()}')
    try:
        return store(user.user_id, asset.url)
    except users.NoSuchUser as e:
        _discard(asset)
        raise NotFound(NO_SUCH_USER) from e
    except users.StoreUnavailable as e:
        logger.error('Could not store %s: %s', fields[0], e)
        _discard(asset)
        raise InternalServerError(STORE_FAILED) from e


def update_user_avatar(user: domain.User, files: MultiDict) -> ResponseData:
    """Upload a new avatar for the authenticated user."""
    updated = _replace_image(user, files, AVATAR_FIELDS, 'Avatar',
                             users.set_avatar)
    return {'data': domain.to_dict(updated),
            'message': 'Avatar image updated successfully'}, status.OK, {}


def update_user_cover_image(user: domain.User,
                            files: MultiDict) -> ResponseData:
    """Upload a new cover image for the authenticated user."""
    updated = _replace_image(user, files, COVER_IMAGE_FIELDS, 'Cover image',
                             users.set_cover_image)
    return {'data': domain.to_dict(updated),
            'message': 'Cover image updated successfully'}, status.OK, {}
