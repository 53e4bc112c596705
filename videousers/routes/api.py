"""Provides the JSON API for user accounts."""

from http import HTTPStatus as status
from typing import Any, Dict, Optional
import logging

from flask import Blueprint, Response, current_app, jsonify, make_response, \
    request

from .. import __version__
from ..auth.decorators import authenticated
from ..controllers import accounts, profiles, sessions
from ..controllers.util import to_form_data
from ..services import users

logger = logging.getLogger(__name__)
blueprint = Blueprint('api', __name__, url_prefix='/api/v1')


def envelope(data: Dict[str, Any], code: int,
             headers: Optional[Dict[str, str]] = None) -> Response:
    """Wrap controller data in the success envelope, and set any cookies."""
    cookies = data.pop('cookies', None)
    response: Response = make_response(jsonify({
        'status_code': int(code),
        'data': data.get('data'),
        'message': data.get('message', ''),
        'success': int(code) < 400
    }), code, headers or {})
    if cookies:
        set_cookies(response, cookies)
    return response


def set_cookies(response: Response, cookies: Dict[str, Optional[str]]) \
        -> None:
    """
    Update a :class:`.Response` with the token cookies in controller data.

    Keys are ``access_token`` or ``refresh_token``. A ``None`` value removes
    the cookie.
    """
    config = current_app.config
    params = dict(httponly=True,
                  secure=config['AUTH_COOKIE_SECURE'],
                  samesite=config['AUTH_COOKIE_SAMESITE'],
                  domain=config.get('AUTH_COOKIE_DOMAIN'))
    for cookie_key, cookie_value in cookies.items():
        cookie_name = config[f'{cookie_key.upper()}_COOKIE_NAME']
        if cookie_value is None:
            logger.debug('Unset cookie %s', cookie_name)
            response.delete_cookie(cookie_name, path='/', **params)
            continue
        max_age = int(config[f'{cookie_key.upper()}_EXPIRY'])
        logger.debug('Set cookie %s, max_age %i', cookie_name, max_age)
        response.set_cookie(cookie_name, cookie_value, max_age=max_age,
                            **params)


def _json_data() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _form_or_json() -> Any:
    if request.form:
        return request.form
    return to_form_data(_json_data())


@blueprint.route('/health', methods=['GET'])
def health() -> Response:
    """Report whether the service and its credential store are up."""
    available = users.is_available()
    code = status.OK if available else status.SERVICE_UNAVAILABLE
    return envelope({'data': {'store': available, 'version': __version__},
                     'message': 'OK' if available else 'Store unavailable'},
                    code)


@blueprint.route('/users/register', methods=['POST'])
def register() -> Response:
    """Create a new account."""
    data, code, headers = accounts.register(request.form, request.files)
    return envelope(data, code, headers)


@blueprint.route('/users/login', methods=['POST'])
def login() -> Response:
    """Log in with e-mail and password."""
    data, code, headers = accounts.login(_form_or_json())
    return envelope(data, code, headers)


@blueprint.route('/users/logout', methods=['POST'])
@authenticated
def logout() -> Response:
    """Log out, clearing the session and its cookies."""
    data, code, headers = accounts.logout(request.auth)
    return envelope(data, code, headers)


@blueprint.route('/users/refresh-token', methods=['POST'])
def refresh_token() -> Response:
    """Exchange a refresh token for a new pair of tokens."""
    cookie_name = current_app.config['REFRESH_TOKEN_COOKIE_NAME']
    token = request.cookies.get(cookie_name) \
        or _json_data().get('refresh_token')
    data, code, headers = sessions.refresh(token)
    return envelope(data, code, headers)


@blueprint.route('/users/change-password', methods=['POST'])
@authenticated
def change_password() -> Response:
    """Change the password of the authenticated user."""
    data, code, headers = accounts.change_password(request.auth,
                                                   _form_or_json())
    return envelope(data, code, headers)


@blueprint.route('/users/current-user', methods=['GET'])
@authenticated
def current_user() -> Response:
    """Describe the authenticated user."""
    data, code, headers = accounts.get_current_user(request.auth)
    return envelope(data, code, headers)


@blueprint.route('/users/update-account', methods=['PATCH'])
@authenticated
def update_account() -> Response:
    """Update the full name and e-mail address of the authenticated user."""
    data, code, headers = accounts.update_user_details(request.auth,
                                                       _form_or_json())
    return envelope(data, code, headers)


@blueprint.route('/users/avatar', methods=['PATCH'])
@authenticated
def update_avatar() -> Response:
    """Replace the avatar of the authenticated user."""
    data, code, headers = accounts.update_user_avatar(request.auth,
                                                      request.files)
    return envelope(data, code, headers)


@blueprint.route('/users/cover-image', methods=['PATCH'])
@authenticated
def update_cover_image() -> Response:
    """Replace the cover image of the authenticated user."""
    data, code, headers = accounts.update_user_cover_image(request.auth,
                                                           request.files)
    return envelope(data, code, headers)


@blueprint.route('/users/c/<string:username>', methods=['GET'])
def channel_profile(username: str) -> Response:
    """Public profile of a channel. Authentication is optional."""
    data, code, headers = profiles.get_channel_profile(username,
                                                       request.auth)
    return envelope(data, code, headers)


@blueprint.route('/users/history', methods=['GET'])
@authenticated
def watch_history() -> Response:
    """Watch history of the authenticated user."""
    data, code, headers = profiles.get_watch_history(request.auth)
    return envelope(data, code, headers)
