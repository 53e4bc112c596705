"""
Integration with the credential store.

The credential store holds user records (with hashed passwords and the
single-slot refresh token), subscription edges, videos and watch history.
Only users are written by this service; the other tables are read by
:mod:`videousers.services.profiles`.
"""

from .accounts import exists, register, get_user_by_id, update_details, \
    set_avatar, set_cover_image, get_refresh_token, set_refresh_token, \
    clear_refresh_token
from .authenticate import authenticate, change_password
from .exceptions import NoSuchUser, UserExists, PasswordAuthenticationFailed, \
    StoreUnavailable
from .util import init_app, create_all, drop_all, transaction, is_available
