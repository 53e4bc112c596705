"""Flask configuration."""
import secrets
import os


#################### Database ####################
SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI',
                                         'sqlite:///videousers.db')
"""Credential store holding users, subscriptions, videos and watch history."""

SQLALCHEMY_TRACK_MODIFICATIONS = False

CREATE_DB = bool(int(os.environ.get('CREATE_DB', 0)))
"""If 1, create all tables when the application starts."""


#################### Session tokens ####################
ACCESS_TOKEN_SECRET = os.environ.get('ACCESS_TOKEN_SECRET',
                                     secrets.token_urlsafe(32))
"""Secret used to sign access tokens."""

ACCESS_TOKEN_EXPIRY = int(os.environ.get('ACCESS_TOKEN_EXPIRY', '86400'))
"""Lifetime of an access token, in seconds (default one day)."""

REFRESH_TOKEN_SECRET = os.environ.get('REFRESH_TOKEN_SECRET',
                                      secrets.token_urlsafe(32))
"""Secret used to sign refresh tokens. Must differ from the access secret."""

REFRESH_TOKEN_EXPIRY = int(os.environ.get('REFRESH_TOKEN_EXPIRY', '864000'))
"""Lifetime of a refresh token, in seconds (default ten days)."""

ACCESS_TOKEN_COOKIE_NAME = os.environ.get('ACCESS_TOKEN_COOKIE_NAME',
                                          'accessToken')
REFRESH_TOKEN_COOKIE_NAME = os.environ.get('REFRESH_TOKEN_COOKIE_NAME',
                                           'refreshToken')

AUTH_COOKIE_SECURE = bool(int(os.environ.get('AUTH_COOKIE_SECURE', '1')))
"""Token cookies are only sent over secure transport when set."""

AUTH_COOKIE_SAMESITE = os.environ.get('AUTH_COOKIE_SAMESITE', 'Strict')
AUTH_COOKIE_DOMAIN = os.environ.get('AUTH_COOKIE_DOMAIN', None)


#################### Media host ####################
UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER', './public/temp')
"""Local directory where incoming files are held until uploaded."""

MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH',
                                        str(16 * 1024 * 1024)))
"""Largest accepted request body, in bytes."""

ASSET_HOST_ENDPOINT = os.environ.get('ASSET_HOST_ENDPOINT',
                                     'https://api.cloudinary.com')
"""Cloudinary API host that uploads and deletions are sent to."""
ASSET_HOST_CLOUD_NAME = os.environ.get('ASSET_HOST_CLOUD_NAME', 'demo')
ASSET_HOST_API_KEY = os.environ.get('ASSET_HOST_API_KEY', 'nope')
ASSET_HOST_API_SECRET = os.environ.get('ASSET_HOST_API_SECRET', 'nope')


#################### Minor configs ##############################
CORS_ORIGIN = os.environ.get('CORS_ORIGIN', '*')
"""Value of ``Access-Control-Allow-Origin`` on API responses."""

LOGLEVEL = int(os.environ.get('LOGLEVEL', 20))

SECRET_KEY = os.environ.get('SECRET_KEY', secrets.token_urlsafe(16))
"""Sets the `Flask` secret key. Not directly used by videousers."""
