"""
videousers accounts service.

The videousers service is a Flask application that provides a JSON API for
user accounts on a video platform: registration (with avatar and cover images
stored on a remote media host), login and logout, token refresh, password and
profile maintenance, and two read-only views that aggregate across users,
subscriptions and videos: a channel's public profile and a user's watch
history.

Sessions
--------
A successful login issues two signed tokens. The access token carries the
user's identity and is presented on each request, either as the
``accessToken`` cookie or as a bearer token. The refresh token carries only
the user id; it is stored in the user's record, and exchanging it for a new
pair rotates it, so that a refresh token can be used only once. Each user has
at most one active session.
"""

__version__ = '0.1.0'
