"""Exceptions raised by the credential store."""


class NoSuchUser(RuntimeError):
    """User does not exist."""


class UserExists(RuntimeError):
    """A user with the same username or e-mail address already exists."""


class PasswordAuthenticationFailed(RuntimeError):
    """Password is not correct."""


class StoreUnavailable(RuntimeError):
    """The credential store could not be reached, or refused the write."""
