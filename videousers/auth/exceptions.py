"""Exceptions raised while issuing, verifying or clearing sessions."""


class InvalidToken(RuntimeError):
    """Token is malformed, forged, or no longer matches the stored session."""


class ExpiredToken(InvalidToken):
    """Token was valid once, but its lifetime has elapsed."""


class MissingToken(InvalidToken):
    """No token was presented."""


class SessionCreationFailed(RuntimeError):
    """Failed to create a session in the credential store."""


class SessionDeletionFailed(RuntimeError):
    """Failed to delete a session in the credential store."""
