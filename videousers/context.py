"""Access to application configuration and request globals."""

import os
from typing import Any, Mapping, Optional

from flask import Flask, current_app, g, has_app_context


def get_application_config(app: Optional[Flask] = None) -> Mapping:
    """
    Get a configuration from the current app, or from the environment.

    Parameters
    ----------
    app : :class:`flask.Flask`

    Returns
    -------
    :class:`collections.abc.Mapping`
        Falls back to ``os.environ`` outside of an application context.

    """
    if app is not None:
        return app.config
    if has_app_context():
        return current_app.config
    return os.environ


def get_application_global() -> Optional[Any]:
    """Get the application-context global, if there is one."""
    if has_app_context():
        return g
    return None
