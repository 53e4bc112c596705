"""Web Server Gateway Interface entry-point."""

import os
from typing import Any, Callable, Iterable, Optional

from flask import Flask

from .factory import create_web_app

__flask_app__: Optional[Flask] = None


def application(environ: dict, start_response: Callable) -> Iterable[Any]:
    """WSGI application."""
    global __flask_app__
    if __flask_app__ is None:
        # uWSGI passes configuration in the environ of the first request.
        for key, value in environ.items():
            # Keep ``SERVER_NAME`` as configured, not the container hostname.
            if key == 'SERVER_NAME' or not isinstance(value, str):
                continue
            os.environ[key] = value
        __flask_app__ = create_web_app()
    return __flask_app__(environ, start_response)
