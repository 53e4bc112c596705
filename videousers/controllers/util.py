"""Helpers shared by the request controllers."""

import logging
import os
import uuid
from typing import Any, Dict, Mapping, Optional, Tuple

from werkzeug.datastructures import FileStorage, MultiDict
from werkzeug.utils import secure_filename

from ..context import get_application_config

logger = logging.getLogger(__name__)

ResponseData = Tuple[Dict[str, Any], int, Dict[str, str]]
"""Response payload, status code and extra headers."""


def to_form_data(data: Optional[Mapping]) -> MultiDict:
    """Coerce a JSON body (or form data) into a :class:`.MultiDict`."""
    if isinstance(data, MultiDict):
        return data
    if not data:
        return MultiDict()
    return MultiDict({key: value for key, value in data.items()
                      if isinstance(value, str)})


def save_upload(upload: Optional[FileStorage]) -> Optional[str]:
    """
    Write an uploaded file into the local holding folder.

    Parameters
    ----------
    upload : :class:`.FileStorage`
        The file as received from the client.

    Returns
    -------
    str
        Path to the local copy, or ``None`` if no file was provided.

    """
    if upload is None or not upload.filename:
        return None
    folder = get_application_config().get('UPLOAD_FOLDER', './public/temp')
    os.makedirs(folder, exist_ok=True)
    filename = secure_filename(upload.filename) or 'upload'
    path = os.path.join(folder, f'{uuid.uuid4().hex}-{filename}')
    upload.save(path)
    logger.debug('Saved upload %s to %s', upload.filename, path)
    return path
