"""
Integration with the remote media host.

Files arrive as multipart uploads, are written to a local holding folder, and
are then pushed to Cloudinary. The local copy is always removed after the
attempt.
"""

import logging
import os
from functools import wraps
from typing import Any, Dict, Optional

import cloudinary.exceptions
import cloudinary.uploader
from flask import Flask

from .. import domain
from ..context import get_application_config, get_application_global

logger = logging.getLogger(__name__)


class AssetHostSession(object):
    """A connection to one Cloudinary account."""

    def __init__(self, endpoint: str, cloud_name: str, api_key: str,
                 api_secret: str) -> None:
        """Hold the account credentials for each call to the uploader."""
        self._options: Dict[str, Any] = {
            'upload_prefix': endpoint.rstrip('/'),
            'cloud_name': cloud_name,
            'api_key': api_key,
            'api_secret': api_secret,
            'secure': True
        }
        logger.debug('New AssetHostSession for cloud %s', cloud_name)

    def upload(self, local_path: Optional[str]) -> Optional[domain.Asset]:
        """
        Upload a local file to the media host.

        The local file is deleted afterwards, whether or not the upload
        succeeded.

        Parameters
        ----------
        local_path : str
            Path to the file. If empty, nothing is uploaded.

        Returns
        -------
        :class:`.domain.Asset`
            The stored asset, or ``None`` if the upload failed.

        """
        if not local_path:
            return None
        try:
            data = cloudinary.uploader.upload(local_path,
                                              resource_type='auto',
                                              **self._options)
            asset = domain.Asset(url=data['secure_url'],
                                 public_id=data['public_id'],
                                 resource_type=data.get('resource_type',
                                                        'image'))
        except (cloudinary.exceptions.Error, OSError, KeyError,
                TypeError) as e:
            logger.error('Upload of %s failed: %s', local_path, e)
            return None
        finally:
            _remove(local_path)
        logger.debug('Uploaded %s as %s', local_path, asset.public_id)
        return asset

    def destroy(self, asset: domain.Asset) -> bool:
        """
        Delete an asset from the media host.

        Returns
        -------
        bool
            Whether the media host confirmed the deletion.

        """
        try:
            data = cloudinary.uploader.destroy(
                asset.public_id, resource_type=asset.resource_type,
                **self._options
            )
        except (cloudinary.exceptions.Error, OSError) as e:
            logger.error('Could not destroy %s: %s', asset.public_id, e)
            return False
        if not isinstance(data, dict) or data.get('result') != 'ok':
            logger.error('Media host refused to destroy %s: %s',
                         asset.public_id, data)
            return False
        return True


def _remove(local_path: str) -> None:
    try:
        os.remove(local_path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.error('Could not remove %s: %s', local_path, e)


def init_app(app: Optional[Flask] = None) -> None:
    """Set required configuration defaults for the application."""
    if app is not None:
        app.config.setdefault('ASSET_HOST_ENDPOINT',
                              'https://api.cloudinary.com')
        app.config.setdefault('ASSET_HOST_CLOUD_NAME', 'demo')
        app.config.setdefault('ASSET_HOST_API_KEY', 'nope')
        app.config.setdefault('ASSET_HOST_API_SECRET', 'nope')


def get_session(app: Optional[Flask] = None) -> AssetHostSession:
    """Create a new media host session."""
    config = get_application_config(app)
    return AssetHostSession(config['ASSET_HOST_ENDPOINT'],
                            config['ASSET_HOST_CLOUD_NAME'],
                            config['ASSET_HOST_API_KEY'],
                            config['ASSET_HOST_API_SECRET'])


def current_session(app: Optional[Flask] = None) -> AssetHostSession:
    """Get the current media host session for this context."""
    g = get_application_global()
    if g:
        if 'assets' not in g:
            g.assets = get_session(app)  # type: ignore
        return g.assets  # type: ignore
    return get_session(app)


@wraps(AssetHostSession.upload)
def upload(local_path: Optional[str]) -> Optional[domain.Asset]:
    """Wrapper for :meth:`AssetHostSession.upload`."""
    return current_session().upload(local_path)


@wraps(AssetHostSession.destroy)
def destroy(asset: domain.Asset) -> bool:
    """Wrapper for :meth:`AssetHostSession.destroy`."""
    return current_session().destroy(asset)
