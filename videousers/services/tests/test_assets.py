"""Tests for :mod:`videousers.services.assets`."""

import os
import tempfile
from unittest import TestCase, mock

import cloudinary.exceptions

from ... import domain
from .. import assets

CREDENTIALS = {
    'upload_prefix': 'https://host',
    'cloud_name': 'cloud',
    'api_key': 'fookey',
    'api_secret': 'foosecret',
    'secure': True
}


def _local_file() -> str:
    fd, path = tempfile.mkstemp(suffix='.png')
    os.close(fd)
    with open(path, 'wb') as f:
        f.write(b'not really a png')
    return path


def _session() -> assets.AssetHostSession:
    return assets.AssetHostSession('https://host/', 'cloud', 'fookey',
                                   'foosecret')


@mock.patch(f'{assets.__name__}.cloudinary.uploader')
class TestUpload(TestCase):
    """Tests for :meth:`.AssetHostSession.upload`."""

    def setUp(self):
        self.path = _local_file()

    def tearDown(self):
        if os.path.exists(self.path):
            os.remove(self.path)

    def test_upload_succeeds(self, mock_uploader):
        """The secure URL of the stored file is returned."""
        mock_uploader.upload.return_value = {
            'secure_url': 'https://media/foo.png',
            'url': 'http://media/foo.png',
            'public_id': 'foo',
            'resource_type': 'image'
        }
        asset = _session().upload(self.path)
        self.assertEqual(asset, domain.Asset(url='https://media/foo.png',
                                             public_id='foo',
                                             resource_type='image'))
        self.assertFalse(os.path.exists(self.path),
                         'The local copy is removed')
        mock_uploader.upload.assert_called_once_with(
            self.path, resource_type='auto', **CREDENTIALS
        )

    def test_upload_rejected(self, mock_uploader):
        """A refused upload returns None, and still removes the local copy."""
        mock_uploader.upload.side_effect = \
            cloudinary.exceptions.BadRequest('Invalid image file')
        self.assertIsNone(_session().upload(self.path))
        self.assertFalse(os.path.exists(self.path))

    def test_upload_connection_error(self, mock_uploader):
        """An unreachable host returns None, and removes the local copy."""
        mock_uploader.upload.side_effect = \
            cloudinary.exceptions.GeneralError('Connection refused')
        self.assertIsNone(_session().upload(self.path))
        self.assertFalse(os.path.exists(self.path))

    def test_upload_malformed_response(self, mock_uploader):
        """A response without a URL returns None."""
        mock_uploader.upload.return_value = {'error': 'what'}
        self.assertIsNone(_session().upload(self.path))
        self.assertFalse(os.path.exists(self.path))

    def test_nothing_to_upload(self, mock_uploader):
        """Without a path there is nothing to do."""
        session = _session()
        self.assertIsNone(session.upload(None))
        self.assertIsNone(session.upload(''))
        self.assertEqual(mock_uploader.upload.call_count, 0)


@mock.patch(f'{assets.__name__}.cloudinary.uploader')
class TestDestroy(TestCase):
    """Tests for :meth:`.AssetHostSession.destroy`."""

    def test_destroy(self, mock_uploader):
        """The asset is deleted by public id and resource type."""
        mock_uploader.destroy.return_value = {'result': 'ok'}
        asset = domain.Asset('https://media/foo.mp4', 'foo', 'video')
        self.assertTrue(_session().destroy(asset))
        mock_uploader.destroy.assert_called_once_with(
            'foo', resource_type='video', **CREDENTIALS
        )

    def test_destroy_not_found(self, mock_uploader):
        """The media host did not confirm the deletion."""
        mock_uploader.destroy.return_value = {'result': 'not found'}
        self.assertFalse(_session().destroy(domain.Asset('https://m/f', 'f')))

    def test_destroy_unexpected_body(self, mock_uploader):
        """A body that is not a mapping is a failed deletion."""
        for body in [['ok'], 'ok', None]:
            mock_uploader.destroy.return_value = body
            self.assertFalse(
                _session().destroy(domain.Asset('https://m/f', 'f'))
            )

    def test_destroy_fails(self, mock_uploader):
        """Failure to delete is reported, not raised."""
        mock_uploader.destroy.side_effect = \
            cloudinary.exceptions.GeneralError('Connection refused')
        self.assertFalse(_session().destroy(domain.Asset('https://m/f', 'f')))


class TestGetSession(TestCase):
    """Tests for :func:`.assets.get_session`."""

    @mock.patch(f'{assets.__name__}.get_application_config')
    def test_get_session(self, mock_get_config):
        """The session is configured from the application."""
        mock_get_config.return_value = {
            'ASSET_HOST_ENDPOINT': 'https://host/',
            'ASSET_HOST_CLOUD_NAME': 'cloud',
            'ASSET_HOST_API_KEY': 'fookey',
            'ASSET_HOST_API_SECRET': 'foosecret'
        }
        session = assets.get_session()
        self.assertIsInstance(session, assets.AssetHostSession)
        self.assertEqual(session._options, CREDENTIALS)
