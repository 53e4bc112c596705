"""Tests for :mod:`videousers.controllers.sessions`."""

from http import HTTPStatus as status
from unittest import TestCase, mock

from werkzeug.exceptions import InternalServerError, Unauthorized

from ... import domain
from ...auth.exceptions import InvalidToken, ExpiredToken, \
    SessionCreationFailed
from .. import sessions


@mock.patch(f'{sessions.__name__}.sessions')
class TestRefresh(TestCase):
    """Tests for :func:`.sessions.refresh`."""

    def test_refresh(self, mock_sessions):
        """A current refresh token gets a new pair of tokens."""
        mock_sessions.refresh_session.return_value = \
            domain.SessionTokens('newaccess', 'newrefresh')
        data, code, headers = sessions.refresh('oldrefresh')
        self.assertEqual(code, status.OK)
        mock_sessions.refresh_session.assert_called_once_with('oldrefresh')
        self.assertEqual(data['data'], {'access_token': 'newaccess',
                                        'refresh_token': 'newrefresh'})
        self.assertEqual(data['cookies'], {'access_token': 'newaccess',
                                           'refresh_token': 'newrefresh'})

    def test_missing(self, mock_sessions):
        """Without a refresh token the request is unauthorized."""
        for token in [None, '']:
            with self.assertRaises(Unauthorized) as ctx:
                sessions.refresh(token)
            self.assertEqual(ctx.exception.description, sessions.UNAUTHORIZED)
        self.assertEqual(mock_sessions.refresh_session.call_count, 0)

    def test_invalid(self, mock_sessions):
        """A rejected refresh token is a 401."""
        for exc in [InvalidToken, ExpiredToken]:
            mock_sessions.refresh_session.side_effect = exc('nope')
            with self.assertRaises(Unauthorized) as ctx:
                sessions.refresh('footoken')
            self.assertEqual(ctx.exception.description,
                             sessions.INVALID_REFRESH_TOKEN)

    def test_session_fails(self, mock_sessions):
        """If the new session cannot be stored, it is a server fault."""
        mock_sessions.refresh_session.side_effect = SessionCreationFailed
        with self.assertRaises(InternalServerError):
            sessions.refresh('footoken')
