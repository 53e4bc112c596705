"""Tests for :mod:`videousers.services.sessions`."""

from unittest import TestCase, mock

import jwt

from ... import domain
from ...auth import tokens
from ...auth.exceptions import InvalidToken, ExpiredToken, MissingToken, \
    SessionCreationFailed, SessionDeletionFailed
from .. import sessions, users
from .util import temporary_db


class TestSessionStore(TestCase):
    """Tests for :class:`.sessions.SessionStore` against a real database."""

    def setUp(self):
        self.store = sessions.SessionStore('fooaccess', 'foorefresh',
                                           access_expiry=3600,
                                           refresh_expiry=36000)

    def _register(self) -> domain.User:
        return users.register('Jane Doe', 'jane@example.com', 'janedoe',
                              'foopass', 'https://media/avatar.png')

    def test_issue_session_tokens(self):
        """Access token carries identity claims; refresh token is stored."""
        with temporary_db():
            user = self._register()
            issued = self.store.issue_session_tokens(user.user_id)
            self.assertTrue(issued.access_token)
            self.assertTrue(issued.refresh_token)
            self.assertNotEqual(issued.access_token, issued.refresh_token)

            claims = jwt.decode(issued.access_token, 'fooaccess',
                                algorithms=['HS256'])
            self.assertEqual(claims['user_id'], user.user_id)
            self.assertEqual(claims['email'], 'jane@example.com')
            self.assertEqual(claims['username'], 'janedoe')
            self.assertEqual(claims['full_name'], 'Jane Doe')

            claims = jwt.decode(issued.refresh_token, 'foorefresh',
                                algorithms=['HS256'])
            self.assertEqual(claims['user_id'], user.user_id)
            self.assertNotIn('email', claims)

            self.assertEqual(users.get_refresh_token(user.user_id),
                             issued.refresh_token)

    def test_issue_overwrites_prior_session(self):
        """A new login invalidates the refresh token of the prior one."""
        with temporary_db():
            user = self._register()
            first = self.store.issue_session_tokens(user.user_id)
            second = self.store.issue_session_tokens(user.user_id)
            self.assertNotEqual(first.refresh_token, second.refresh_token,
                                'Tokens issued in the same second differ')
            with self.assertRaises(InvalidToken):
                self.store.refresh_session(first.refresh_token)

    def test_issue_for_missing_user(self):
        """Issuing tokens for a user who does not exist fails."""
        with temporary_db():
            with self.assertRaises(SessionCreationFailed):
                self.store.issue_session_tokens('nope')

    def test_refresh_rotates(self):
        """A refresh token can be exchanged once; replay is rejected."""
        with temporary_db():
            user = self._register()
            first = self.store.issue_session_tokens(user.user_id)
            second = self.store.refresh_session(first.refresh_token)
            self.assertNotEqual(first.refresh_token, second.refresh_token)
            self.assertEqual(users.get_refresh_token(user.user_id),
                             second.refresh_token)

            with self.assertRaises(InvalidToken):
                self.store.refresh_session(first.refresh_token)
            # The current token is unaffected by the failed replay.
            third = self.store.refresh_session(second.refresh_token)
            self.assertTrue(third.refresh_token)

    def test_refresh_after_logout(self):
        """Once the session is cleared, its refresh token is rejected."""
        with temporary_db():
            user = self._register()
            issued = self.store.issue_session_tokens(user.user_id)
            self.store.clear_session(user.user_id)
            with self.assertRaises(InvalidToken):
                self.store.refresh_session(issued.refresh_token)

    def test_refresh_with_access_token(self):
        """An access token is not accepted as a refresh token."""
        with temporary_db():
            user = self._register()
            issued = self.store.issue_session_tokens(user.user_id)
            with self.assertRaises(InvalidToken):
                self.store.refresh_session(issued.access_token)

    def test_refresh_expired(self):
        """An expired refresh token is rejected, even if it is stored."""
        with temporary_db():
            user = self._register()
            expired = tokens.encode_refresh_token(user.user_id, 'foorefresh',
                                                  -10)
            users.set_refresh_token(user.user_id, expired)
            with self.assertRaises(ExpiredToken):
                self.store.refresh_session(expired)

    def test_refresh_missing(self):
        """A missing refresh token is rejected."""
        with temporary_db():
            with self.assertRaises(MissingToken):
                self.store.refresh_session(None)
            with self.assertRaises(MissingToken):
                self.store.refresh_session('')

    def test_refresh_for_deleted_user(self):
        """A well-signed token for a user who does not exist is rejected."""
        with temporary_db():
            orphan = tokens.encode_refresh_token('nope', 'foorefresh', 60)
            with self.assertRaises(InvalidToken):
                self.store.refresh_session(orphan)

    def test_clear_session_twice(self):
        """Clearing a session is idempotent."""
        with temporary_db():
            user = self._register()
            self.store.issue_session_tokens(user.user_id)
            self.store.clear_session(user.user_id)
            self.assertIsNone(users.get_refresh_token(user.user_id))
            self.store.clear_session(user.user_id)
            self.assertIsNone(users.get_refresh_token(user.user_id))

    def test_load_user(self):
        """An access token resolves to its user."""
        with temporary_db():
            user = self._register()
            issued = self.store.issue_session_tokens(user.user_id)
            self.assertEqual(self.store.load_user(issued.access_token), user)
            with self.assertRaises(InvalidToken):
                self.store.load_user(issued.refresh_token)


class TestSessionStoreFailures(TestCase):
    """Store failures are reported as session failures."""

    @mock.patch(f'{sessions.__name__}.users')
    def test_issue_store_unavailable(self, mock_users):
        """If the token cannot be stored, no session is created."""
        mock_users.NoSuchUser = users.NoSuchUser
        mock_users.StoreUnavailable = users.StoreUnavailable
        mock_users.get_user_by_id.return_value = domain.User(
            user_id='1', username='foo', email='foo@example.com',
            full_name='Foo', avatar='https://media/a.png'
        )
        mock_users.set_refresh_token.side_effect = users.StoreUnavailable
        store = sessions.SessionStore('fooaccess', 'foorefresh')
        with self.assertRaises(SessionCreationFailed):
            store.issue_session_tokens('1')

    @mock.patch(f'{sessions.__name__}.users')
    def test_clear_store_unavailable(self, mock_users):
        """If the token cannot be cleared, the failure is reported."""
        mock_users.StoreUnavailable = users.StoreUnavailable
        mock_users.clear_refresh_token.side_effect = users.StoreUnavailable
        store = sessions.SessionStore('fooaccess', 'foorefresh')
        with self.assertRaises(SessionDeletionFailed):
            store.clear_session('1')


class TestCurrentSession(TestCase):
    """The module-level API uses a store configured from the app."""

    def test_wrappers_use_app_config(self):
        """Tokens are signed with the configured secrets."""
        with temporary_db():
            user = users.register('Jane Doe', 'jane@example.com', 'janedoe',
                                  'foopass', 'https://media/avatar.png')
            issued = sessions.issue_session_tokens(user.user_id)
            jwt.decode(issued.access_token, 'fooaccess', algorithms=['HS256'])
            jwt.decode(issued.refresh_token, 'foorefresh',
                       algorithms=['HS256'])
            self.assertIs(sessions.current_session(),
                          sessions.current_session())
