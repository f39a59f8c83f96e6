"""Tests for :mod:`user_service.services.tokens`."""

from unittest import TestCase
from datetime import timedelta

import jwt

from user_service.exceptions import InvalidToken
from user_service.services.tokens import TokenCodec


class TestTokenCodec(TestCase):
    """:class:`.TokenCodec` signs and verifies claims."""

    def setUp(self) -> None:
        """Create a codec with a one-hour lifetime."""
        self.codec = TokenCodec('foosecret', timedelta(hours=1))

    def test_sign_and_verify(self) -> None:
        """Verified claims match the signed claims."""
        token = self.codec.sign({'id': 4, 'is_admin': False})
        claims = self.codec.verify(token)
        self.assertEqual(claims['id'], 4)
        self.assertFalse(claims['is_admin'])
        self.assertIn('iat', claims)
        self.assertEqual(claims['exp'] - claims['iat'], 3600)

    def test_no_expiry(self) -> None:
        """Without a lifetime, tokens have no expiry."""
        codec = TokenCodec('foosecret')
        claims = codec.verify(codec.sign({'id': 1, 'is_admin': True}))
        self.assertNotIn('exp', claims)

    def test_expired(self) -> None:
        """Expired tokens are not valid."""
        codec = TokenCodec('foosecret', timedelta(seconds=-10))
        token = codec.sign({'id': 1, 'is_admin': False})
        with self.assertRaises(InvalidToken):
            self.codec.verify(token)

    def test_wrong_secret(self) -> None:
        """Tokens signed with another secret are not valid."""
        token = TokenCodec('othersecret').sign({'id': 1, 'is_admin': True})
        with self.assertRaises(InvalidToken):
            self.codec.verify(token)

    def test_tampered(self) -> None:
        """Changing the payload invalidates the signature."""
        token = self.codec.sign({'id': 1, 'is_admin': False})
        header, _, signature = token.split('.')
        forged = jwt.encode({'id': 1, 'is_admin': True}, 'x',
                            algorithm='HS256').split('.')[1]
        with self.assertRaises(InvalidToken):
            self.codec.verify('.'.join([header, forged, signature]))

    def test_garbage(self) -> None:
        """Malformed tokens are not valid."""
        for token in ('', 'foo', 'a.b.c'):
            with self.assertRaises(InvalidToken):
                self.codec.verify(token)

    def test_unsigned(self) -> None:
        """Tokens using the ``none`` algorithm are rejected."""
        token = jwt.encode({'id': 1, 'is_admin': True}, None, algorithm='none')
        with self.assertRaises(InvalidToken):
            self.codec.verify(token)
