"""Tests for :mod:`accountstore.passwords`."""

import asyncio
from unittest import TestCase

from hypothesis import given, settings
from hypothesis import strategies as st

from .. import passwords


def _hash(password: str) -> str:
    return asyncio.run(passwords.hash_password(password, rounds=4))


def _check(password: str, encrypted: str) -> bool:
    return asyncio.run(passwords.check_password(password, encrypted))


class TestCheckPassword(TestCase):
    """Tests passwords."""

    @given(st.text(max_size=18))
    @settings(max_examples=50, deadline=None)
    def test_check_passwords_successful(self, passw):
        encrypted = _hash(passw)
        self.assertNotEqual(encrypted, passw)
        self.assertTrue(_check(passw, encrypted),
                        f"should work for password '{passw}'")

    @given(st.text(max_size=18), st.text(max_size=18))
    @settings(max_examples=50, deadline=None)
    def test_check_passwords_fuzz(self, passw, fuzzpw):
        encrypted = _hash(passw)
        self.assertEqual(_check(fuzzpw, encrypted), passw == fuzzpw)

    def test_hashes_are_salted(self):
        self.assertNotEqual(_hash('Secret123'), _hash('Secret123'))

    def test_work_factor(self):
        encrypted = asyncio.run(passwords.hash_password('Secret123'))
        self.assertTrue(encrypted.startswith('$2b$10$'))

    def test_long_password(self):
        """Only the first 72 bytes of a password are significant."""
        prefix = 'x' * passwords.MAX_PASSWORD_BYTES
        encrypted = _hash(prefix + 'abc')
        self.assertTrue(_check(prefix + 'xyz', encrypted))
        self.assertFalse(_check(prefix[:-1], encrypted))

    def test_malformed_hash(self):
        """A corrupt stored hash never authenticates."""
        self.assertFalse(_check('Secret123', 'not-a-bcrypt-hash'))
        self.assertFalse(_check('Secret123', ''))
