# tests/services/test_passwords_and_tokens.py
"""Tests for password hashing and bearer token helpers."""

import pytest
from jose import jwt

from neoboard.core.errors import Unauthorized
from neoboard.core.passwords import hash_password, verify_password
from neoboard.core.security import create_access_token, decode_access_token
from neoboard.core.settings import settings


class TestPasswords:
    """Argon2 hashing."""

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("hunter22")
        assert hashed != "hunter22"
        assert hashed.startswith("$argon2")

    def test_verify_roundtrip(self):
        hashed = hash_password("hunter22")
        assert verify_password("hunter22", hashed) is True
        assert verify_password("hunter23", hashed) is False

    def test_missing_or_malformed_hash(self):
        """Anonymous users have no hash and can never log in with a password."""
        assert verify_password("anything", None) is False
        assert verify_password("anything", "") is False
        assert verify_password("anything", "not-a-hash") is False


class TestTokens:
    """JWT issuing and verification."""

    def test_token_carries_user_id(self):
        token = create_access_token(42)
        claims = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
        assert claims["sub"] == "42"
        assert claims["exp"] > claims["iat"]
        assert decode_access_token(token) == 42

    def test_missing_subject(self):
        token = jwt.encode({"foo": "bar"}, settings.secret_key, algorithm=settings.jwt_algorithm)
        with pytest.raises(Unauthorized, match="Invalid token"):
            decode_access_token(token)

    def test_garbage(self):
        with pytest.raises(Unauthorized):
            decode_access_token("a.b.c")
