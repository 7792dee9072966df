"""Unit tests for core/security.py (no database required)."""

import os
from datetime import timedelta

import pytest

# Ensure settings can be loaded without .env
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-unit-tests")

from jose import JWTError

from motorskills.core.security import create_access_token, decode_token


class TestJWT:
    def test_access_token_roundtrip(self):
        token = create_access_token({"sub": "user-123", "email": "a@test.example"})
        payload = decode_token(token)
        assert payload["sub"] == "user-123"
        assert payload["email"] == "a@test.example"
        assert payload["type"] == "access"

    def test_expired_token_rejected(self):
        token = create_access_token({"sub": "user-123"}, expires_delta=timedelta(seconds=-1))
        with pytest.raises(JWTError):
            decode_token(token)

    def test_tampered_token_rejected(self):
        token = create_access_token({"sub": "user-123"})
        with pytest.raises(JWTError):
            decode_token(token[:-2] + ("aa" if token[-2:] != "aa" else "bb"))

    def test_garbage_rejected(self):
        with pytest.raises(JWTError):
            decode_token("not-a-jwt")
