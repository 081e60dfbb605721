"""
Tests for JWT issuance / verification and password hashing.
"""

from datetime import timedelta

import pytest
from jose import ExpiredSignatureError, JWTError

from ehrcloud.core.security.hashing import hash_password, needs_update, verify_password
from ehrcloud.core.security.jwt import (
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    verify_token,
)

from conftest import make_settings


@pytest.fixture
def settings():
    return make_settings()


class TestTokens:

    def test_access_round_trip(self, settings):
        token = create_access_token({"sub": "7", "role": "doctor", "tenant_id": 3}, settings)
        payload = verify_token(token, settings)
        assert payload["sub"] == "7"
        assert payload["tenant_id"] == 3
        assert payload["type"] == "access"
        assert payload["iss"] == settings.JWT_ISSUER

    def test_refresh_uses_its_own_secret(self, settings):
        token = create_refresh_token({"sub": "7", "tenant_id": 3}, settings)
        with pytest.raises(JWTError):
            verify_token(token, settings)
        assert verify_token(token, settings, token_type=REFRESH_TOKEN_TYPE)["type"] == "refresh"

    def test_expired(self, settings):
        token = create_access_token({"sub": "7"}, settings, expires_delta=timedelta(seconds=-1))
        with pytest.raises(ExpiredSignatureError):
            verify_token(token, settings)

    def test_other_issuer(self, settings):
        token = create_access_token({"sub": "7"}, make_settings(JWT_ISSUER="someone-else"))
        with pytest.raises(JWTError):
            verify_token(token, settings)

    def test_subject_required(self, settings):
        token = create_access_token({"role": "doctor"}, settings)
        with pytest.raises(JWTError):
            verify_token(token, settings)

    def test_garbage(self, settings):
        with pytest.raises(JWTError):
            verify_token("not.a.token", settings)


class TestPasswords:

    def test_hash_and_verify(self):
        hashed = hash_password("Secret123", rounds=4)
        assert hashed != "Secret123"
        assert verify_password("Secret123", hashed)
        assert not verify_password("secret123", hashed)

    def test_malformed_hash_is_a_mismatch(self):
        assert verify_password("Secret123", "not-a-bcrypt-hash") is False

    def test_needs_update(self):
        assert needs_update(hash_password("Secret123", rounds=4))
        assert needs_update("garbage")
