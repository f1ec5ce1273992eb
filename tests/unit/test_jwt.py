# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for JWT token verification.

Tokens are signed here with python-jose the way the Authentication service
issues them.
"""

import time
from typing import Any
from uuid import uuid4

import pytest
from jose import jwt
from pydantic import SecretStr

from src.core.config.settings import JWTSettings
from src.domains.auth.jwt import (
    InvalidTokenError,
    JWTManager,
    TokenExpiredError,
)

SECRET = "test-secret-key-for-jwt-testing"


def _encode(claims: dict[str, Any], secret: str = SECRET) -> str:
    now = int(time.time())
    payload = {"sub": str(uuid4()), "iat": now, "exp": now + 1800}
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def jwt_settings() -> JWTSettings:
    """Create JWT settings with a test secret."""
    return JWTSettings(secret_key=SecretStr(SECRET), algorithm="HS256")


@pytest.fixture
def jwt_manager(jwt_settings: JWTSettings) -> JWTManager:
    """Create JWT manager with test settings."""
    return JWTManager(jwt_settings)


class TestJWTManagerDecode:
    """Tests for decoding tokens."""

    def test_decode_name_claim(self, jwt_manager: JWTManager) -> None:
        """Test the name claim becomes the display name."""
        token = _encode({"name": "Jane Doe", "email": "jane@example.com"})

        payload = jwt_manager.decode_token(token)

        assert payload.name == "Jane Doe"
        assert payload.display_name == "Jane Doe"
        assert payload.email == "jane@example.com"
        assert payload.roles == []

    def test_decode_unique_name_claim(self, jwt_manager: JWTManager) -> None:
        """Test unique_name is used when name is absent."""
        token = _encode({"unique_name": "jdoe"})

        assert jwt_manager.decode_token(token).name == "jdoe"

    def test_decode_identity_uri_claims(self, jwt_manager: JWTManager) -> None:
        """Test long-form identity claim URIs are understood."""
        token = _encode({
            "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/name": "Jane Doe",
            "http://schemas.microsoft.com/ws/2008/06/identity/claims/role": "Admin",
        })

        payload = jwt_manager.decode_token(token)

        assert payload.name == "Jane Doe"
        assert payload.roles == ["Admin"]

    def test_decode_roles_list(self, jwt_manager: JWTManager) -> None:
        """Test a list of roles is kept as is."""
        token = _encode({"roles": ["Admin", "Instructor"]})

        assert jwt_manager.decode_token(token).roles == ["Admin", "Instructor"]

    def test_display_name_falls_back_to_subject(self, jwt_manager: JWTManager) -> None:
        """Test the subject is the display name when no name claim exists."""
        token = _encode({"sub": "user-42"})

        assert jwt_manager.decode_token(token).display_name == "user-42"

    def test_expired_token_raises(self, jwt_manager: JWTManager) -> None:
        """Test an expired token raises TokenExpiredError."""
        past = int(time.time()) - 3600
        token = _encode({"iat": past - 60, "exp": past})

        with pytest.raises(TokenExpiredError):
            jwt_manager.decode_token(token)

    def test_wrong_secret_raises(self, jwt_manager: JWTManager) -> None:
        """Test a token signed with another secret is rejected."""
        token = _encode({"name": "Mallory"}, secret="some-other-secret")

        with pytest.raises(InvalidTokenError):
            jwt_manager.decode_token(token)

    def test_garbage_token_raises(self, jwt_manager: JWTManager) -> None:
        """Test a malformed token is rejected."""
        with pytest.raises(InvalidTokenError):
            jwt_manager.decode_token("not-a-jwt")

    def test_audience_ignored_when_not_configured(self, jwt_manager: JWTManager) -> None:
        """Test an audience claim is accepted when none is configured."""
        token = _encode({"aud": "some-api"})

        assert jwt_manager.verify_token(token) is True

    def test_audience_checked_when_configured(self) -> None:
        """Test a mismatched audience is rejected when configured."""
        manager = JWTManager(
            JWTSettings(secret_key=SecretStr(SECRET), audience="course-service")
        )

        assert manager.verify_token(_encode({"aud": "course-service"})) is True
        assert manager.verify_token(_encode({"aud": "billing-service"})) is False
