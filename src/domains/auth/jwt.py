# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""JWT bearer token verification using python-jose.

Tokens are issued by the external Authentication service. This module only
decodes and validates them and extracts the caller's identity.

Example:
    >>> from src.core.config import get_settings
    >>> jwt_manager = JWTManager(get_settings().jwt)
    >>> claims = jwt_manager.decode_token(token)
    >>> claims.display_name
    'Jane Doe'
"""

import logging
from typing import Any

from jose import ExpiredSignatureError, jwt
from pydantic import BaseModel

from src.core.config.settings import JWTSettings

logger = logging.getLogger(__name__)

# Claim names the Authentication service may use for the display name and
# roles, including the long-form identity claim URIs.
NAME_CLAIMS = (
    "name",
    "unique_name",
    "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/name",
)
ROLE_CLAIMS = (
    "role",
    "roles",
    "http://schemas.microsoft.com/ws/2008/06/identity/claims/role",
)


class TokenPayload(BaseModel):
    """Verified JWT claims.

    Attributes:
        sub: Subject (user ID).
        name: Display name, if the token carries one.
        email: E-mail address, if present.
        roles: Role names.
        exp: Expiration timestamp.
        iat: Issued at timestamp.
        jti: JWT ID.
    """

    sub: str
    name: str | None = None
    email: str | None = None
    roles: list[str] = []
    exp: int
    iat: int | None = None
    jti: str | None = None

    @property
    def display_name(self) -> str:
        """Name used as the audit actor, falling back to the subject."""
        return self.name or self.sub


class JWTError(Exception):
    """Base exception for JWT operations."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid."""

    pass


def _first_claim(payload: dict[str, Any], names: tuple[str, ...]) -> Any:
    for claim in names:
        value = payload.get(claim)
        if value:
            return value
    return None


class JWTManager:
    """JWT token validation manager.

    Attributes:
        _settings: JWT configuration settings.
    """

    def __init__(self, settings: JWTSettings) -> None:
        self._settings = settings

    def decode_token(self, token: str) -> TokenPayload:
        """Decode and validate a JWT token.

        Audience and issuer are checked only when configured.

        Args:
            token: JWT token string.

        Returns:
            TokenPayload with decoded claims.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid.
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key.get_secret_value(),
                algorithms=[self._settings.algorithm],
                audience=self._settings.audience,
                issuer=self._settings.issuer,
                options={"verify_aud": self._settings.audience is not None},
            )

            roles = _first_claim(payload, ROLE_CLAIMS) or []
            if isinstance(roles, str):
                roles = [roles]

            return TokenPayload(
                sub=payload["sub"],
                name=_first_claim(payload, NAME_CLAIMS),
                email=payload.get("email"),
                roles=roles,
                exp=payload["exp"],
                iat=payload.get("iat"),
                jti=payload.get("jti"),
            )

        except ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except Exception as e:
            logger.warning("Token decode failed: %s", str(e))
            raise InvalidTokenError(f"Invalid token: {str(e)}")

    def verify_token(self, token: str) -> bool:
        """Verify if a token is valid.

        Returns:
            True if token is valid, False otherwise.
        """
        try:
            self.decode_token(token)
            return True
        except (TokenExpiredError, InvalidTokenError):
            return False
