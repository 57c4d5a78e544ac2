"""JWT verification for bearer credentials."""

from datetime import UTC
from datetime import datetime
from datetime import timedelta
from uuid import UUID

import jwt

from jwt import InvalidTokenError

from moderation_api.auth.models import TokenClaims
from moderation_api.config.auth import AuthSettings
from moderation_api.config.auth import get_auth_settings
from moderation_api.database.models.base import UserRole


class JWTService:
    """JWT token verification service."""

    def __init__(self, settings: AuthSettings | None = None):
        self._settings = settings or get_auth_settings()

    def create_access_token(
        self,
        user_id: UUID,
        role: UserRole = UserRole.USER,
        lifetime: int | None = None,
    ) -> str:
        """Issue an access token.

        Tokens normally come from the identity provider; this is used by
        scripts and tests that share its signing key.
        """
        if lifetime is None:
            lifetime = self._settings.access_token_lifetime

        now = datetime.now(UTC)
        expires_at = now + timedelta(seconds=lifetime)
        claims = TokenClaims(
            sub=user_id,
            role=role,
            iss=self._settings.jwt_issuer,
            aud=self._settings.jwt_audience,
            iat=int(now.timestamp()),
            exp=int(expires_at.timestamp()),
        )
        return jwt.encode(
            claims.model_dump(mode="json"),
            self._settings.jwt_secret_key,
            algorithm=self._settings.jwt_algorithm,
        )

    def decode_token(self, token: str) -> TokenClaims | None:
        """Decode and validate a JWT token, or return None if it is invalid."""
        try:
            claims = jwt.decode(
                token,
                self._settings.jwt_secret_key,
                algorithms=[self._settings.jwt_algorithm],
                audience=self._settings.jwt_audience,
                issuer=self._settings.jwt_issuer,
                leeway=self._settings.leeway_seconds,
            )
            return TokenClaims(**claims)
        except (InvalidTokenError, ValueError):
            return None
