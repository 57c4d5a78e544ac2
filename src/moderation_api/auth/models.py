"""Authentication models for the moderation API."""

from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from moderation_api.database.models.base import UserRole


class TokenClaims(BaseModel):
    """JWT token claims model."""

    sub: UUID = Field(description="User UUID")
    role: UserRole = Field(default=UserRole.USER, description="User role")
    iss: str = Field(description="Token issuer")
    aud: str = Field(description="Token audience")
    iat: int = Field(description="Issued at timestamp")
    exp: int = Field(description="Expiration timestamp")

    model_config = ConfigDict(use_enum_values=True)


class Identity(BaseModel):
    """Verified caller identity."""

    user_pk: UUID
    role: UserRole = UserRole.USER

    model_config = ConfigDict(use_enum_values=True)
