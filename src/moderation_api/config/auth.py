"""Identity verification configuration for the moderation API."""

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class AuthSettings(BaseSettings):
    """Settings for verifying bearer credentials issued by the identity provider."""

    jwt_secret_key: str = Field(default="", description="JWT signing secret key")
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    jwt_issuer: str = Field(default="moderation-api", description="JWT issuer")
    jwt_audience: str = Field(default="moderation-api", description="JWT audience")
    access_token_lifetime: int = Field(
        default=3600, description="Lifetime of locally issued tokens (1 hour)"
    )
    leeway_seconds: int = Field(
        default=30, description="Clock skew tolerated when validating expiry"
    )

    model_config = SettingsConfigDict(env_prefix="AUTH_", case_sensitive=False)


def get_auth_settings() -> AuthSettings:
    """Get authentication settings instance."""
    from moderation_api.config.settings import get_settings

    return get_settings().auth
