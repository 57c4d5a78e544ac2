"""Application settings for the moderation API."""

import os

from typing import Literal

from pydantic import BaseModel
from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from moderation_api.config.auth import AuthSettings
from moderation_api.config.database import DatabaseSettings
from moderation_api.config.redis import RedisSettings


class AgentModelConfig(BaseModel):
    """Configuration for the risk classification agent's model."""

    provider: str = Field(
        description="Provider to use for this agent (anthropic, openai, google, groq)"
    )
    model: str = Field(description="Model name to use for this agent")
    max_tokens: int = Field(default=512, description="Maximum tokens for responses")
    temperature: float = Field(default=0.0, description="Temperature (0.0-1.0)")
    api_key: str | None = Field(
        default=None, description="API key for this provider (optional)"
    )


class LLMSettings(BaseSettings):
    """LLM configuration settings."""

    provider: str = Field(
        default="google",
        description="Default provider (anthropic, openai, google, groq)",
    )
    model: str = Field(
        default="gemini-1.5-flash",
        description="Default model name",
    )
    max_tokens: int = Field(
        default=512, description="Maximum tokens for classifier responses"
    )
    temperature: float = Field(
        default=0.0, description="Temperature for classifier responses (0.0-1.0)"
    )

    # Provider-specific API keys
    anthropic_api_key: str = Field(
        default_factory=lambda: os.getenv("ANTHROPIC_API_KEY", ""),
        description="Anthropic API key for Claude models",
    )
    openai_api_key: str = Field(
        default_factory=lambda: os.getenv("OPENAI_API_KEY", ""),
        description="OpenAI API key",
    )
    google_api_key: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_API_KEY", ""),
        description="Google API key for Gemini models",
    )
    groq_api_key: str = Field(
        default_factory=lambda: os.getenv("GROQ_API_KEY", ""),
        description="Groq API key",
    )

    model_config = SettingsConfigDict(env_prefix="LLM_", case_sensitive=False)

    def get_provider_api_key(self, provider: str) -> str:
        """Get API key for a specific provider."""
        provider_keys = {
            "anthropic": self.anthropic_api_key,
            "openai": self.openai_api_key,
            "google": self.google_api_key,
            "groq": self.groq_api_key,
        }
        return provider_keys.get(provider, "")

    def get_classifier_config(self) -> AgentModelConfig:
        """Get configuration for the risk classification agent."""
        return AgentModelConfig(
            provider=self.provider,
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            api_key=self.get_provider_api_key(self.provider),
        )


class ModerationSettings(BaseSettings):
    """Moderation pipeline configuration settings."""

    classifier_backend: Literal["llm", "perspective", "none"] = Field(
        default="llm", description="Text-risk classifier implementation"
    )
    classifier_timeout: float = Field(
        default=10.0, description="Timeout for a single classifier call in seconds"
    )

    # Perspective API
    perspective_api_key: str = Field(
        default_factory=lambda: os.getenv("PERSPECTIVE_API_KEY", ""),
        description="Perspective API key",
    )
    perspective_api_url: str = Field(
        default="https://commentanalyzer.googleapis.com/v1alpha1/comments:analyze",
        description="Perspective API analyze endpoint",
    )
    perspective_flag_threshold: float = Field(
        default=0.7, description="Attribute score at which content counts as high risk"
    )

    # Enforcement
    warning_expiry_days: int = Field(
        default=30, description="Days before a moderation warning expires"
    )
    default_suspension_days: int = Field(
        default=7, description="Suspension length when the reviewer gives none"
    )

    model_config = SettingsConfigDict(env_prefix="MODERATION_", case_sensitive=False)


class AppSettings(BaseSettings):
    """Main application settings."""

    # App info
    app_name: str = Field(default="Moderation API", description="Application name")
    version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Allowed CORS origins",
    )

    # Component settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    moderation: ModerationSettings = Field(default_factory=ModerationSettings)

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )


# Global settings instance
_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    """Get application settings (singleton pattern)."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = AppSettings()
    return _settings


def get_llm_settings() -> LLMSettings:
    """Get LLM settings."""
    return get_settings().llm


def get_moderation_settings() -> ModerationSettings:
    """Get moderation pipeline settings."""
    return get_settings().moderation
