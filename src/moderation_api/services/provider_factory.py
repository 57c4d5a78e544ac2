"""Provider factory for creating the classifier's AI model."""

import logging

from typing import Any

from pydantic_ai.models.anthropic import AnthropicModel
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.models.groq import GroqModel
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.anthropic import AnthropicProvider
from pydantic_ai.providers.google import GoogleProvider
from pydantic_ai.providers.groq import GroqProvider
from pydantic_ai.providers.openai import OpenAIProvider

from moderation_api.config.settings import AgentModelConfig
from moderation_api.config.settings import LLMSettings

logger = logging.getLogger(__name__)


class ProviderFactory:
    """Factory for creating AI providers and models."""

    def __init__(self, settings: LLMSettings):
        """Initialize the provider factory with settings."""
        self.settings = settings

    def create_provider(self, provider_name: str, config: AgentModelConfig) -> Any:
        """Create a provider instance based on the provider name and configuration."""
        provider_name = provider_name.lower()
        api_key = config.api_key or self.settings.get_provider_api_key(provider_name)

        if provider_name == "anthropic":
            return AnthropicProvider(api_key=api_key)

        if provider_name == "openai":
            return OpenAIProvider(api_key=api_key)

        if provider_name == "google":
            return GoogleProvider(api_key=api_key)

        if provider_name == "groq":
            return GroqProvider(api_key=api_key)

        raise ValueError(f"Unsupported provider: {provider_name}")

    def create_model(self, config: AgentModelConfig) -> Any:
        """Create a model instance based on the configuration."""
        provider = self.create_provider(config.provider, config)
        provider_name = config.provider.lower()

        try:
            if provider_name == "anthropic":
                return AnthropicModel(model_name=config.model, provider=provider)

            if provider_name == "openai":
                return OpenAIChatModel(model_name=config.model, provider=provider)

            if provider_name == "google":
                return GoogleModel(model_name=config.model, provider=provider)

            if provider_name == "groq":
                return GroqModel(model_name=config.model, provider=provider)

            raise ValueError(
                f"Unsupported provider for model creation: {provider_name}"
            )

        except Exception as e:
            logger.error(
                f"Failed to create model {config.model} with provider {provider_name}: {e}"
            )
            raise

    def get_supported_providers(self) -> list[str]:
        """Get list of supported provider names."""
        return ["anthropic", "openai", "google", "groq"]

    def validate_provider_config(self, config: AgentModelConfig) -> bool:
        """Validate that a provider configuration has an API key."""
        provider_name = config.provider.lower()
        if provider_name not in self.get_supported_providers():
            return False
        return bool(config.api_key or self.settings.get_provider_api_key(provider_name))
