"""Tests for the ProviderFactory service."""

from unittest.mock import MagicMock
from unittest.mock import patch

import pytest

from moderation_api.config.settings import AgentModelConfig
from moderation_api.config.settings import LLMSettings
from moderation_api.services.provider_factory import ProviderFactory


def _config(provider: str, model: str, api_key: str = "test-key") -> AgentModelConfig:
    return AgentModelConfig(
        provider=provider,
        model=model,
        max_tokens=512,
        temperature=0.0,
        api_key=api_key,
    )


class TestProviderFactory:
    """Test the ProviderFactory service."""

    def test_supported_providers(self):
        """Test that all expected providers are supported."""
        factory = ProviderFactory(MagicMock())
        assert set(factory.get_supported_providers()) == {
            "anthropic",
            "openai",
            "google",
            "groq",
        }

    @pytest.mark.parametrize(
        ("provider", "model", "provider_cls", "model_cls"),
        [
            ("anthropic", "claude-3-5-haiku-latest", "AnthropicProvider", "AnthropicModel"),
            ("openai", "gpt-4o-mini", "OpenAIProvider", "OpenAIChatModel"),
            ("google", "gemini-1.5-flash", "GoogleProvider", "GoogleModel"),
            ("groq", "llama-3.1-8b-instant", "GroqProvider", "GroqModel"),
        ],
    )
    def test_create_model(self, provider, model, provider_cls, model_cls):
        """Test creating each provider and model."""
        module = "moderation_api.services.provider_factory"
        with (
            patch(f"{module}.{provider_cls}") as mock_provider,
            patch(f"{module}.{model_cls}") as mock_model,
        ):
            factory = ProviderFactory(MagicMock())
            result = factory.create_model(_config(provider, model))

            mock_provider.assert_called_once_with(api_key="test-key")
            mock_model.assert_called_once_with(
                model_name=model, provider=mock_provider.return_value
            )
            assert result == mock_model.return_value

    def test_api_key_from_settings(self):
        """Test the provider key falls back to the settings."""
        settings = LLMSettings(provider="groq", groq_api_key="settings-groq-key")
        with (
            patch("moderation_api.services.provider_factory.GroqProvider") as mock_provider,
            patch("moderation_api.services.provider_factory.GroqModel"),
        ):
            factory = ProviderFactory(settings)
            factory.create_model(_config("groq", "llama-3.1-8b-instant", api_key=""))

            mock_provider.assert_called_once_with(api_key="settings-groq-key")

    def test_create_model_unsupported_provider(self):
        """Test that creating unsupported provider raises ValueError."""
        factory = ProviderFactory(MagicMock())
        with pytest.raises(ValueError, match="Unsupported provider: unsupported"):
            factory.create_model(_config("unsupported", "some-model"))

    def test_validate_provider_config(self):
        """Test configuration validation."""
        settings = LLMSettings(anthropic_api_key="")
        factory = ProviderFactory(settings)

        assert factory.validate_provider_config(_config("anthropic", "m")) is True
        assert (
            factory.validate_provider_config(_config("anthropic", "m", api_key=""))
            is False
        )
        assert factory.validate_provider_config(_config("unsupported", "m")) is False
