from __future__ import annotations

from typing import TYPE_CHECKING

from leadcleaner.utils.exceptions import ConfigurationError

if TYPE_CHECKING:
    from leadcleaner.config import Settings
    from leadcleaner.llm.base import LLMProvider


def create_llm_provider(settings: Settings) -> LLMProvider:
    """Build the provider selected by ``settings.llm_provider``.

    Raises ConfigurationError when the provider is unknown or has no API key.
    """
    if not settings.api_key_for_provider():
        raise ConfigurationError(
            f"No API key configured for LLM provider '{settings.llm_provider}'"
        )
    if settings.llm_provider == "gemini":
        from leadcleaner.llm.gemini_provider import GeminiProvider

        return GeminiProvider(settings)
    if settings.llm_provider == "openai":
        from leadcleaner.llm.openai_provider import OpenAIProvider

        return OpenAIProvider(settings)
    if settings.llm_provider == "claude":
        from leadcleaner.llm.claude_provider import ClaudeProvider

        return ClaudeProvider(settings)
    raise ConfigurationError(f"Unknown LLM provider: {settings.llm_provider}")
