"""Pytest configuration and fixtures for tests."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from leadcleaner.config import Settings

DUBAI_MARINA_MESSAGE = (
    "Looking for 2bhk in Dubai Marina. Budget around 85k. Family only. "
    "Need parking. Move in next month."
)

# What a contract-conformant model returns for DUBAI_MARINA_MESSAGE with hint "UAE"
DUBAI_MARINA_RESPONSE = {
    "intent": "rent",
    "role": "tenant",
    "property_type": "apartment",
    "bedrooms": 2,
    "bathrooms": None,
    "location": "Dubai Marina",
    "furnished": None,
    "budget_min": 85000,
    "budget_max": 85000,
    "budget_currency": "AED",
    "parking_required": True,
    "family_or_bachelor": "family",
    "move_in_date": "next month",
    "contact": None,
    "notes": None,
    "short_summary": (
        "Tenant looking to rent a 2BR apartment in Dubai Marina, budget around "
        "85k AED, family, needs parking, move-in next month."
    ),
}


@pytest.fixture
def settings() -> Settings:
    """Settings with a Gemini key and no .env lookup."""
    return Settings(
        _env_file=None,
        llm_provider="gemini",
        gemini_api_key="test-gemini-key",
        openai_api_key="test-openai-key",
        anthropic_api_key="test-anthropic-key",
    )


@pytest.fixture
def unconfigured_settings() -> Settings:
    return Settings(
        _env_file=None,
        llm_provider="gemini",
        gemini_api_key="",
        openai_api_key="",
        anthropic_api_key="",
    )


def make_provider(response_text: str | None = None, **kwargs) -> MagicMock:
    """Create a mock LLMProvider whose complete_json returns ``response_text``."""
    provider = MagicMock()
    provider.provider_name = kwargs.pop("provider_name", "gemini")
    provider.model_name = kwargs.pop("model_name", "gemini-1.5-flash")
    if "side_effect" in kwargs:
        provider.complete_json = AsyncMock(side_effect=kwargs.pop("side_effect"))
    else:
        provider.complete_json = AsyncMock(return_value=response_text)
    return provider


@pytest.fixture
def dubai_response_text() -> str:
    return json.dumps(DUBAI_MARINA_RESPONSE)
