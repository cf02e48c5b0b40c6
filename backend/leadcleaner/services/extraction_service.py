from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from leadcleaner.llm.prompts.extraction import (
    EXTRACTION_SYSTEM_PROMPT,
    build_extraction_user_prompt,
)
from leadcleaner.llm.prompts.synonyms import detect_currency
from leadcleaner.schemas.lead import REQUIRED_FIELDS, ExtractedLead, lead_response_schema
from leadcleaner.utils.exceptions import (
    ConfigurationError,
    ResponseFormatError,
    TransportError,
)

if TYPE_CHECKING:
    from leadcleaner.config import Settings
    from leadcleaner.llm.base import LLMProvider

logger = logging.getLogger(__name__)

_SCHEMA_DIALECTS = {"gemini": "openapi", "openai": "json_schema", "claude": "json_schema"}


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        logger.warning("Stripping markdown code fence from LLM response")
        text = text.split("\n", 1)[1] if "\n" in text else ""
        text = text.rsplit("```", 1)[0]
    return text.strip()


def decode_lead(raw_text: str | None) -> ExtractedLead:
    """Decode provider output into an ExtractedLead.

    Raises ResponseFormatError, carrying the untouched payload, when the text
    is empty, is not a JSON object, or fails validation.
    """
    if raw_text is None or not raw_text.strip():
        raise ResponseFormatError("Empty response from LLM provider", raw_payload=raw_text)

    try:
        data = json.loads(_strip_code_fence(raw_text))
    except json.JSONDecodeError as e:
        raise ResponseFormatError(
            f"Response is not valid JSON: {e}", raw_payload=raw_text
        ) from e

    if not isinstance(data, dict):
        raise ResponseFormatError(
            f"Expected a JSON object, got {type(data).__name__}", raw_payload=raw_text
        )

    missing = [name for name in REQUIRED_FIELDS if data.get(name) is None]
    if missing:
        raise ResponseFormatError(
            f"Response is missing required fields: {', '.join(missing)}",
            raw_payload=raw_text,
        )

    extra = set(data) - set(ExtractedLead.model_fields)
    if extra:
        logger.warning("Ignoring unexpected keys in LLM response: %s", sorted(extra))

    try:
        return ExtractedLead.model_validate(data)
    except ValidationError as e:
        raise ResponseFormatError(
            f"Response does not match the lead schema: {e}", raw_payload=raw_text
        ) from e


class LeadExtractionClient:
    """Turns one raw classified message into one ExtractedLead.

    Each ``extract`` call makes exactly one provider request, with no caching
    and no retries.  The provider is built lazily from ``settings`` unless one
    is injected.
    """

    def __init__(self, settings: Settings, provider: LLMProvider | None = None) -> None:
        self._settings = settings
        self._provider = provider

    def _get_provider(self) -> LLMProvider:
        if not self._settings.api_key_for_provider():
            raise ConfigurationError(
                f"No API key configured for LLM provider '{self._settings.llm_provider}'"
            )
        if self._provider is None:
            from leadcleaner.llm.factory import create_llm_provider

            self._provider = create_llm_provider(self._settings)
        return self._provider

    async def extract(self, message: str, market_hint: str | None = None) -> ExtractedLead:
        if not message or not message.strip():
            raise ValueError("message must not be empty")

        provider = self._get_provider()
        dialect = _SCHEMA_DIALECTS.get(provider.provider_name, "json_schema")
        user_prompt = build_extraction_user_prompt(message, market_hint)

        try:
            raw_text = await asyncio.wait_for(
                provider.complete_json(
                    EXTRACTION_SYSTEM_PROMPT, user_prompt, lead_response_schema(dialect)
                ),
                timeout=self._settings.llm_timeout_seconds,
            )
        except TimeoutError as e:
            logger.warning(
                "LLM request to %s timed out after %.0fs",
                provider.provider_name,
                self._settings.llm_timeout_seconds,
            )
            raise TransportError(
                f"LLM request timed out after {self._settings.llm_timeout_seconds}s",
                provider=provider.provider_name,
            ) from e

        logger.debug("Raw %s response: %s", provider.provider_name, raw_text)
        try:
            lead = decode_lead(raw_text)
        except ResponseFormatError:
            logger.exception(
                "Unparseable response from %s/%s", provider.provider_name, provider.model_name
            )
            raise

        mentioned = detect_currency(message)
        if lead.budget_currency is None and mentioned:
            logger.warning(
                "Message mentions %s but %s returned no budget_currency",
                mentioned,
                provider.provider_name,
            )

        logger.info(
            "Extracted lead via %s/%s: intent=%s property_type=%s",
            provider.provider_name,
            provider.model_name,
            lead.intent,
            lead.property_type,
        )
        return lead
