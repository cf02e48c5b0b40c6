from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from google import genai
from google.genai import errors, types

from leadcleaner.llm.base import LLMProvider
from leadcleaner.utils.exceptions import TransportError

if TYPE_CHECKING:
    from leadcleaner.config import Settings

logger = logging.getLogger(__name__)


class GeminiProvider(LLMProvider):
    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._model = settings.gemini_model
        self.client = genai.Client(
            api_key=settings.gemini_api_key,
            # HttpOptions takes milliseconds
            http_options=types.HttpOptions(
                timeout=int(settings.llm_timeout_seconds * 1000)
            ),
        )

    @property
    def provider_name(self) -> str:
        return "gemini"

    @property
    def model_name(self) -> str:
        return self._model

    async def complete_json(
        self, system_prompt: str, user_prompt: str, response_schema: dict[str, Any]
    ) -> str:
        try:
            response = await self.client.aio.models.generate_content(
                model=self._model,
                contents=user_prompt,
                config=types.GenerateContentConfig(
                    system_instruction=system_prompt,
                    response_mime_type="application/json",
                    response_schema=response_schema,
                    temperature=self._settings.llm_temperature,
                    max_output_tokens=self._settings.llm_max_output_tokens,
                ),
            )
        except (errors.APIError, httpx.HTTPError) as e:
            logger.warning("Gemini request failed: %s", e)
            raise TransportError(f"Gemini request failed: {e}", provider="gemini") from e
        return response.text or ""
