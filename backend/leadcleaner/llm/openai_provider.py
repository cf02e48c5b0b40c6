from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import openai
from openai import AsyncOpenAI

from leadcleaner.llm.base import LLMProvider
from leadcleaner.utils.exceptions import TransportError

if TYPE_CHECKING:
    from leadcleaner.config import Settings

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._model = settings.openai_model
        # Retries are the caller's decision
        self.client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.llm_timeout_seconds,
            max_retries=0,
        )

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def model_name(self) -> str:
        return self._model

    async def complete_json(
        self, system_prompt: str, user_prompt: str, response_schema: dict[str, Any]
    ) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self._model,
                temperature=self._settings.llm_temperature,
                max_tokens=self._settings.llm_max_output_tokens,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": "extracted_lead",
                        "strict": True,
                        "schema": response_schema,
                    },
                },
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except openai.APIError as e:
            logger.warning("OpenAI request failed: %s", e)
            raise TransportError(f"OpenAI request failed: {e}", provider="openai") from e
        return response.choices[0].message.content or ""
