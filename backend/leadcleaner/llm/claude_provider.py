from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import anthropic

from leadcleaner.llm.base import LLMProvider
from leadcleaner.utils.exceptions import TransportError

if TYPE_CHECKING:
    from leadcleaner.config import Settings

logger = logging.getLogger(__name__)


class ClaudeProvider(LLMProvider):
    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._model = settings.anthropic_model
        self.client = anthropic.AsyncAnthropic(
            api_key=settings.anthropic_api_key,
            timeout=settings.llm_timeout_seconds,
            max_retries=0,
        )

    @property
    def provider_name(self) -> str:
        return "claude"

    @property
    def model_name(self) -> str:
        return self._model

    async def complete_json(
        self, system_prompt: str, user_prompt: str, response_schema: dict[str, Any]
    ) -> str:
        # The Messages API has no schema parameter; the schema travels in the system prompt
        system = (
            f"{system_prompt}\n\nResponse JSON schema:\n"
            f"{json.dumps(response_schema, indent=2)}"
        )
        try:
            response = await self.client.messages.create(
                model=self._model,
                max_tokens=self._settings.llm_max_output_tokens,
                temperature=self._settings.llm_temperature,
                system=system,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except anthropic.APIError as e:
            logger.warning("Claude request failed: %s", e)
            raise TransportError(f"Claude request failed: {e}", provider="claude") from e
        if not response.content:
            return ""
        return getattr(response.content[0], "text", "") or ""
