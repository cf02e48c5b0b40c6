from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class LLMProvider(ABC):
    """One hosted completion endpoint.

    Implementations translate their SDK's failures into ``TransportError``
    and return the raw response text without interpreting it.
    """

    @abstractmethod
    async def complete_json(
        self, system_prompt: str, user_prompt: str, response_schema: dict[str, Any]
    ) -> str: ...

    @property
    @abstractmethod
    def provider_name(self) -> str: ...

    @property
    @abstractmethod
    def model_name(self) -> str: ...
