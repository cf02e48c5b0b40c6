from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "RealEstate Lead Cleaner"
    debug: bool = False
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:5173"

    llm_provider: Literal["gemini", "openai", "claude"] = "gemini"
    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"
    # Low temperature for deterministic extraction
    llm_temperature: float = 0.1
    llm_timeout_seconds: float = 30.0
    llm_max_output_tokens: int = 2048

    model_config = {"env_file": ".env"}

    def api_key_for_provider(self) -> str:
        keys = {
            "gemini": self.gemini_api_key,
            "openai": self.openai_api_key,
            "claude": self.anthropic_api_key,
        }
        return keys.get(self.llm_provider, "").strip()

    def model_for_provider(self) -> str:
        models = {
            "gemini": self.gemini_model,
            "openai": self.openai_model,
            "claude": self.anthropic_model,
        }
        return models.get(self.llm_provider, "")


settings = Settings()
