"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
_PLACEHOLDER_API_KEY = "YOUR_API_KEY_HERE"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = "low"
    openai_store: bool = False
    data_file: Path = Path("db.json")
    timezone: str = "UTC"
    static_dir: Path | None = None
    host: str = "127.0.0.1"
    port: int = 5001
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def analysis_api_key(self) -> str | None:
        """Return the OpenAI key, or None when unset or left as a placeholder."""
        key = (self.openai_api_key or "").strip()
        if not key or key == _PLACEHOLDER_API_KEY:
            return None
        return key
