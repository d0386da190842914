"""Application configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

ENV_FILE_CANDIDATES = (Path(".env"), Path(".env.local"))


class Settings(BaseModel):
    """Global application settings loaded from environment variables or .env files."""

    database_path: Path = Field(
        default=Path("./data/homehub.db"),
        description="SQLite database location.",
    )
    database_url: Optional[str] = Field(
        default=None,
        description="Full SQLAlchemy connection URL (overrides database_path when set).",
    )
    openai_api_key: Optional[str] = Field(
        default=None,
        description="API key for the recipe generation provider. Unset selects the template fallback.",
    )
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="OpenAI-compatible base URL used for recipe generation.",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="Model identifier passed to the recipe generation endpoint.",
    )
    openai_provider: str = Field(
        default="openai",
        description="Recipe generation provider (openai or ollama).",
    )
    openai_temperature: float = Field(
        default=0.7,
        description="Sampling temperature for recipe generation.",
    )
    openai_max_tokens: int = Field(
        default=2000,
        description="Maximum tokens to request for recipe generation.",
    )
    openai_timeout: float = Field(
        default=60.0,
        description="Seconds to wait for the recipe generation endpoint.",
    )
    prompts_dir: Optional[Path] = Field(
        default=None,
        description="Directory holding prompt templates (packaged prompts are used when unset).",
    )
    api_token: Optional[str] = Field(
        default=None,
        description="Bearer token required for mutating endpoints.",
    )
    log_level: str = Field(default="INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    log_format: str = Field(
        default="plain",
        description="Logging format (plain/json).",
    )
    log_requests: bool = Field(
        default=True,
        description="Emit request access logs when true.",
    )
    default_page_size: int = Field(
        default=10,
        ge=1,
        description="Page size applied when a list request omits pageSize.",
    )

    model_config = ConfigDict(frozen=True)

    @property
    def ai_enabled(self) -> bool:
        return bool(self.openai_api_key and self.openai_api_key.strip())


def _coerce_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_env_file(path: Path) -> dict[str, str]:
    payload: dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, raw_value = line.split("=", 1)
                payload[key.strip()] = raw_value.strip()
    except FileNotFoundError:
        return {}
    return payload


def _load_env_file_values() -> dict[str, str]:
    values: dict[str, str] = {}
    for candidate in ENV_FILE_CANDIDATES:
        values.update(_parse_env_file(candidate))
    return values


def _load_from_env() -> dict[str, object]:
    """Load optional overrides from env vars (with .env fallbacks)."""

    file_values = _load_env_file_values()

    def _env(key: str) -> Optional[str]:
        return os.environ.get(key) or file_values.get(key)

    payload: dict[str, object] = {}
    if (db_path := _env("HOMEHUB_DATABASE_PATH")):
        payload["database_path"] = Path(db_path)
    if (db_url := _env("HOMEHUB_DATABASE_URL")):
        payload["database_url"] = db_url
    if (api_key := _env("HOMEHUB_OPENAI_API_KEY") or _env("OPENAI_API_KEY")):
        payload["openai_api_key"] = api_key
    if (base_url := _env("HOMEHUB_OPENAI_BASE_URL")):
        payload["openai_base_url"] = base_url
    if (model := _env("HOMEHUB_OPENAI_MODEL")):
        payload["openai_model"] = model
    if (provider := _env("HOMEHUB_OPENAI_PROVIDER")):
        payload["openai_provider"] = provider
    if (temperature := _env("HOMEHUB_OPENAI_TEMPERATURE")):
        try:
            payload["openai_temperature"] = float(temperature)
        except ValueError:
            pass
    if (max_tokens := _env("HOMEHUB_OPENAI_MAX_TOKENS")):
        try:
            payload["openai_max_tokens"] = int(max_tokens)
        except ValueError:
            pass
    if (timeout := _env("HOMEHUB_OPENAI_TIMEOUT")):
        try:
            payload["openai_timeout"] = float(timeout)
        except ValueError:
            pass
    if (prompts_dir := _env("HOMEHUB_PROMPTS_DIR")):
        payload["prompts_dir"] = Path(prompts_dir)
    if (api_token := _env("HOMEHUB_API_TOKEN")):
        payload["api_token"] = api_token
    if (log_level := _env("HOMEHUB_LOG_LEVEL")):
        payload["log_level"] = log_level
    if (log_format := _env("HOMEHUB_LOG_FORMAT")):
        payload["log_format"] = log_format
    if (log_requests := _env("HOMEHUB_LOG_REQUESTS")):
        payload["log_requests"] = _coerce_bool(log_requests)
    if (page_size := _env("HOMEHUB_DEFAULT_PAGE_SIZE")):
        try:
            parsed = int(page_size)
        except ValueError:
            parsed = 0
        if parsed >= 1:
            payload["default_page_size"] = parsed
    return payload


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings(**_load_from_env())
