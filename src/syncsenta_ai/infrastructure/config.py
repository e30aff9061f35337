"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from syncsenta_ai.domain.exceptions import ConfigurationError

_PLACEHOLDER_MARKERS = ("your_openai_api_key", "your-api-key", "changeme")


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    openai_api_key: SecretStr
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"
    openai_max_tokens: int = Field(default=500, gt=0)
    openai_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    upstream_timeout_seconds: float = Field(default=30.0, gt=0)
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "https://syncsenta.netlify.app",
    ]
    api_prefix: str = "/api"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8081

    @field_validator("openai_api_key")
    @classmethod
    def _must_not_be_placeholder(cls, v: SecretStr) -> SecretStr:
        raw = v.get_secret_value().strip()
        lowered = raw.lower()
        if not raw or lowered.startswith("your_") or any(m in lowered for m in _PLACEHOLDER_MARKERS):
            msg = "OpenAI API key not configured. Please set OPENAI_API_KEY."
            raise ValueError(msg)
        return SecretStr(raw)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call).

    A missing or placeholder credential is fatal: the service must not come
    up without a working upstream.
    """
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc


@dataclass(frozen=True, slots=True)
class UpstreamProfile:
    """Immutable connection profile handed to the completion gateway."""

    base_url: str
    api_key: str
    model: str
    max_tokens: int
    temperature: float
    timeout_seconds: float

    @classmethod
    def from_settings(cls, settings: Settings) -> UpstreamProfile:
        return cls(
            base_url=settings.openai_base_url.rstrip("/"),
            api_key=settings.openai_api_key.get_secret_value(),
            model=settings.openai_model,
            max_tokens=settings.openai_max_tokens,
            temperature=settings.openai_temperature,
            timeout_seconds=settings.upstream_timeout_seconds,
        )

    def __repr__(self) -> str:
        return (
            f"UpstreamProfile(base_url={self.base_url!r}, model={self.model!r}, "
            f"max_tokens={self.max_tokens}, temperature={self.temperature})"
        )
