"""Configuration management for Asana ingestion."""

from __future__ import annotations

from datetime import timezone
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE_URL = "https://app.asana.com/api/1.0"


class AsanaIngestSettings(BaseSettings):
    """Runtime configuration sourced from environment variables and optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    access_token: SecretStr | None = Field(default=None, validation_alias="ASANA_ACCESS_TOKEN")
    api_base_url: str = Field(default=DEFAULT_API_BASE_URL, validation_alias="ASANA_API_BASE_URL")
    request_timeout: float = Field(default=30.0, validation_alias="ASANA_REQUEST_TIMEOUT")
    story_limit: int = Field(default=100, validation_alias="ASANA_STORY_LIMIT")
    display_timezone: str = Field(default="UTC", validation_alias="ASANA_INGEST_TIMEZONE")
    log_level: str = Field(default="INFO", validation_alias="ASANA_INGEST_LOG_LEVEL")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(
                "ASANA_INGEST_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
            )
        return normalized

    @field_validator("api_base_url")
    @classmethod
    def _strip_base_url(cls, value: str) -> str:
        normalized = value.strip().rstrip("/")
        if not normalized.startswith(("http://", "https://")):
            raise ValueError("ASANA_API_BASE_URL must be an http(s) URL")
        return normalized

    @field_validator("request_timeout")
    @classmethod
    def _validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("ASANA_REQUEST_TIMEOUT must be > 0")
        return value

    @field_validator("story_limit")
    @classmethod
    def _validate_story_limit(cls, value: int) -> int:
        # Asana caps page sizes at 100.
        if not 1 <= value <= 100:
            raise ValueError("ASANA_STORY_LIMIT must be between 1 and 100")
        return value

    @field_validator("display_timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        name = value.strip() or "UTC"
        if name.upper() == "UTC":
            return "UTC"
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"ASANA_INGEST_TIMEZONE is not a known time zone: {value!r}") from exc
        return name

    @property
    def tzinfo(self) -> timezone | ZoneInfo:
        if self.display_timezone == "UTC":
            return timezone.utc
        return ZoneInfo(self.display_timezone)

    def token_value(self) -> str:
        """Return the configured access token, or an empty string when unset."""

        if self.access_token is None:
            return ""
        return self.access_token.get_secret_value().strip()


@lru_cache(maxsize=1)
def get_settings() -> AsanaIngestSettings:
    """Return cached settings instance."""

    return AsanaIngestSettings()


__all__ = ["AsanaIngestSettings", "DEFAULT_API_BASE_URL", "get_settings"]
