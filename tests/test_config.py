from __future__ import annotations

from datetime import timezone

import pytest
from pydantic import ValidationError

from asana_ingest.config import DEFAULT_API_BASE_URL, AsanaIngestSettings, get_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "ASANA_ACCESS_TOKEN",
        "ASANA_API_BASE_URL",
        "ASANA_REQUEST_TIMEOUT",
        "ASANA_STORY_LIMIT",
        "ASANA_INGEST_TIMEZONE",
        "ASANA_INGEST_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()


def test_defaults() -> None:
    settings = AsanaIngestSettings(_env_file=None)

    assert settings.access_token is None
    assert settings.token_value() == ""
    assert settings.api_base_url == DEFAULT_API_BASE_URL
    assert settings.request_timeout == 30.0
    assert settings.story_limit == 100
    assert settings.display_timezone == "UTC"
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ASANA_ACCESS_TOKEN", "  pat-1  ")
    monkeypatch.setenv("ASANA_API_BASE_URL", "https://asana.example/api/1.0/")
    monkeypatch.setenv("ASANA_STORY_LIMIT", "50")
    monkeypatch.setenv("ASANA_INGEST_LOG_LEVEL", "debug")

    settings = AsanaIngestSettings(_env_file=None)

    assert settings.token_value() == "pat-1"
    assert "pat-1" not in repr(settings)
    assert settings.api_base_url == "https://asana.example/api/1.0"
    assert settings.story_limit == 50
    assert settings.tzinfo is timezone.utc
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("ASANA_INGEST_LOG_LEVEL", "loud"),
        ("ASANA_STORY_LIMIT", "0"),
        ("ASANA_STORY_LIMIT", "500"),
        ("ASANA_REQUEST_TIMEOUT", "-1"),
        ("ASANA_INGEST_TIMEZONE", "Mars/Olympus"),
        ("ASANA_API_BASE_URL", "ftp://asana"),
    ],
)
def test_invalid_values_are_rejected(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ValidationError):
        AsanaIngestSettings(_env_file=None)


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()
