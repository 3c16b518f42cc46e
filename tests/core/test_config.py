from __future__ import annotations

import pytest

from app.core.config import Settings, load_settings

_ENV_VARS = (
    "APP_ENV",
    "LOG_LEVEL",
    "LOG_JSON",
    "PORT",
    "DATABASE_URL",
    "REDIS_URL",
    "APP_BASE_URL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_run_in_memory_dev_mode() -> None:
    settings = load_settings()
    assert settings == Settings(
        app_env="dev",
        log_level="info",
        log_json=False,
        port=8000,
        database_url=None,
        redis_url=None,
        app_base_url="http://localhost:3000",
    )
    assert settings.is_dev is True


def test_values_are_trimmed_and_lowercased(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "  PROD ")
    monkeypatch.setenv("LOG_LEVEL", "Warning")
    monkeypatch.setenv("APP_BASE_URL", "https://learn.example.com/")
    settings = load_settings()
    assert (settings.app_env, settings.log_level) == ("prod", "warning")
    assert settings.is_dev is False
    assert settings.app_base_url == "https://learn.example.com"


@pytest.mark.parametrize(
    ("name", "value", "message"),
    [
        ("APP_ENV", "staging", "APP_ENV must be dev|test|prod"),
        ("APP_ENV", "", "APP_ENV must be dev|test|prod"),
        ("LOG_LEVEL", "verbose", "LOG_LEVEL must be debug|info|warning|error"),
        ("LOG_JSON", "maybe", "LOG_JSON must be a boolean"),
        ("PORT", "eighty", "PORT must be an integer"),
        ("DATABASE_URL", "mysql://db/courses", "DATABASE_URL must be a postgresql"),
    ],
)
def test_invalid_values_fail_at_load(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str, message: str
) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError, match=message):
        load_settings()


@pytest.mark.parametrize(
    ("raw", "expected"), [("yes", True), ("1", True), ("off", False), ("", False)]
)
def test_log_json_flag(
    monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool
) -> None:
    monkeypatch.setenv("LOG_JSON", raw)
    assert load_settings().log_json is expected


def test_storage_urls(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://app@db/courses")
    monkeypatch.setenv("REDIS_URL", "  ")
    settings = load_settings()
    assert settings.database_url == "postgresql+asyncpg://app@db/courses"
    assert settings.redis_url is None


def test_settings_are_frozen() -> None:
    settings = load_settings()
    with pytest.raises(AttributeError):
        settings.port = 9000  # type: ignore[misc]
