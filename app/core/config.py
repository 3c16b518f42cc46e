"""Process settings, read once from the environment at import.

Every value is validated here so a bad deployment fails at startup with a
``ValueError`` naming the variable, not on the first request that needs it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]

APP_ENVS: tuple[str, ...] = ("dev", "test", "prod")
LOG_LEVELS: tuple[str, ...] = ("debug", "info", "warning", "error")

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off", "")


def _raw(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip()


def _choice(name: str, default: str, allowed: tuple[str, ...]) -> str:
    value = _raw(name, default).lower()
    if value not in allowed:
        raise ValueError(f"{name} must be {'|'.join(allowed)} (got {value!r})")
    return value


def _int(name: str, default: int) -> int:
    value = _raw(name, str(default))
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer (got {value!r})") from None


def _bool(name: str, default: bool) -> bool:
    value = _raw(name, "true" if default else "false").lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean (got {value!r})")


def _database_url() -> str | None:
    value = _raw("DATABASE_URL") or None
    if value is not None and not value.startswith("postgresql"):
        raise ValueError(f"DATABASE_URL must be a postgresql URL (got {value!r})")
    return value


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    port: int
    database_url: str | None  # None: in-memory repositories
    redis_url: str | None  # None: in-memory reset-token store
    app_base_url: str = "http://localhost:3000"  # reset links point here

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"


def load_settings() -> Settings:
    return Settings(  # type: ignore[arg-type]
        app_env=_choice("APP_ENV", "dev", APP_ENVS),
        log_level=_choice("LOG_LEVEL", "info", LOG_LEVELS),
        log_json=_bool("LOG_JSON", False),
        port=_int("PORT", 8000),
        database_url=_database_url(),
        redis_url=_raw("REDIS_URL") or None,
        app_base_url=_raw("APP_BASE_URL", "http://localhost:3000").rstrip("/"),
    )


SETTINGS = load_settings()
