"""Engine configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def _load_env_file(path: str = ".env") -> None:
    """Populate os.environ from the provided .env file if it exists."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True, slots=True)
class Settings:
    """Centralised recommendation settings based on OS environment variables."""

    environment: str = "dev"
    log_level: str = "INFO"

    timezone: str = "UTC"
    default_tag: str = "casual"
    default_k: int = 5
    max_k: int = 50
    avoid_lookback_days: int = 1


def _build_settings() -> Settings:
    _load_env_file()

    return Settings(
        environment=os.getenv("ENVIRONMENT", "dev"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        timezone=os.getenv("RECS_TIMEZONE", "UTC"),
        default_tag=os.getenv("RECS_DEFAULT_TAG", "casual").strip().lower() or "casual",
        default_k=max(0, _int_env("RECS_DEFAULT_K", 5)),
        max_k=max(1, _int_env("RECS_MAX_K", 50)),
        avoid_lookback_days=max(0, _int_env("RECS_AVOID_LOOKBACK_DAYS", 1)),
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance to avoid re-reading configuration."""

    return _build_settings()
