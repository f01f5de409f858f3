from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_int(*keys: str, default: int) -> int:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return int(v)


def _get_float(*keys: str, default: float) -> float:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return float(v)


@dataclass(frozen=True)
class Settings:
    api_base_url: str
    api_timeout: float
    suggestion_limit: int
    search_debounce: float  # seconds
    log_level: str


def load_settings(env_file: str | Path | None = None) -> Settings:
    """Read settings from the environment, after loading a .env file if present."""
    load_dotenv(dotenv_path=env_file or ROOT_DIR / ".env")

    settings = Settings(
        api_base_url=_get_env("DOORSTEP_API_URL", "API_BASE_URL", default="http://localhost:7070/api")
        or "http://localhost:7070/api",
        api_timeout=_get_float("DOORSTEP_API_TIMEOUT", default=10.0),
        suggestion_limit=_get_int("DOORSTEP_SUGGESTION_LIMIT", default=8),
        search_debounce=_get_int("DOORSTEP_SEARCH_DEBOUNCE_MS", default=300) / 1000,
        log_level=(_get_env("DOORSTEP_LOG_LEVEL", default="INFO") or "INFO").upper(),
    )

    if settings.suggestion_limit < 1:
        raise RuntimeError("DOORSTEP_SUGGESTION_LIMIT must be >= 1")
    if settings.api_timeout <= 0:
        raise RuntimeError("DOORSTEP_API_TIMEOUT must be > 0")
    return settings


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


__all__ = ("Settings", "load_settings", "configure_logging")
