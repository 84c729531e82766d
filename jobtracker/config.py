"""Load tracker settings from .env, the environment and config/settings.yaml."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from jobtracker.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "settings.yaml"
DATA_DIR: Path = ROOT_DIR / "data"


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _int_env(key: str, default: int, *aliases: str) -> int:
    raw = get_env(key)
    for alias in aliases:
        if raw:
            break
        raw = get_env(alias)
    if not raw:
        return default
    try:
        return int(float(raw))
    except ValueError:
        log.warning("Invalid %s=%r, using default %d", key, raw, default)
        return default


@dataclass
class Settings:
    xai_api_key: str = ""
    xai_model: str = "grok-4"
    xai_base_url: str = "https://api.x.ai/v1"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = "https://api.openai.com/v1"
    provider_disable_minutes: int = 10
    model_retries: int = 1
    backoff_base_ms: int = 500
    summary_max_chars: int = 220
    batch_workers: int = 4
    jobs_file: Path = DATA_DIR / "jobs.json"
    api_url: str = "http://127.0.0.1:5000"
    host: str = "127.0.0.1"
    port: int = 5000

    @property
    def disable_seconds(self) -> float:
        return self.provider_disable_minutes * 60.0

    @property
    def backoff_base_seconds(self) -> float:
        return self.backoff_base_ms / 1000.0


def load_settings(path: Path | None = None) -> Settings:
    """Build :class:`Settings` from the environment, then apply YAML overrides."""
    settings = Settings(
        xai_api_key=get_env("XAI_API_KEY"),
        xai_model=get_env("XAI_MODEL", "grok-4"),
        xai_base_url=get_env("XAI_BASE_URL", "https://api.x.ai/v1"),
        openai_api_key=get_env("OPENAI_API_KEY"),
        openai_model=get_env("OPENAI_MODEL", "gpt-4o-mini"),
        openai_base_url=get_env("OPENAI_BASE_URL", "https://api.openai.com/v1"),
        provider_disable_minutes=_int_env("PROVIDER_DISABLE_MINUTES", 10, "XAI_DISABLE_MINUTES"),
        model_retries=_int_env("MODEL_RETRIES", 1),
        backoff_base_ms=_int_env("BACKOFF_BASE_MS", 500),
        summary_max_chars=_int_env("SUMMARY_MAX_CHARS", 220),
        batch_workers=_int_env("BATCH_WORKERS", 4),
        jobs_file=Path(get_env("JOBS_FILE") or DATA_DIR / "jobs.json"),
        api_url=get_env("TRACKER_API_URL", "http://127.0.0.1:5000").rstrip("/"),
        host=get_env("HOST", "127.0.0.1"),
        port=_int_env("PORT", 5000),
    )
    _apply_overrides(settings, _load_yaml(path or SETTINGS_PATH))
    _clamp(settings)
    return settings


def _clamp(settings: Settings) -> None:
    """Keep counts in range whether they came from the environment or YAML."""
    settings.model_retries = max(0, settings.model_retries)
    settings.backoff_base_ms = max(0, settings.backoff_base_ms)
    settings.provider_disable_minutes = max(0, settings.provider_disable_minutes)
    settings.batch_workers = max(1, settings.batch_workers)


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        log.warning("Ignoring %s: expected a mapping, got %s", path.name, type(data).__name__)
        return {}
    return data


def _apply_overrides(settings: Settings, overrides: dict[str, Any]) -> None:
    known = {f.name: f for f in fields(settings)}
    for key, value in overrides.items():
        name = str(key).lower()
        if name not in known:
            log.warning("Unknown setting %r in settings.yaml", key)
            continue
        current = getattr(settings, name)
        try:
            if isinstance(current, Path):
                value = Path(value)
            elif isinstance(current, int):
                value = int(value)
            else:
                value = str(value)
        except (TypeError, ValueError):
            log.warning("Invalid value for %s in settings.yaml: %r", name, value)
            continue
        setattr(settings, name, value)
    if overrides:
        log.debug("Applied %d setting override(s) from YAML", len(overrides))
