from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


class Settings(BaseModel):
    feed_base_url: str | None = None
    feed_timeout: float = 10.0
    feed_token: str | None = None
    feeds_dir: Path | None = None
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))


def _load_file(path: Path) -> dict:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fp:
        return yaml.safe_load(fp) or {}


def load_settings(path: Path | None = None) -> Settings:
    """Read settings from YAML, then apply environment overrides."""

    config_path = path or Path(os.getenv("HRM_PAYROLL_CONFIG") or CONFIG_DIR / "settings.yaml")
    data = _load_file(config_path)

    overrides = {
        "feed_base_url": os.getenv("HRM_FEED_BASE_URL"),
        "feed_timeout": os.getenv("HRM_FEED_TIMEOUT"),
        "feed_token": os.getenv("HRM_FEED_TOKEN"),
        "feeds_dir": os.getenv("HRM_FEEDS_DIR"),
        "log_level": os.getenv("HRM_LOG_LEVEL"),
    }
    data.update({key: value for key, value in overrides.items() if value})

    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
    if origins:
        data["cors_origins"] = origins

    return Settings(**data)
