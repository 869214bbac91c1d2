"""Application configuration loaded from config.yaml + environment variables."""

from __future__ import annotations

import yaml
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml() -> dict:
    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH) as f:
            return yaml.safe_load(f) or {}
    return {}


_yaml = _load_yaml()


class AuthConfig(BaseSettings):
    session_max_age_days: int = 7
    min_password_length: int = 8
    cookie_name: str = "session_token"


class OrdersConfig(BaseSettings):
    lock_terminal_status: bool = True
    default_status: str = "Pendente"


class MediaConfig(BaseSettings):
    max_video_seconds: int = 60


class ReportConfig(BaseSettings):
    company_name: str = "RM Refrigeração"
    timezone_label: str = "UTC"


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///data/fieldservice.db"
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:8080"])
    auth: AuthConfig = Field(default_factory=AuthConfig)
    orders: OrdersConfig = Field(default_factory=OrdersConfig)
    media: MediaConfig = Field(default_factory=MediaConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


def get_settings() -> Settings:
    """Build Settings by merging YAML values with env overrides.

    Only keys present in config.yaml are passed explicitly, so DATABASE_URL and
    friends from the environment still apply when the YAML is silent.
    """
    y = _yaml
    overrides: dict = {
        "auth": AuthConfig(**y.get("auth", {})),
        "orders": OrdersConfig(**y.get("orders", {})),
        "media": MediaConfig(**y.get("media", {})),
        "report": ReportConfig(**y.get("report", {})),
    }
    db_url = y.get("database", {}).get("url")
    if db_url:
        overrides["database_url"] = db_url
    for key in ("log_level", "cors_origins"):
        if key in y:
            overrides[key] = y[key]
    return Settings(**overrides)
