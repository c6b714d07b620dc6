"""Runtime settings: packaged YAML defaults overridden by environment variables."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"


def _load_defaults() -> dict:
    path = CONFIG_DIR / "defaults.yaml"
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fp:
        return yaml.safe_load(fp) or {}


DEFAULTS = _load_defaults()


@dataclass
class Settings:
    default_capacity: float = 100.0
    upload_max_bytes: int = 10 * 1024 * 1024
    upload_extensions: tuple[str, ...] = (".xlsx", ".xls", ".csv")
    cors_origins: list[str] = field(default_factory=list)
    export_filename: str = "Master_List.xlsx"
    log_level: str = "INFO"


def load_settings() -> Settings:
    upload = DEFAULTS.get("upload") or {}
    settings = Settings(
        default_capacity=float(DEFAULTS.get("default_monthly_capacity", 100)),
        upload_max_bytes=int(upload.get("max_bytes", 10 * 1024 * 1024)),
        upload_extensions=tuple(upload.get("extensions") or (".xlsx", ".xls", ".csv")),
        cors_origins=list(DEFAULTS.get("cors_origins") or []),
        export_filename=str(DEFAULTS.get("export_filename") or "Master_List.xlsx"),
    )

    capacity_env = os.getenv("ALLOCATOR_DEFAULT_CAPACITY")
    if capacity_env:
        settings.default_capacity = float(capacity_env)

    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
    if origins:
        settings.cors_origins = origins

    settings.log_level = (os.getenv("ALLOCATOR_LOG_LEVEL") or settings.log_level).upper()
    return settings
