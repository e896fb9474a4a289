from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    # Working document
    data_file: Path

    # Backups
    auto_backup_on_save: bool
    default_backup_count: int

    # Logging / debug
    log_level: str
    debug_log_requests: bool

    # HTTP
    cors_allow_origins: list[str]


def get_settings() -> Settings:
    raw_data_file = os.getenv("HOUSEHOLD_DATA_FILE", "").strip()
    if raw_data_file:
        data_file = Path(raw_data_file).expanduser()
    else:
        from persistence.paths import default_data_file

        data_file = default_data_file()

    auto_backup_on_save = _env_bool("AUTO_BACKUP_ON_SAVE", True)
    default_backup_count = max(0, _env_int("DEFAULT_BACKUP_COUNT", 10))

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", False)

    cors_allow_origins = [o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()]

    return Settings(
        data_file=data_file,
        auto_backup_on_save=auto_backup_on_save,
        default_backup_count=default_backup_count,
        log_level=log_level,
        debug_log_requests=debug_log_requests,
        cors_allow_origins=cors_allow_origins or ["*"],
    )
