from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def project_root() -> Path:
    return Path(__file__).resolve().parent


@dataclass(frozen=True)
class Settings:
    # Persistence
    data_file: Path
    persist_to_disk: bool

    # Logging
    log_level: str


def get_settings() -> Settings:
    raw_path = os.getenv("DOCSTORE_DATA_FILE", "").strip()
    data_file = Path(raw_path) if raw_path else project_root() / "data" / "docstore.json"
    if not data_file.is_absolute():
        data_file = project_root() / data_file

    # Off by default so tests and throwaway runs never touch disk.
    persist_to_disk = _env_bool("PERSIST_TO_DISK", False)

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

    return Settings(
        data_file=data_file,
        persist_to_disk=persist_to_disk,
        log_level=log_level,
    )
