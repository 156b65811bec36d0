from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_log_level(name: str) -> int | None:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    # getLevelName returns "Level X" for unknown names
    return level if isinstance(level, int) else None


@dataclass(frozen=True)
class Settings:
    # Defaults for StoreOptions fields left unset
    default_encoding: str
    auto_validate: bool
    coerce: bool

    # Logging
    log_level: int | None


def get_settings() -> Settings:
    default_encoding = os.getenv("STORED_DATA_ENCODING", "utf-8").strip() or "utf-8"

    auto_validate = _env_bool("STORED_DATA_AUTO_VALIDATE", True)
    # Legacy lenient validation; strict unless explicitly enabled.
    coerce = _env_bool("STORED_DATA_COERCE", False)

    log_level = _env_log_level("STORED_DATA_LOG_LEVEL")

    return Settings(
        default_encoding=default_encoding,
        auto_validate=auto_validate,
        coerce=coerce,
        log_level=log_level,
    )


def load_settings(env_file: Path | str | None = "local.env") -> Settings:
    """
    Load `env_file` (if present) into the environment, then read settings.

    Variables already set in the environment win over the file.
    """
    if env_file is not None:
        load_dotenv(env_file, override=False)
    return get_settings()
