"""
Load settings from the environment (and a local .env file, if present).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_STORE_DIR = "~/.aesthetic"
DEFAULT_SHARE_BASE_URL = "https://aesthetic.local/"
DEFAULT_DEBOUNCE_MS = 120
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    store_dir: Path
    share_base_url: str = DEFAULT_SHARE_BASE_URL
    url_debounce_ms: int = DEFAULT_DEBOUNCE_MS
    log_level: str = DEFAULT_LOG_LEVEL


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} is not an integer; using {default}")
        return default


def load_settings(dotenv: bool = True, env_file: Optional[Union[str, Path]] = None) -> Settings:
    """Read AESTHETIC_* variables. `dotenv=False` skips the .env file; by default it is looked up from the cwd."""
    if dotenv:
        load_dotenv(env_file or find_dotenv(usecwd=True))

    level = os.environ.get("AESTHETIC_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        logger.warning(f"Unknown log level {level!r}; using {DEFAULT_LOG_LEVEL}")
        level = DEFAULT_LOG_LEVEL

    return Settings(
        store_dir=Path(os.environ.get("AESTHETIC_STORE_DIR", DEFAULT_STORE_DIR)).expanduser(),
        share_base_url=os.environ.get("AESTHETIC_SHARE_BASE_URL", DEFAULT_SHARE_BASE_URL).strip()
        or DEFAULT_SHARE_BASE_URL,
        url_debounce_ms=_int_env("AESTHETIC_URL_DEBOUNCE_MS", DEFAULT_DEBOUNCE_MS),
        log_level=level,
    )
