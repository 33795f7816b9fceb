"""Load environment configuration."""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def log_level() -> str:
    return get_env("LOG_LEVEL", "INFO").upper() or "INFO"


def default_output_path() -> Path | None:
    """Dataset file the CLI appends to when --out is not given; None means stdout."""
    raw = get_env("ROLESCOPE_OUTPUT")
    if not raw:
        return None
    return Path(raw).expanduser()
