"""Logging setup shared by the pipeline modules and the CLI.

Uses the standard library only. The single handler writes to stderr because
stdout is reserved for the JSON line a successful run emits.
"""
from __future__ import annotations

import logging
import sys

from rolescope.config import log_level

_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_configured = False
_handler: logging.Handler | None = None


def get_logger(name: str) -> logging.Logger:
    """Logger for `name`; the first call installs the stderr handler at LOG_LEVEL."""
    global _configured
    if not _configured:
        _configure(log_level())
        _configured = True
    return logging.getLogger(name)


def set_level(level_name: str) -> None:
    """Override the level picked up from LOG_LEVEL (used by the CLI flag)."""
    get_logger(__name__)
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.getLogger().setLevel(level)
    if _handler is not None:
        _handler.setLevel(level)


def _configure(level_name: str) -> None:
    global _handler
    level = getattr(logging, level_name.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)

    if root.handlers:
        return

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
    root.addHandler(console)
    _handler = console
