"""Shared logging helpers."""

from __future__ import annotations

import logging
import os
from typing import Optional

_CONFIGURED = False
_DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
_LEVEL_ENV = "INHERITS_FROM_LOG_LEVEL"


def _resolve_level(default: int) -> int:
    """Read the log level override from the environment, ignoring unknown names."""
    raw = os.getenv(_LEVEL_ENV)
    if not raw:
        return default
    candidate = raw.strip().upper()
    if candidate.isdigit():
        return int(candidate)
    level = logging.getLevelName(candidate)
    return level if isinstance(level, int) else default


def setup_logging(level: int = logging.INFO, *, fmt: Optional[str] = None) -> None:
    """Ensure root logger is configured once."""
    global _CONFIGURED
    if _CONFIGURED:
        return
    logging.basicConfig(level=_resolve_level(level), format=fmt or _DEFAULT_FORMAT)
    _CONFIGURED = True


def get_logger(name: str, *, level: Optional[int] = None) -> logging.Logger:
    """Return configured logger for a module."""
    setup_logging()
    logger = logging.getLogger(name)
    logger.setLevel(level if level is not None else _resolve_level(logging.INFO))
    return logger
