"""Centralized logging configuration for the ``household_ledger`` package.

Library modules only call ``get_logger(__name__)``. Handlers are attached once
by entrypoints (the scripts under ``scripts/``) through ``configure_logging``;
until then the package logger carries a ``NullHandler`` so library use stays
silent.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Optional, Union

from .config import LOG_LEVEL_ENV

_PKG_LOGGER_NAME = "household_ledger"
_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_CONFIGURED = False

logging.getLogger(_PKG_LOGGER_NAME).addHandler(logging.NullHandler())


def _parse_level(level: Union[int, str, None]) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
        return logging.INFO
    env_val = os.getenv(LOG_LEVEL_ENV)
    if env_val:
        return _parse_level(env_val)
    return logging.INFO


def configure_logging(
    level: Union[int, str, None] = None,
    *,
    stream: IO[str] = sys.stderr,
) -> None:
    """Attach a single stream handler to the package logger.

    ``level`` may be an int or a level name; when ``None`` the
    ``LEDGER_LOG_LEVEL`` environment variable is consulted, falling back to
    ``INFO``. Repeated calls only adjust the level.
    """
    global _CONFIGURED
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    pkg_logger.setLevel(_parse_level(level))
    if _CONFIGURED:
        return
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    pkg_logger.addHandler(handler)
    pkg_logger.propagate = False
    _CONFIGURED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger under the package namespace.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        A ``logging.Logger``; names outside the package are nested under it.
    """
    if not name or name == _PKG_LOGGER_NAME:
        return logging.getLogger(_PKG_LOGGER_NAME)
    if not name.startswith(_PKG_LOGGER_NAME + "."):
        name = f"{_PKG_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
