from __future__ import annotations

import logging
import os
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER = "regionstore"
LEVEL_ENV = "REGIONSTORE_LOG_LEVEL"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def resolve_level(default_level: int = logging.INFO) -> int:
    """Level named by REGIONSTORE_LOG_LEVEL, or ``default_level`` if unset or unknown."""
    level_name = os.getenv(LEVEL_ENV)
    if not level_name:
        return default_level
    level = logging.getLevelName(level_name.strip().upper())
    return level if isinstance(level, int) else default_level


def configure_logging(
    default_level: int = logging.INFO,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Attach a stream handler to the ``regionstore`` logger.

    Entry-level load warnings (dropped regions, bad unique ids, unresolved
    parents) all go through loggers below ``regionstore``. Calling this again
    replaces the handler it installed earlier instead of adding a second one.
    """
    log = logging.getLogger(PACKAGE_LOGGER)
    log.setLevel(resolve_level(default_level))
    for handler in list(log.handlers):
        if getattr(handler, "_regionstore", False):
            log.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._regionstore = True  # type: ignore[attr-defined]
    log.addHandler(handler)
    return log
