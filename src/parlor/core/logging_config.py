"""Logging setup. Modules only ever call `logging.getLogger(__name__)`; the application calls `configure_logging()` once."""

import logging
from typing import Optional

from parlor.core.config import Config

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a console handler to the package logger (idempotent)."""
    logger = logging.getLogger("parlor")
    logger.setLevel((level or Config.LOG_LEVEL).upper())

    # Prevent duplicate handlers
    if logger.handlers:
        logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    return logger
