"""Logging configuration for the resume-driven job search session."""

import logging
import os
import sys
from typing import Optional

_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"


def _default_level() -> int:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Get a named logger with a stdout handler attached once."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
        logger.addHandler(handler)
        logger.setLevel(_default_level())
    if level is not None:
        logger.setLevel(level)
    return logger
