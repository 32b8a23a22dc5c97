"""
Logging and runtime configuration for the football statistics service.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from .constants import METHOD_CACHE_MINUTES, TTL_CACHE_MINUTES
from .settings import FOOTBALL_DATA_TIMEOUT_MS

TTL_CACHE_SECONDS = TTL_CACHE_MINUTES * 60
"""Lifetime (seconds) of in-memory cache entries."""

METHOD_CACHE_SECONDS = METHOD_CACHE_MINUTES * 60
"""Lifetime (seconds) of durable method cache rows."""

API_TIMEOUT_FOOTBALL_DATA = FOOTBALL_DATA_TIMEOUT_MS / 1000.0
"""Timeout (seconds) for football-data.org calls."""


def setup_logger(name: str) -> logging.Logger:
    """Create or retrieve a configured logger for the application."""

    logger = logging.getLogger(name)

    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)
    logger.setLevel(log_level)

    if logging.getLogger().handlers:
        logger.propagate = True
        return logger

    if not logger.handlers:
        log_file = os.path.join(os.path.dirname(os.path.dirname(__file__)), "football_stats.log")
        handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=3)
        formatter = logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s')
        handler.setFormatter(formatter)
        handler.setLevel(log_level)
        logger.addHandler(handler)
        logger.propagate = False

    return logger
