# app/core/logging_setup.py
"""Logging configuration helpers for the Attendance Upload Service."""

import logging

from app.core.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _resolve_level(level_name: str) -> int:
    return getattr(logging, level_name.upper(), logging.INFO)


def configure_logging() -> None:
    """Configure root logging using LOG_LEVEL and a concise format."""
    level = _resolve_level(get_settings().LOG_LEVEL)
    formatter = logging.Formatter(LOG_FORMAT)
    root_logger = logging.getLogger()

    # Handlers installed elsewhere (uvicorn, pytest) keep their own setup.
    if root_logger.handlers:
        root_logger.setLevel(level)
        return

    logging.basicConfig(level=level)
    for handler in logging.getLogger().handlers:
        handler.setFormatter(formatter)
