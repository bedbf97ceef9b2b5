"""Centralized logging configuration for the trajopt project."""

from __future__ import annotations

import logging
import os
from typing import Final

# Allow environment override without touching handlers
_LEVEL_NAME: Final[str] = os.getenv("TRAJOPT_LOG_LEVEL", "INFO").upper()
_PACKAGE_LOGGER_LEVEL: Final[int] = getattr(logging, _LEVEL_NAME, logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Return a module-level logger without altering global handlers.

    Handlers are owned by the application entry points (``trajopt.cli`` and
    ``trajopt.gui``), never by library modules.
    """
    logger = logging.getLogger(name)
    # Do not configure handlers here; respect application-level config.
    logger.setLevel(_PACKAGE_LOGGER_LEVEL)
    return logger


def configure_logging(level: str | int | None = None) -> None:
    """Install a basic root handler for command-line and GUI entry points."""
    if level is None:
        level = _LEVEL_NAME
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s",
    )
