"""Logging configuration for lazygallery."""

from __future__ import annotations

import sys

from loguru import logger


def configure_logging(*, verbose: bool = False) -> None:
    """Route loguru output to stderr at INFO, or DEBUG when ``verbose``."""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(sys.stderr, level=level, format="{level.icon} {message}")
