"""
cadence.logging - Centralized logging configuration.

Provides a simple logging setup with optional verbose mode for debugging.
"""

from __future__ import annotations

import logging

logger = logging.getLogger("cadence")


def get_logger(name: str) -> logging.Logger:
    """Return a child of the package logger, e.g. ``cadence.decode``."""
    return logger.getChild(name.removeprefix("cadence."))


def configure_logging(verbose: bool = False) -> None:
    """Configure logging for the cadence package.

    Args:
        verbose: If True, enable DEBUG level logging; otherwise WARNING level
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )
    logger.setLevel(level)
