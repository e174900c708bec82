"""Logging setup."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """Install a stream handler on the package logger.

    Safe to call more than once; later calls only adjust the level.
    """
    package_logger = logging.getLogger("sovereign_shield")
    package_logger.setLevel(level.upper() if isinstance(level, str) else level)

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
