"""
Logging setup shared by the GUI and the command line.
"""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
MAX_LOG_BYTES = 1_000_000
LOG_BACKUPS = 3


def configure_logging(level: int = logging.INFO, log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure the ``photo_grid`` logger.

    Safe to call more than once: handlers installed by an earlier call
    are replaced rather than duplicated.

    Args:
        level: Threshold for the package logger
        log_file: Optional path for a rotating log file

    Returns:
        The configured package logger
    """
    logger = logging.getLogger("photo_grid")
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, "_photo_grid_handler", False):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    console._photo_grid_handler = True  # type: ignore[attr-defined]
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        file_handler._photo_grid_handler = True  # type: ignore[attr-defined]
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
