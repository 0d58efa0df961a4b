"""
Logging setup for the viewer.

The viewer owns the whole terminal while running, so log records go to a
file when one is configured and are discarded otherwise.
"""

import logging
from typing import Optional

LOGGER_NAME = "ascii_viewer"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "INFO", file: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Log level name
        file: Path of a log file (records are dropped if None)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    if file:
        handler: logging.Handler = logging.FileHandler(file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        handler = logging.NullHandler()
    logger.addHandler(handler)

    logger.info("Logging initialized at %s level", level.upper())
    return logger
