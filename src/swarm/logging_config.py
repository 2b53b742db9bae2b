"""
Logging Configuration
=====================
Console (and optional file) output for the ``swarm`` logger namespace.

Only the diagnostics and the report CLI log; the frame path is silent.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "swarm"
LOG_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def setup_logging(level: Union[int, str] = logging.INFO,
                  log_file: Optional[Union[str, Path]] = None) -> logging.Logger:
    """
    Route ``swarm.*`` records to stdout and, optionally, a log file.

    Args:
        level: Logging level as a number or a name ("DEBUG", "info", ...)
        log_file: File to append the same records to

    Safe to call again: handlers from an earlier call are closed and
    replaced.
    """
    if isinstance(level, str):
        name = level.upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"unknown logging level: {name}")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("Swarm logging at %s", logging.getLevelName(level))
    return logger
