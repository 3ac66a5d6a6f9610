"""
Logging Configuration
Routes the ``neurosphere`` logger namespace to the console and, optionally, a file.

The level passed by the caller can be overridden per run through
``NEUROSPHERE_LOG_LEVEL`` (a level name such as ``DEBUG`` or a number).
"""
import logging
import os
import sys
from typing import Optional, Union

from .config import LOG_LEVEL_ENV

LOGGER_NAME = "neurosphere"

CONSOLE_FORMAT = "[%(asctime)s][%(levelname)s] %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s:%(lineno)d %(message)s"


def resolve_level(level: Union[int, str], env: Optional[str] = None) -> int:
    """
    Return a numeric logging level.

    ``env`` (defaulting to the environment variable) wins over ``level`` when
    it names a known level; unknown names are ignored.
    """
    if env is None:
        env = os.environ.get(LOG_LEVEL_ENV, "")
    for candidate in (env.strip(), level):
        if isinstance(candidate, int):
            return candidate
        if not candidate:
            continue
        if candidate.isdigit():
            return int(candidate)
        value = logging.getLevelName(candidate.upper())
        if isinstance(value, int):
            return value
    return logging.INFO


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the logger for the 'neurosphere' namespace and returns it.

    Args:
        level: Logging level (e.g. logging.DEBUG or "debug")
        log_file: Optional path; the file receives every record of the run
            with source line numbers.
    """
    effective = resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(min(effective, logging.DEBUG) if log_file else effective)

    # The window and the capture tool may both set up logging in one process
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(effective)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    logger.debug("Logging initialized at %s", logging.getLevelName(effective))
    return logger
