"""Logging configuration for rcstrings."""

import os
import sys

from loguru import logger

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:{line} - <level>{message}</level>"


def configure_logging(verbose: bool = False):
    """Configure Loguru logging for the command line.

    RCSTRINGS_LOG_LEVEL overrides the level picked from the verbose flag.
    """
    logger.remove()

    default_level = "DEBUG" if verbose else "WARNING"
    log_level = os.getenv("RCSTRINGS_LOG_LEVEL", default_level).upper()

    logger.add(sys.stderr, level=log_level, format=LOG_FORMAT)

    return logger
