"""Logging setup for applications using contactgraph."""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the ``contactgraph`` logger with a console and optional file handler.

    Library modules only create loggers; calling this is left to applications.

    Args:
        level: Logging level
        log_file: Optional path of a log file

    Returns:
        Configured package logger
    """
    logger = logging.getLogger("contactgraph")
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
