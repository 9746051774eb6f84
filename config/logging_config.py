"""
Logging setup for the converter.

Handlers are attached once, to the top-level "rly" logger; module loggers
(rly.reader.classifier, rly.figures ...) propagate to it.

Environment:
    RLY_LOG_LEVEL  level name for the package logger (default INFO)
    RLY_LOG_FILE   when set, also log DEBUG and above to this rotating file
"""
import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

from .constants import (
    LOG_LEVEL, LOG_FORMAT,
    LOG_MAX_SIZE_MB, LOG_BACKUP_COUNT
)

PACKAGE_LOGGER = 'rly'


def _add_file_handler(logger: logging.Logger, log_file: str) -> None:
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=LOG_MAX_SIZE_MB * 1024 * 1024,
        backupCount=LOG_BACKUP_COUNT,
        encoding='utf-8',
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)


def setup_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Return a logger whose top-level package logger has handlers attached.

    Usage:
        from config.logging_config import setup_logger
        logger = setup_logger(__name__)

    Args:
        name: Dotted logger name (default: the package logger)
    """
    name = name or PACKAGE_LOGGER

    top = name.split('.')[0]
    if top != name:
        setup_logger(top)
        return logging.getLogger(name)

    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level = os.environ.get('RLY_LOG_LEVEL', LOG_LEVEL).upper()
    logger.setLevel(getattr(logging, level, logging.INFO))

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console)

    log_file = os.environ.get('RLY_LOG_FILE')
    if log_file:
        _add_file_handler(logger, log_file)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Same as setup_logger; reads better at module level."""
    return setup_logger(name)


# Package logger, configured on first import of config
logger = setup_logger(PACKAGE_LOGGER)
