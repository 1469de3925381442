"""Logging setup shared by every module."""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s %(levelname)s %(message)s'


def setup_logger(name: str = "edgefav", level: int = logging.INFO,
                 log_file: Optional[Path] = None) -> logging.Logger:
    """
    Return the application logger, configuring it on first use.

    Modules call this at import time, so handlers are only attached once.
    Calling it again with a log_file adds a file handler.

    Args:
        name: Logger name
        level: Log level used when the logger is first configured
        log_file: Optional file to also write log records to
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = False

    if log_file is not None:
        log_path = Path(log_file)
        already_attached = any(
            isinstance(h, logging.FileHandler) and Path(h.baseFilename) == log_path.absolute()
            for h in logger.handlers
        )
        if not already_attached:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding='utf-8')
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            logger.addHandler(file_handler)

    return logger


def set_log_level(level: int, name: str = "edgefav"):
    """Change the level of the application logger and its handlers."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
