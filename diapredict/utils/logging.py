"""
Logging for the DiaPredict service.

Everything logs under the "diapredict" namespace. LOG_LEVEL and LOG_FILE
are read from the environment when not passed explicitly.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional


LOGGER_NAME = "diapredict"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """Configure the service logger with a stdout handler and an optional file handler."""
    level_num = getattr(logging, (level or os.getenv("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    log_file = log_file or os.getenv("LOG_FILE")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level_num)

    # Re-running create_app() must not stack handlers
    logger.handlers = [_handler(logging.StreamHandler(sys.stdout), level_num)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.addHandler(_handler(logging.FileHandler(log_path), level_num))

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for a component, e.g. get_logger("api") -> "diapredict.api"."""
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)
