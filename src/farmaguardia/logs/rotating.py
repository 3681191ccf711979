"""Rotating application log under ``<data home>/logs``.

The ``farmaguardia`` logger carries exactly one rotating handler. It is
re-pointed when the data home changes between calls, so a process that
switches ``FARMAGUARDIA_HOME`` never keeps writing into the old tree.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from farmaguardia.config import data_home

LOG_NAME = "farmaguardia.log"
MAX_BYTES = 1_500_000
BACKUP_COUNT = 5


def log_dir() -> Path:
    path = data_home() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def log_path() -> Path:
    return log_dir() / LOG_NAME


def get_logger(name: str = "farmaguardia") -> logging.Logger:
    logger = logging.getLogger(name)
    target = str(log_path().resolve())
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.handlers.RotatingFileHandler):
            continue
        if handler.baseFilename == target:
            return logger
        logger.removeHandler(handler)
        handler.close()

    if logger.level == logging.NOTSET:
        logger.setLevel(logging.INFO)
    handler = logging.handlers.RotatingFileHandler(
        target, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8"
    )
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger


__all__ = ["LOG_NAME", "MAX_BYTES", "BACKUP_COUNT", "log_dir", "log_path", "get_logger"]
