"""Logging setup for MedAdmin.

Everything logs under the ``medadmin`` namespace. The application configures
that root once at start-up with :func:`setup_logger`; modules only call
:func:`get_logger`. Timestamps are UTC in ISO 8601, matching the audit trail.
"""

import logging
import logging.handlers
import os
import time
from typing import List, Optional

from .config import get_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _utc_formatter(log_format: str, date_format: str) -> logging.Formatter:
    formatter = logging.Formatter(log_format, datefmt=date_format)
    formatter.converter = time.gmtime
    return formatter


def _build_handlers(
    name: str,
    log_dir: str,
    file_logging: bool,
    console_logging: bool,
    max_bytes: int,
    backup_count: int,
) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if file_logging:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                os.path.join(log_dir, f"{name}.log"),
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
        )
    if console_logging:
        handlers.append(logging.StreamHandler())
    return handlers


def setup_logger(
    name: str,
    log_dir: Optional[str] = None,
    level: Optional[str] = None,
    log_format: str = LOG_FORMAT,
    date_format: str = DATE_FORMAT,
    file_logging: Optional[bool] = None,
    console_logging: bool = True,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """Attach handlers to logger ``name`` and set its level.

    ``log_dir``, ``level`` and ``file_logging`` default to the ``log_dir``,
    ``log_level`` and ``file_logging`` settings. Calling it again for the same
    name only updates the level.

    Raises:
        ValueError: If ``level`` is not a standard logging level name
    """
    settings = get_settings()
    level_name = (level or settings.log_level).upper()
    if level_name not in LEVELS:
        raise ValueError(f"Invalid log level: {level}. Must be one of: {', '.join(LEVELS)}")

    logger = logging.getLogger(name)
    logger.setLevel(level_name)
    if logger.handlers:
        return logger

    formatter = _utc_formatter(log_format, date_format)
    for handler in _build_handlers(
        name,
        log_dir or settings.log_dir,
        settings.file_logging if file_logging is None else file_logging,
        console_logging,
        max_bytes,
        backup_count,
    ):
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger in the ``medadmin`` namespace."""
    if not name.startswith("medadmin"):
        name = f"medadmin.{name}"
    return logging.getLogger(name)
