"""
Logger utility for consistent logging across the customers service.

This module provides a standardized way to create and configure loggers.
Components receive their logger through their constructor; when none is
given they fall back to ``get_logger(__name__)``.

Features:
- Consistent log format across all modules
- Configurable log level through settings
- Stream handler to stdout
- Optional rotating file handlers for errors and debug output
- Prevents duplicate handlers when called multiple times
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

from src.utils.config import get_settings

# Default log format
DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
VERBOSE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(pathname)s:%(lineno)d - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5


def _level_from_name(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def setup_logging() -> logging.Logger:
    """
    Configure global logging for the application.

    Returns:
        logging.Logger: The application logger
    """
    settings = get_settings()
    log_level = _level_from_name(settings.LOG_LEVEL)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates when reloading
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    verbose_formatter = logging.Formatter(VERBOSE_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
    standard_formatter = logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(standard_formatter)
    console_handler.setLevel(logging.DEBUG if settings.DEBUG else log_level)
    root_logger.addHandler(console_handler)

    if settings.ENABLE_FILE_LOGGING:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)

        error_file_handler = logging.handlers.RotatingFileHandler(
            log_dir / "error.log",
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUP_COUNT
        )
        error_file_handler.setLevel(logging.ERROR)
        error_file_handler.setFormatter(verbose_formatter)
        root_logger.addHandler(error_file_handler)

        if settings.DEBUG:
            debug_file_handler = logging.handlers.RotatingFileHandler(
                log_dir / "debug.log",
                maxBytes=MAX_LOG_BYTES,
                backupCount=LOG_BACKUP_COUNT
            )
            debug_file_handler.setLevel(log_level)
            debug_file_handler.setFormatter(verbose_formatter)
            root_logger.addHandler(debug_file_handler)

    # SQL echo only in debug mode
    logging.getLogger('sqlalchemy.engine').setLevel(
        logging.INFO if settings.DEBUG else logging.WARNING
    )
    logging.getLogger('alembic').setLevel(logging.INFO)

    logger = logging.getLogger('customers')
    logger.info(f"Logging initialized with level {settings.LOG_LEVEL.upper()}")

    return logger


def get_logger(name: Optional[str] = None, level: Optional[int] = None) -> logging.Logger:
    """
    Get a logger with consistent formatting.

    If neither the logger nor the root logger has handlers yet, a stdout
    handler is attached so messages are visible before ``setup_logging``
    runs.

    Args:
        name: Logger name, usually ``__name__``
        level: Optional explicit level; defaults to the configured level

    Returns:
        logging.Logger: Configured logger instance

    Example:
        ```python
        from src.utils.logger import get_logger

        logger = get_logger(__name__)
        logger.info("Adding record to '%s'.", "CustomersEntity")
        ```
    """
    if level is None:
        level = _level_from_name(get_settings().LOG_LEVEL)

    logger = logging.getLogger(name or __name__)
    logger.setLevel(level)

    root_logger = logging.getLogger()
    if not logger.handlers and not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT))
        logger.addHandler(handler)

    return logger
