"""
Logger utilities with context-aware logging.

This module provides:
1. setup_logger() - Function to create configured logger instances
2. Context-aware logging that lets the shared data layer (repository, cache,
   catalog service) log through the logger of whichever app is calling it

Usage:
    # Setting up a basic logger:
    from product_catalog.utils.logger import setup_logger
    my_logger = setup_logger("my_app", logging.INFO, "my_app.log")

    # In app entry point (context-aware):
    from product_catalog.utils.logger import set_app_context, AppLogger
    with set_app_context(AppLogger.CATALOG_SYNC):
        # All data layer calls will use catalog_sync_logger
        result = await job.sync_from_external_source()

    # In shared infrastructure:
    from product_catalog.utils.logger import get_current_logger
    logger = get_current_logger()
    logger.info("This logs to the calling app's logger")
"""

import logging
import sys
import os
from logging.handlers import RotatingFileHandler
from contextvars import ContextVar
from enum import Enum
from typing import Optional

from product_catalog.config import LOG_DIR


def setup_logger(name: str = "app_logger", log_level: int = logging.INFO, log_file: str = None):
    """
    Sets up a logger with both console and file handlers.

    Args:
        name (str): The name of the logger.
        log_level (int): The logging level (default: logging.INFO).
        log_file (str): Optional custom log filename (without path). If not provided, defaults to "{name}.log".

    Returns:
        logging.Logger: The configured logger instance.
    """
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Check if handlers are already added to avoid duplicate logs
    if not logger.handlers:
        os.makedirs(LOG_DIR, exist_ok=True)

        if log_file is None:
            log_file = f"{name}.log"

        app_log_file = os.path.join(LOG_DIR, log_file)
        error_log_file = os.path.join(LOG_DIR, f"{os.path.splitext(log_file)[0]}_error.log")

        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        file_handler = RotatingFileHandler(
            app_log_file, maxBytes=10*1024*1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        # Errors also go to their own file
        error_file_handler = RotatingFileHandler(
            error_log_file, maxBytes=10*1024*1024, backupCount=5, encoding="utf-8"
        )
        error_file_handler.setFormatter(formatter)
        error_file_handler.setLevel(logging.ERROR)
        logger.addHandler(error_file_handler)

    return logger


# Default logger instance
logger = setup_logger()


# ============================================================================
# Context-Aware Logging
# ============================================================================

class AppLogger(Enum):
    """Enum of available app loggers."""
    CATALOG_API = "catalog_api"
    CATALOG_SYNC = "catalog_sync"
    DEFAULT = "app_logger"


_current_app_logger: ContextVar[AppLogger] = ContextVar('current_app_logger', default=AppLogger.DEFAULT)


def get_current_logger() -> logging.Logger:
    """
    Get the logger for the current app context.

    Used by shared infrastructure (repository, cache, catalog service) so that
    a sync run and an HTTP request each log to their own files.

    Returns:
        logging.Logger: The logger instance for the current app context
    """
    app_logger_type = _current_app_logger.get()

    # Import loggers lazily to avoid circular imports
    if app_logger_type == AppLogger.CATALOG_API:
        from product_catalog.catalog_api import catalog_api_logger
        return catalog_api_logger

    elif app_logger_type == AppLogger.CATALOG_SYNC:
        from product_catalog.sync import catalog_sync_logger
        return catalog_sync_logger

    else:
        return logger


class set_app_context:
    """
    Context manager to set the current app logger context.

    Usage:
        with set_app_context(AppLogger.CATALOG_API):
            # All get_current_logger() calls will return catalog_api_logger
            result = await service.find_products(pagination, filters)
    """

    def __init__(self, app_logger: AppLogger):
        self.app_logger = app_logger
        self.token: Optional[object] = None

    def __enter__(self):
        self.token = _current_app_logger.set(self.app_logger)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            _current_app_logger.reset(self.token)
        return False
