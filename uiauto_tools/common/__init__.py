"""
================================================================================
UI Automation Tools Common Utilities
================================================================================

This module provides shared configuration and logging setup for the framework.

Exports:
    - Settings: Immutable framework configuration
    - load_settings: Load settings from a properties/YAML file
    - ConfigurationError: Raised when the configuration file cannot be loaded
    - init_logger: Function to initialize loguru logger with standard settings

Usage:
    from uiauto_tools.common import init_logger, load_settings

    settings = load_settings()
    init_logger(level=settings.log_level, log_file=settings.log_file)

================================================================================
"""

import os
import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from .global_config import ConfigurationError, Settings, load_settings


DEFAULT_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

# ============================================================
# Logging Setup
# ============================================================

_logger_initialized = False


def init_logger(
    level: str = "INFO",
    format_string: str = None,
    log_file: str = None,
    force: bool = False,
) -> None:
    """
    Initializes the loguru logger with standard settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format_string: Log format string. Uses default if not provided.
        log_file: Optional file path to write logs to.
        force: Reconfigure even if already initialized

    Example:
        init_logger()  # Use defaults
        init_logger(level="DEBUG", log_file="logs/uiauto.log")
    """
    global _logger_initialized

    if _logger_initialized and not force:
        return

    # Remove default handler
    logger.remove()

    format_string = format_string or DEFAULT_LOG_FORMAT

    # Add console handler
    logger.add(
        sys.stderr,
        format=format_string,
        level=level.upper(),
        colorize=True,
    )

    # Add file handler if specified
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        logger.add(
            log_file,
            format=format_string,
            level=level.upper(),
            rotation="10 MB",
            retention="7 days",
            enqueue=True,
        )

    _logger_initialized = True
    logger.debug("Logger initialized successfully")


def init_logger_from_settings(settings: Settings, force: bool = False) -> None:
    """Initialize the logger using the ``log.*`` keys of the settings."""
    init_logger(level=settings.log_level, log_file=settings.log_file, force=force)


# ============================================================
# Common Utilities
# ============================================================

def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensures a directory exists, creating it if necessary.

    Args:
        path: Directory path

    Returns:
        The path (for chaining)
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


# Export public API
__all__ = [
    "ConfigurationError",
    "Settings",
    "load_settings",
    "init_logger",
    "init_logger_from_settings",
    "ensure_directory",
]
