"""
================================================================================
Logging Setup
================================================================================

Centralised Loguru configuration for the provider portal suites.

Features:
    - One-time sink configuration per process
    - Level, format and file sink read from any object exposing get(key, default)
    - Queue-backed sinks so concurrent test threads never interleave lines
    - Thread name in every record to tell parallel sessions apart

Author: Automation Team
License: MIT
================================================================================
"""

import sys
import threading
from pathlib import Path
from typing import Any, Optional

from loguru import logger


DEFAULT_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{thread.name}</cyan> | {name}:{function}:{line} | {message}"
)

_logger_initialized: bool = False
_init_lock = threading.Lock()


def _setting(settings: Any, key: str, default: Any) -> Any:
    if settings is None:
        return default
    return settings.get(key, default)


def init_logger(settings: Any = None, level: Optional[str] = None, format_str: Optional[str] = None) -> None:
    """
    Initializes the global Loguru logger with consistent configuration.

    Safe to call from several threads; only the first call configures sinks.

    Args:
        settings: Configuration object with a get(key, default) method.
        level: Log level override (DEBUG, INFO, WARNING, ERROR).
        format_str: Custom log format string.
    """
    global _logger_initialized

    with _init_lock:
        if _logger_initialized:
            return

        log_level = (level or _setting(settings, "logging.level", "INFO")).upper()
        log_format = format_str or _setting(settings, "logging.format", DEFAULT_LOG_FORMAT)

        logger.remove()
        logger.add(
            sys.stderr,
            level=log_level,
            format=log_format,
            colorize=True,
            backtrace=True,
            diagnose=False,
            enqueue=True,
        )

        log_file = _setting(settings, "logging.file", None)
        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            logger.add(
                log_file,
                level=log_level,
                format=log_format.replace("{level: <8}", "{level}"),
                rotation=_setting(settings, "logging.rotation", "10 MB"),
                retention=_setting(settings, "logging.retention", "7 days"),
                compression="zip",
                enqueue=True,
            )

        _logger_initialized = True

    logger.debug(f"Logger initialized with level: {log_level}")


def get_logger():
    """
    Returns the configured Loguru logger instance.

    Returns:
        The Loguru logger instance.
    """
    if not _logger_initialized:
        init_logger()
    return logger


def reset_logger() -> None:
    """Forget the previous configuration so the next init_logger call re-applies sinks."""
    global _logger_initialized
    with _init_lock:
        _logger_initialized = False
