"""
================================================================================
Portal Tools Common Utilities
================================================================================

Exports:
    - init_logger: Configure the process-wide loguru sinks once
    - get_logger: Return the configured logger, initialising it on first use

Usage:
    from portal_tools.common import init_logger

    init_logger(config)
    logger.info("ready")

================================================================================
"""

from .log_setup import DEFAULT_LOG_FORMAT, get_logger, init_logger, reset_logger

__all__ = [
    "DEFAULT_LOG_FORMAT",
    "get_logger",
    "init_logger",
    "reset_logger",
]
