"""
============================================================================
HEALTH CHECKER - LOGGING UTILITY
============================================================================
loguru based logging. Everything goes to stderr; a rotating log file is
optional. Structured fields are bound as ``extra`` so that the JSON
serializer carries them next to the message.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import sys
from typing import Optional

from loguru import logger

from config.settings import Settings, get_settings


CONSOLE_FORMAT = (
    "<green>{time:%s}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)

FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function}:{line} - {message}"
)


# ============================================================================
# LOGGER CONFIGURATION
# ============================================================================

def setup_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure loguru sinks.

    Args:
        settings: Application settings (cached settings if omitted)
    """
    settings = settings or get_settings()
    log_settings = settings.logging
    log_level = log_settings.level.value

    # Remove default loguru handler
    logger.remove()
    logger.configure(extra={"name": "healthchecker"})

    if log_settings.json_enabled:
        logger.add(
            sys.stderr,
            level=log_level,
            serialize=True,
            backtrace=False,
            diagnose=False,
        )
    else:
        logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT % log_settings.time_format,
            level=log_level,
            colorize=log_settings.console_colored,
            backtrace=True,
            diagnose=False,
        )

    if log_settings.file_enabled:
        log_settings.file_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_settings.file_path,
            format=FILE_FORMAT,
            level=log_level,
            rotation=log_settings.file_rotation,
            retention=log_settings.file_retention,
            compression="zip",
            serialize=log_settings.json_enabled,
            enqueue=True,
        )

    logger.debug(f"Logging initialized: level={log_level}, json={log_settings.json_enabled}")


def get_logger(name: Optional[str] = None):
    """
    Get logger instance with optional name.

    Args:
        name: Logger name (shown in the console format)

    Returns:
        Logger instance
    """
    if name:
        return logger.bind(name=name)
    return logger
