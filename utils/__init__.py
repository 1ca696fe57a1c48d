"""
Utilities Package for Health Checker

Logging setup and URL validation helpers.
"""

from utils.logger import get_logger, setup_logging
from utils.validators import URLValidator

__all__ = [
    "get_logger",
    "setup_logging",
    "URLValidator",
]
