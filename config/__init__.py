"""
Configuration Package for Health Checker

This package contains all configuration-related modules including:
- Settings management with environment variable support
- The JSON checker configuration loader
- Constants and enums used throughout the application
"""

from config.settings import (
    Settings,
    MonitoringSettings,
    LoggingSettings,
    get_settings
)

from config.constants import (
    CheckOutcome,
    LoopState,
    StatusCodes,
    Defaults
)

__all__ = [
    # Settings
    "Settings",
    "MonitoringSettings",
    "LoggingSettings",
    "get_settings",

    # Constants
    "CheckOutcome",
    "LoopState",
    "StatusCodes",
    "Defaults"
]
