"""
Exceptions Package for Health Checker

Provides the exception hierarchy for error handling
throughout the application.
"""

from exceptions.base import (
    HealthCheckerException,
    ConfigurationError,
    ContractViolationError
)

from exceptions.validation import (
    ValidationException,
    InvalidURLError
)

from exceptions.monitoring import (
    MonitoringException,
    ProbeError
)

__all__ = [
    # Base exceptions
    "HealthCheckerException",
    "ConfigurationError",
    "ContractViolationError",

    # Validation exceptions
    "ValidationException",
    "InvalidURLError",

    # Monitoring exceptions
    "MonitoringException",
    "ProbeError"
]
