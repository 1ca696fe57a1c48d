"""
Constants Module for Health Checker

Contains constant values and enumerations used throughout the
application.
"""

from __future__ import annotations

from enum import Enum
from typing import Final


class CheckOutcome(str, Enum):
    """
    Outcome of a single check.

    TRANSPORT_FAILURE: no HTTP response was obtained
    UNHEALTHY:         a response arrived with a status outside 2xx
    HEALTHY:           a response arrived with a 2xx status
    """

    TRANSPORT_FAILURE = "transport_failure"
    UNHEALTHY = "unhealthy"
    HEALTHY = "healthy"

    @property
    def got_response(self) -> bool:
        return self is not CheckOutcome.TRANSPORT_FAILURE


class LoopState(str, Enum):
    """Lifecycle of a check loop."""

    IDLE = "idle"
    RUNNING = "running"
    PROBING = "probing"
    STOPPED = "stopped"


class StatusCodes:
    """HTTP status code ranges used for classification."""

    SUCCESS_MIN: Final[int] = 200
    SUCCESS_MAX: Final[int] = 300  # exclusive

    @classmethod
    def is_success(cls, status_code: int) -> bool:
        return cls.SUCCESS_MIN <= status_code < cls.SUCCESS_MAX


class Defaults:
    """Default values used when nothing else is configured."""

    CONFIG_PATH: Final[str] = "config.json"
    MAX_ENDPOINTS: Final[int] = 100
    USER_AGENT: Final[str] = "HealthChecker/1.0"
    MAX_URL_LENGTH: Final[int] = 2048
    NO_STATUS: Final[str] = "NONE"
