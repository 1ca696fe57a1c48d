"""
Monitoring Exception Classes for Health Checker

Raised from the probing layer when a check cannot even be attempted.
Ordinary network failures are not exceptions at this level; they are
recorded as failed checks.
"""

from __future__ import annotations

from typing import Any, Optional
from exceptions.base import HealthCheckerException


class MonitoringException(HealthCheckerException):
    """
    Base Monitoring Exception

    Parent class for all monitoring-related exceptions.
    """

    default_error_code = 4000
    default_recoverable = True

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        if url:
            self.details["url"] = url


class ProbeError(MonitoringException):
    """
    Probe Error

    The HTTP request for an endpoint could not be built. Endpoints are
    validated at startup, so this points at a defect rather than an
    environmental problem.
    """

    default_error_code = 4001
    default_recoverable = False
