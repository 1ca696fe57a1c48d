"""
Base Exception Classes for Health Checker

Two kinds of failure surface as exceptions: configuration problems,
detected before any check loop exists, and broken internal contracts,
which stop the whole engine. Everything that goes wrong while talking to
an endpoint is a recorded check result instead.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Type
from datetime import datetime, timezone


class HealthCheckerException(Exception):
    """
    Base Exception Class

    Attributes:
        message: Human-readable error message
        error_code: Numeric code, grouped by thousands per subsystem
        details: Structured context, bound onto the log record
        cause: Underlying exception, if any
        recoverable: False when the process cannot keep checking
        timestamp: When the exception was created (UTC)
    """

    default_error_code: int = 1000
    default_recoverable: bool = True

    def __init__(
        self,
        message: str = "An error occurred",
        error_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
        recoverable: Optional[bool] = None,
    ) -> None:
        super().__init__(message)

        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = dict(details or {})
        self.cause = cause
        self.recoverable = self.default_recoverable if recoverable is None else recoverable
        self.timestamp = datetime.now(timezone.utc)

    @property
    def full_message(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def log_fields(self) -> Dict[str, Any]:
        """Fields for ``logger.bind``; details are flattened in."""
        fields = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "recoverable": self.recoverable,
        }
        fields.update(self.details)
        return fields

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializable form, used by the JSON log sink and by tests.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "recoverable": self.recoverable,
            "cause": repr(self.cause) if self.cause else None,
        }

    def log_format(self) -> str:
        """
        One-line rendering for the console sink.

        Returns:
            ``Type [code] message | key=value ... | cause=...``
        """
        line = f"{self.__class__.__name__} {self.full_message}"
        if self.details:
            line += " | " + " ".join(f"{k}={v}" for k, v in self.details.items())
        if self.cause:
            line += f" | cause={type(self.cause).__name__}: {self.cause}"
        return line

    def __str__(self) -> str:
        return self.full_message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code}, "
            f"details={self.details})"
        )


class ConfigurationError(HealthCheckerException):
    """
    Configuration Error

    Missing or unreadable config file, no usable endpoints, too many
    endpoints, or a non-positive interval/timeout. Always raised before
    any check loop is spawned; the process exits with status 1.
    """

    default_error_code = 1100
    default_recoverable = False

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected_type: Optional[Type] = None,
        **kwargs: Any
    ) -> None:
        """
        Args:
            message: Error message
            config_key: Offending key, e.g. ``timeout_seconds``
            expected_type: Type the value should have had
            **kwargs: Passed to ``HealthCheckerException``
        """
        super().__init__(message, **kwargs)

        if config_key:
            self.details["config_key"] = config_key

        if expected_type:
            self.details["expected_type"] = expected_type.__name__


class ContractViolationError(HealthCheckerException):
    """
    Contract Violation Error

    A broken internal invariant, e.g. a metrics lookup for an endpoint
    that was never registered, or a loop built with a non-positive
    interval. Never caught by the check loops; the engine stops every
    loop and re-raises it.
    """

    default_error_code = 1900
    default_recoverable = False

    def __init__(
        self,
        message: str,
        invariant: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        if invariant:
            self.details["invariant"] = invariant
