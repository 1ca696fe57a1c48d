"""
Validation Exception Classes for Health Checker

Raised while turning configured endpoint addresses into endpoints. The
loader catches these per URL, logs the reason and drops the URL.
"""

from __future__ import annotations

from typing import Any, Optional
from exceptions.base import HealthCheckerException

# values longer than this are cut before they reach a log line
MAX_VALUE_LENGTH = 100


class ValidationException(HealthCheckerException):
    """Base class for rejected input values."""

    default_error_code = 3000
    default_recoverable = True

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        if field:
            self.details["field"] = field

        if value is not None:
            text = str(value)
            if len(text) > MAX_VALUE_LENGTH:
                text = text[:MAX_VALUE_LENGTH] + "..."
            self.details["value"] = text


class InvalidURLError(ValidationException):
    """
    Invalid URL Error

    A configured endpoint address is not a usable absolute URL. The
    ``reason`` detail is one of the keys of ``REASONS``.
    """

    default_error_code = 3001

    REASONS = {
        "empty": "URL is empty",
        "no_scheme": "URL must start with a scheme such as http:// or https://",
        "scheme_not_allowed": "URL scheme is not allowed",
        "no_host": "URL has no host",
        "too_long": "URL is too long (max 2048 characters)",
        "malformed": "URL is malformed",
    }

    def __init__(
        self,
        message: str = "Invalid URL format",
        url: Optional[str] = None,
        reason: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, field="url", value=url, **kwargs)

        if reason:
            self.details["reason"] = reason

    def reason_message(self) -> str:
        """Human readable explanation for the ``reason`` code."""
        return self.REASONS.get(self.details.get("reason", ""), self.message)
