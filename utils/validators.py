"""
============================================================================
HEALTH CHECKER - VALIDATORS UTILITY
============================================================================
Syntactic validation of endpoint URLs. Only the shape of the URL is
checked (scheme, host, overall syntax); nothing is resolved or fetched.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

from typing import Iterable, Optional
from urllib.parse import urlparse

import validators as external_validators

from config.constants import Defaults
from exceptions.validation import InvalidURLError


# ============================================================================
# URL VALIDATORS
# ============================================================================

class URLValidator:
    """
    URL validation and normalization for configured endpoints.
    """

    DEFAULT_SCHEMES = frozenset({"http", "https"})

    @staticmethod
    def normalize_url(url: str) -> str:
        """
        Normalize a configured address into an endpoint identity.

        Only surrounding whitespace is removed; the address is otherwise
        used exactly as configured so log lines match the config file.
        """
        return url.strip()

    @staticmethod
    def validate_url(url: str, allowed_schemes: Optional[Iterable[str]] = None) -> str:
        """
        Validate a URL and return its normalized form.

        Args:
            url: URL to validate
            allowed_schemes: Accepted schemes (http/https if omitted)

        Returns:
            The normalized URL

        Raises:
            InvalidURLError: if the URL is unusable, with a reason code
        """
        if not isinstance(url, str) or not url.strip():
            raise InvalidURLError("URL is empty", url=url, reason="empty")

        normalized = URLValidator.normalize_url(url)
        if len(normalized) > Defaults.MAX_URL_LENGTH:
            raise InvalidURLError("URL is too long", url=normalized, reason="too_long")

        try:
            parsed = urlparse(normalized)
            hostname = parsed.hostname
        except ValueError as e:
            # e.g. an unclosed IPv6 bracket
            raise InvalidURLError(
                "URL is malformed", url=normalized, reason="malformed", cause=e
            ) from e

        if not parsed.scheme or "://" not in normalized:
            raise InvalidURLError("URL has no scheme", url=normalized, reason="no_scheme")

        schemes = {s.lower() for s in (allowed_schemes or URLValidator.DEFAULT_SCHEMES)}
        if parsed.scheme.lower() not in schemes:
            raise InvalidURLError(
                f"Scheme '{parsed.scheme}' is not allowed",
                url=normalized,
                reason="scheme_not_allowed",
            )

        if not hostname:
            raise InvalidURLError("URL has no host", url=normalized, reason="no_host")

        # validators only understands http(s)/ftp style URLs; check the
        # authority part the same way regardless of the scheme.
        candidate = "http" + normalized[len(parsed.scheme):]
        if external_validators.url(candidate, simple_host=True) is not True:
            raise InvalidURLError("URL is malformed", url=normalized, reason="malformed")

        return normalized

