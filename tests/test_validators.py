"""
Unit Tests for URLValidator
"""

import pytest

from exceptions.validation import InvalidURLError
from utils.validators import URLValidator


@pytest.mark.unit
class TestURLValidator:

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com",
            "https://example.com/health",
            "http://127.0.0.1:9000/status?verbose=1",
            "http://localhost:8080/health",
            "https://api.example.org:8443/v1/ping",
        ],
    )
    def test_valid_urls(self, url):
        assert URLValidator.validate_url(url) == url

    @pytest.mark.parametrize(
        "url,reason",
        [
            ("", "empty"),
            ("   ", "empty"),
            ("not a url", "no_scheme"),
            ("example.com/health", "no_scheme"),
            ("mailto:ops@example.com", "no_scheme"),
            ("ftp://files.example.com", "scheme_not_allowed"),
            ("http://", "no_host"),
            ("https://exa mple.com", "malformed"),
            ("http://[::1", "malformed"),
            ("https://example.com/" + "a" * 2100, "too_long"),
        ],
    )
    def test_invalid_urls(self, url, reason):
        with pytest.raises(InvalidURLError) as exc_info:
            URLValidator.validate_url(url)

        assert exc_info.value.details["reason"] == reason
        assert exc_info.value.reason_message() == InvalidURLError.REASONS[reason]

    def test_surrounding_whitespace_is_stripped(self):
        assert URLValidator.validate_url("  https://example.com/health\n") == "https://example.com/health"

    def test_custom_schemes(self):
        assert URLValidator.validate_url("ftp://files.example.com", {"ftp"}) == "ftp://files.example.com"
        with pytest.raises(InvalidURLError):
            URLValidator.validate_url("http://example.com", {"https"})

    def test_non_string_is_empty(self):
        with pytest.raises(InvalidURLError) as exc_info:
            URLValidator.validate_url(None)
        assert exc_info.value.details["reason"] == "empty"
