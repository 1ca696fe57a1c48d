"""
Checker Configuration Loader

Reads the JSON checker configuration::

    {
        "check_interval_seconds": 5,
        "timeout_seconds": 2,
        "Urls": ["https://example.com", "https://example.org/health"]
    }

and turns it into a validated ``CheckerConfig``. Any problem here is a
``ConfigurationError`` raised before the engine exists.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from config.settings import Settings, get_settings
from exceptions.base import ConfigurationError
from exceptions.validation import InvalidURLError
from utils.logger import get_logger
from utils.validators import URLValidator


logger = get_logger("Config")


class CheckerConfig(BaseModel):
    """Validated contents of the checker config file."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    check_interval_seconds: float = Field(
        gt=0,
        description="Seconds between two checks of the same endpoint"
    )
    timeout_seconds: float = Field(
        gt=0,
        description="Per-request timeout in seconds"
    )
    urls: List[str] = Field(
        alias="Urls",
        description="Endpoints to monitor, in reporting order"
    )

    @field_validator("urls")
    @classmethod
    def require_urls(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("No URLs provided")
        return v


def filter_endpoints(
    urls: Iterable[str],
    allowed_schemes: Optional[Iterable[str]] = None,
) -> List[str]:
    """
    Normalize and validate configured URLs.

    Invalid URLs are logged and dropped, duplicates collapse onto their
    first occurrence. Order is preserved.

    Raises:
        ConfigurationError: if no valid URL remains
    """
    endpoints: List[str] = []
    seen = set()

    for raw in urls:
        try:
            url = URLValidator.validate_url(raw, allowed_schemes)
        except InvalidURLError as e:
            logger.warning(f"Skipping invalid URL {raw!r}: {e.reason_message()}")
            continue

        if url in seen:
            logger.warning(f"Skipping duplicate URL {url}")
            continue

        seen.add(url)
        endpoints.append(url)

    if not endpoints:
        raise ConfigurationError("No valid URLs provided", config_key="Urls")

    return endpoints


def load_checker_config(
    path: Optional[Union[str, Path]] = None,
    settings: Optional[Settings] = None,
) -> CheckerConfig:
    """
    Load and validate the checker configuration file.

    Args:
        path: Config file path (``settings.monitoring.config_path`` if omitted)
        settings: Application settings

    Returns:
        CheckerConfig with only valid, unique endpoint URLs

    Raises:
        ConfigurationError: on any read, parse or validation failure
    """
    settings = settings or get_settings()
    config_path = Path(path) if path is not None else settings.monitoring.config_path

    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigurationError(
            f"Configuration file not found: {config_path}",
            config_key="config_path",
            cause=e,
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read configuration file {config_path}: {e}",
            config_key="config_path",
            cause=e,
        ) from e
    except UnicodeDecodeError as e:
        raise ConfigurationError(
            f"Configuration file {config_path} is not valid UTF-8: {e}",
            config_key="config_path",
            cause=e,
        ) from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Configuration file {config_path} is not valid JSON: {e}",
            cause=e,
        ) from e

    if not isinstance(raw, dict):
        raise ConfigurationError(
            "Configuration must be a JSON object",
            expected_type=dict,
        )

    try:
        config = CheckerConfig.model_validate(raw)
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first["loc"])
        raise ConfigurationError(
            f"Invalid configuration: {key}: {first['msg']}",
            config_key=key,
            cause=e,
        ) from e

    endpoints = filter_endpoints(config.urls, settings.monitoring.allowed_url_schemes)
    logger.info(
        f"Loaded {len(endpoints)} endpoint(s) from {config_path}: "
        f"interval={config.check_interval_seconds}s, timeout={config.timeout_seconds}s"
    )
    return config.model_copy(update={"urls": endpoints})
