"""
Settings Module for Health Checker

Process-level configuration using Pydantic Settings.
Supports environment variables, .env files, and runtime configuration.
The list of endpoints and the check cadence live in the JSON config
file (see config.loader); this module covers everything around it.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Dict, Optional, Set
from enum import Enum

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from config.constants import Defaults


class Environment(str, Enum):
    """Application environment enumeration."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging level enumeration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class BaseSettingsConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True
    )


class MonitoringSettings(BaseSettingsConfig):
    """
    Monitoring Engine Configuration Settings

    Controls where the checker config is read from, the safety ceiling
    on endpoints, the reporting cadence and the shared HTTP client.
    """

    model_config = SettingsConfigDict(
        env_prefix="MONITOR_",
        env_file=".env",
        extra="ignore"
    )

    config_path: Path = Field(
        default=Path(Defaults.CONFIG_PATH),
        description="Path to the JSON checker configuration"
    )

    # Engine limits
    max_endpoints: int = Field(
        default=Defaults.MAX_ENDPOINTS,
        ge=1,
        le=10000,
        description="Maximum number of endpoints a single process may poll"
    )
    report_interval: Optional[float] = Field(
        default=None,
        gt=0,
        description="Seconds between metrics reports (defaults to the check interval)"
    )

    # HTTP client settings
    max_connections: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Connection pool size of the shared HTTP client"
    )
    max_keepalive_connections: int = Field(
        default=20,
        ge=0,
        le=1000,
        description="Idle keep-alive connections kept in the pool"
    )
    follow_redirects: bool = Field(
        default=True,
        description="Follow HTTP redirects before classifying the status"
    )
    user_agent: str = Field(
        default=Defaults.USER_AGENT,
        description="User-Agent header sent with every check"
    )

    # Content security
    allowed_url_schemes: Annotated[Set[str], NoDecode] = Field(
        default_factory=lambda: {"http", "https"},
        description="Allowed URL schemes for monitoring"
    )

    @field_validator("allowed_url_schemes", mode="before")
    @classmethod
    def parse_schemes(cls, v: Any) -> Set[str]:
        """Parse schemes from a comma separated string or a list."""
        if isinstance(v, str):
            return {x.strip().lower() for x in v.split(",") if x.strip()}

        if isinstance(v, (list, set, tuple)):
            return {str(x).lower() for x in v}

        return v

    @model_validator(mode="after")
    def validate_pool(self) -> "MonitoringSettings":
        """Validate connection pool relationships."""
        if self.max_keepalive_connections > self.max_connections:
            raise ValueError("max_keepalive_connections cannot exceed max_connections")
        return self

    def client_options(self) -> Dict[str, Any]:
        """Keyword options for the shared httpx client."""
        return {
            "max_connections": self.max_connections,
            "max_keepalive_connections": self.max_keepalive_connections,
            "follow_redirects": self.follow_redirects,
            "user_agent": self.user_agent,
        }


class LoggingSettings(BaseSettingsConfig):
    """
    Logging Configuration Settings

    Console output always goes to stderr; file and JSON output are
    optional.
    """

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        extra="ignore"
    )

    level: LogLevel = Field(
        default=LogLevel.DEBUG,
        description="Minimum logging level"
    )

    # Console logging
    console_colored: bool = Field(
        default=True,
        description="Enable colored console output"
    )
    time_format: str = Field(
        default="h:mm A",
        description="loguru time format used on the console"
    )
    json_enabled: bool = Field(
        default=False,
        description="Serialize console records as JSON"
    )

    # File logging
    file_enabled: bool = Field(
        default=False,
        description="Enable file logging"
    )
    file_path: Path = Field(
        default=Path("logs/healthchecker.log"),
        description="Log file path"
    )
    file_rotation: str = Field(
        default="10 MB",
        description="Log file rotation size or interval"
    )
    file_retention: str = Field(
        default="7 days",
        description="How long rotated log files are kept"
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        """Accept lower case level names from the environment."""
        if isinstance(v, str):
            return v.upper()
        return v


class Settings(BaseSettingsConfig):
    """
    Main Settings Class

    Aggregates all settings sections and provides the main
    configuration interface for the application.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment"
    )

    app_name: str = Field(
        default="Health Checker",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )

    # Nested settings
    monitoring: MonitoringSettings = Field(
        default_factory=MonitoringSettings
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    @model_validator(mode="after")
    def configure_for_environment(self) -> "Settings":
        """Apply environment-specific configuration."""
        if self.is_production and self.logging.level == LogLevel.DEBUG:
            self.logging.level = LogLevel.INFO

        return self


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    This function is cached to ensure a single settings instance
    is used throughout the application lifecycle.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
