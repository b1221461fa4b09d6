"""
Application Settings - Main Layer

Use Pydantic Settings for configuration management.
This module handles configuration settings provided using
environment variables, .env files and default values.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from uptimer.infrastructure.services.execution_engine import default_max_concurrency
from uptimer.shared import EnumEnvironment, EnumLogLevel
from uptimer.shared.consts import (
    DEFAULT_CHECK_TIMEOUT_S,
    DEFAULT_HTTP_TIMEOUT_S,
    DEFAULT_RETRY_BACKOFF_S,
)


class EngineSettings(BaseSettings):
    """Execution engine configuration settings."""

    max_concurrency: int = Field(
        default_factory=default_max_concurrency,
        ge=1,
        description="Maximum number of checks in flight at once",
    )
    check_timeout: float = Field(
        default=DEFAULT_CHECK_TIMEOUT_S,
        gt=0,
        description="Deadline for a single check, in seconds",
    )
    retries: int = Field(
        default=0, ge=0, description="Extra attempts for a failed check"
    )
    retry_backoff: float = Field(
        default=DEFAULT_RETRY_BACKOFF_S,
        ge=0,
        description="Initial delay between attempts, doubled each retry",
    )

    model_config = SettingsConfigDict(
        env_prefix="ENGINE_", case_sensitive=False, extra="ignore"
    )


class CheckerSettings(BaseSettings):
    """Checker implementation settings."""

    http_timeout: float = Field(
        default=DEFAULT_HTTP_TIMEOUT_S,
        gt=0,
        description="httpx client timeout for the http checker, in seconds",
    )
    http_verify_tls: bool = Field(
        default=True, description="Verify TLS certificates for https checks"
    )

    model_config = SettingsConfigDict(
        env_prefix="CHECKER_", case_sensitive=False, extra="ignore"
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: EnumLogLevel = Field(
        default=EnumLogLevel.WARNING, description="Logging level"
    )
    file_path: Optional[str] = Field(
        default=None, description="Log file path (if None, logs to stderr only)"
    )
    json_logs: Optional[bool] = Field(
        default=None,
        description="Render logs as JSON; defaults to True in production",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_", case_sensitive=False, extra="ignore"
    )


class AppSettings(BaseSettings):
    """Main application settings, aggregating all sub-settings."""

    environment: EnumEnvironment = Field(
        default=EnumEnvironment.DEVELOPMENT, description="Application environment"
    )

    engine: EngineSettings = Field(default_factory=EngineSettings)
    checkers: CheckerSettings = Field(default_factory=CheckerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


def get_settings() -> AppSettings:
    """
    Get application settings instance Factory.

    Used to be mocked in tests, allowing different settings based on enviroment.
    """
    return AppSettings()
