"""Configuration settings for the safedialer client, server and CLI.

The address gate itself has no configuration: its ports and reserved ranges
are constants. These settings only cover the surrounding HTTP glue.
"""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_FORMATS = {"text", "json"}


class Settings(BaseSettings):
    """Application settings loaded from ``SAFEDIALER_*`` environment variables."""

    # Request Configuration
    request_timeout: int = Field(default=30, ge=1, le=300)
    max_retries: int = Field(default=3, ge=1, le=10)
    follow_redirects: bool = Field(default=True)
    max_redirects: int = Field(default=5, ge=0, le=20)
    user_agent: str = Field(default="safedialer/0.1.0", min_length=1)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="text")

    model_config = SettingsConfigDict(
        env_prefix="SAFEDIALER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level

    @field_validator("log_format")
    @classmethod
    def _validate_log_format(cls, value: str) -> str:
        fmt = value.strip().lower()
        if fmt not in _LOG_FORMATS:
            raise ValueError(f"log_format must be one of {sorted(_LOG_FORMATS)}")
        return fmt


def configure_logging(settings: Settings) -> None:
    """Set up root logging from *settings*."""
    if settings.log_format == "json":
        fmt = '{"time": "%(asctime)s", "logger": "%(name)s", "level": "%(levelname)s", "message": "%(message)s"}'
    else:
        fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    logging.basicConfig(level=getattr(logging, settings.log_level), format=fmt)
