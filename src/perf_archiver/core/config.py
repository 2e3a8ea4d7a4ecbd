"""Configuration management for perf-archiver.

This module provides configuration classes using pydantic-settings
for environment variable management and validation.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be configured via environment variables with
    the PERF_ARCHIVER_ prefix.

    Attributes:
        archive_path: Default archive file used by the CLI.
        hostname: Machine name to record under (auto-detected if unset).
        default_tolerance: Tolerance applied to results recorded without one.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).

    Example:
        >>> # export PERF_ARCHIVER_HOSTNAME=node1
        >>> settings = Settings()
        >>> settings.hostname
        'node1'

    Environment Variables:
        PERF_ARCHIVER_ARCHIVE_PATH: Archive file (default: performance_archive.yaml)
        PERF_ARCHIVER_HOSTNAME: Machine name override (optional)
        PERF_ARCHIVER_DEFAULT_TOLERANCE: Relative tolerance (optional, exact if unset)
        PERF_ARCHIVER_LOG_LEVEL: Logging level (default: INFO)
    """

    model_config = SettingsConfigDict(
        env_prefix="PERF_ARCHIVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    archive_path: str = Field(
        default="performance_archive.yaml",
        description="Default archive file path",
    )
    hostname: str | None = Field(
        default=None,
        description="Machine name override; detected from the host if unset",
    )
    default_tolerance: float | None = Field(
        default=None,
        ge=0,
        description="Relative tolerance for results recorded without one",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
