"""Pydantic Settings for the inspector service.

All environment variables use the INSPECTOR_ prefix and may also be placed in
a ``.env`` file in the working directory.
Example: INSPECTOR_PORT=3000, INSPECTOR_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class InspectionConfig:
    """Read-only logging gate handed to the inspection middleware.

    ``log_enabled`` switches body logging on or off. ``verbosity`` is the
    numeric log threshold the process was started with; response bodies are
    only captured when it is DEBUG or finer.
    """

    log_enabled: bool = True
    verbosity: int = logging.INFO

    @property
    def capture_responses(self) -> bool:
        return self.log_enabled and self.verbosity <= logging.DEBUG


class InspectorSettings(BaseSettings):
    """Inspector service configuration validated from environment variables."""

    # Server
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)

    # Logging
    log_level: str = "INFO"
    log_body: bool = True  # gate for request/response body logging
    log_format: str = "json"

    # CORS
    cors_allow_origins: list[str] = ["*"]
    cors_allow_methods: list[str] = ["GET", "POST", "PUT", "DELETE"]
    cors_allow_headers: list[str] = ["authorization", "content-type"]

    # Compression
    compression_minimum_size: int = Field(default=500, ge=0)

    model_config = SettingsConfigDict(
        env_prefix="INSPECTOR_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        fmt = value.strip().lower()
        if fmt not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return fmt

    def inspection_config(self) -> InspectionConfig:
        """Freeze the logging gate for the inspection middleware."""
        return InspectionConfig(
            log_enabled=self.log_body,
            verbosity=getattr(logging, self.log_level),
        )
