"""Settings for the process-wide logging setup."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

Level = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(BaseSettings):
    """Console logging for applications embedding the paginators.

    Read from ``LOG_*`` variables, e.g. ``LOG_LEVEL=WARNING`` or
    ``LOG_ENGINE_LEVEL=DEBUG`` to trace every store query while keeping the
    rest of the application quiet.
    """

    level: Level = Field(default="INFO", description="Root logger level")
    engine_level: Level | None = Field(
        default=None,
        description="Level of the docpager logger; inherits the root level when unset",
    )
    format: str = Field(
        default="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        description="Console line format",
    )
    date_format: str = Field(default="%Y-%m-%dT%H:%M:%S", description="Format of %(asctime)s")
    capture_warnings: bool = Field(default=True, description="Send warnings.warn() to logging")

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    def to_logging_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``configure_logging``."""
        return {
            "log_level": self.level,
            "engine_level": self.engine_level,
            "log_format": self.format,
            "date_format": self.date_format,
            "capture_warnings": self.capture_warnings,
        }
