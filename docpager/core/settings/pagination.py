"""Defaults applied when a paginator call leaves an option out.

Read from ``PAGINATION_*`` variables or a ``.env`` file, for example
``PAGINATION_DEFAULT_LIMIT=25`` or ``PAGINATION_MAX_LIMIT=200``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Page size bounds and default options for every paginator.

    ``max_limit`` caps what a call may request; a larger ``limit`` is a
    validation error rather than being silently clamped.
    """

    default_limit: int = Field(default=10, ge=1, le=10_000, description="Page size when none is given")
    max_limit: int = Field(default=100, ge=1, le=10_000, description="Largest page size a call may request")
    default_direction: Literal["AFTER", "BEFORE"] = Field(
        default="AFTER",
        description="Keyset direction when none is given",
    )
    id_path: str = Field(
        default="_id",
        min_length=1,
        description="Dotted identifier path for in-memory documents",
    )

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _default_within_max(self) -> PaginationSettings:
        if self.default_limit > self.max_limit:
            raise ValueError("default_limit cannot exceed max_limit")
        return self
