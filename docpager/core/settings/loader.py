"""Process-wide settings instances.

Each loader reads the environment once; later calls return the same frozen
object. Tests that change ``PAGINATION_*`` or ``LOG_*`` variables call
``clear_settings_cache()`` so the next paginator call sees them.
"""

from __future__ import annotations

from functools import lru_cache

from .logs import LoggingSettings
from .pagination import PaginationSettings


@lru_cache(maxsize=1)
def get_pagination_settings() -> PaginationSettings:
    """Page size limits and defaults used by option validation."""
    return PaginationSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    return LoggingSettings()


_LOADERS = (get_pagination_settings, get_logging_settings)


def clear_settings_cache() -> None:
    """Forget every loaded settings instance."""
    for loader in _LOADERS:
        loader.cache_clear()
