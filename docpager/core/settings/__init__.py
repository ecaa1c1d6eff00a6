"""Pydantic Settings v2 configuration.

Import settings via the cached loaders:
    from docpager.core.settings import get_pagination_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .loader import clear_settings_cache, get_logging_settings, get_pagination_settings
from .logs import LoggingSettings
from .pagination import PaginationSettings

__all__ = [
    "LoggingSettings",
    "PaginationSettings",
    "clear_settings_cache",
    "get_logging_settings",
    "get_pagination_settings",
]
