"""Logging infrastructure.

Basic usage:
    import logging

    from docpager.infra.logging import get_lazy_logger, setup_logging

    setup_logging()
    logger = logging.getLogger(__name__)
    logger.info("Serving page")

    lazy_logger = get_lazy_logger(__name__)
    lazy_logger.debug(lambda: f"Query: {render(query)}")  # Only runs if DEBUG enabled
"""

from docpager.infra.logging.config import configure_logging, setup_logging
from docpager.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "LazyLoggerAdapter",
    "configure_logging",
    "get_lazy_logger",
    "setup_logging",
]
