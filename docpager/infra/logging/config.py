"""Console logging for applications embedding the paginators.

The engine only creates loggers under ``docpager``. An application calls
``setup_logging()`` once at start-up; it is a no-op on later calls.
"""

from __future__ import annotations

import logging
import logging.config
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from docpager.core.settings.logs import LoggingSettings

logger = logging.getLogger(__name__)

ENGINE_LOGGER = "docpager"

_LOGGING_INITIALIZED = False


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **overrides: Any,
) -> None:
    """Configure logging from settings, once per process.

    Args:
        log_settings: Settings to apply; ``get_logging_settings()`` when None.
        force: Configure again even if already done.
        **overrides: Replace individual ``configure_logging`` arguments.
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    if log_settings is None:
        from docpager.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    configure_logging(**{**log_settings.to_logging_kwargs(), **overrides})
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    engine_level: str | None = None,
    log_format: str = "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    date_format: str = "%Y-%m-%dT%H:%M:%S",
    capture_warnings: bool = True,
) -> None:
    """Install a single stderr handler on the root logger.

    Args:
        log_level: Root level.
        engine_level: Level of the ``docpager`` logger; None inherits the root.
        log_format: Console line format.
        date_format: Format of ``%(asctime)s``.
        capture_warnings: Route ``warnings.warn()`` through logging.
    """
    engine: dict[str, Any] = {"level": engine_level} if engine_level else {"level": "NOTSET"}
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"console": {"format": log_format, "datefmt": date_format}},
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "formatter": "console",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {ENGINE_LOGGER: engine},
            "root": {"level": log_level, "handlers": ["stderr"]},
        }
    )
    logging.captureWarnings(capture_warnings)
    logger.debug("Logging configured (root=%s, %s=%s)", log_level, ENGINE_LOGGER, engine["level"])
