"""Deferred log message rendering.

Paginators describe every store round trip at DEBUG level, and rendering a
filter document is not free. Messages and format arguments handed to a
``LazyLoggerAdapter`` may be zero-argument callables; they are only called
once the record is known to be emitted.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any


def _render(value: Any) -> Any:
    return value() if callable(value) else value


class LazyLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that renders callable messages on demand.

    The stdlib level helpers (``debug``, ``info``...) all route through
    ``log``, so deferral applies to every one of them.

    Example:
        ```python
        logger = get_lazy_logger(__name__)
        logger.debug(lambda: f"seek position {position!r}")
        logger.store_call("find", query, lambda: f"{len(results)} results", limit=11)
        ```
    """

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if not self.isEnabledFor(level):
            return
        super().log(level, _render(msg), *(_render(arg) for arg in args), **kwargs)

    def store_call(
        self,
        operation: str,
        filter: Mapping[str, Any],
        outcome: Any,
        **options: Any,
    ) -> None:
        """Log one store round trip at DEBUG.

        Args:
            operation: Store method name (``find``, ``find_one``...)
            filter: Filter document sent to the store
            outcome: Result summary, or a callable producing it
            **options: Non-empty call options (sort, limit, skip, projection)
        """
        self.log(
            logging.DEBUG,
            "%s %s%s -> %s",
            operation,
            lambda: repr(dict(filter)),
            lambda: "".join(f" {key}={value!r}" for key, value in options.items() if value),
            outcome,
        )


def get_lazy_logger(name: str, **context: Any) -> LazyLoggerAdapter:
    """Build a LazyLoggerAdapter over ``logging.getLogger(name)``.

    Args:
        name: Logger name, usually ``__name__``.
        **context: Bound to every record as ``extra``.
    """
    return LazyLoggerAdapter(logging.getLogger(name), context)
