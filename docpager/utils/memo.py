"""Memoized async computations.

Paginator accessors may be awaited in any order and concurrently. Each
underlying store query is wrapped in an ``AsyncOnce`` so the first caller
starts it and every other caller awaits the same task.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class AsyncOnce(Generic[T]):
    """Run a coroutine factory at most once and share its result.

    The task is created lazily on the first call. A failure is stored like
    a result: every awaiter sees the same exception and the factory is not
    called again. Cancelling one awaiter does not cancel the shared task.

    Example:
        fetch = AsyncOnce(lambda: store.find(query, limit=11))
        results, again = await asyncio.gather(fetch(), fetch())
        assert results is again
    """

    __slots__ = ("_factory", "_task")

    def __init__(self, factory: Callable[[], Awaitable[T]]) -> None:
        self._factory = factory
        self._task: asyncio.Future[T] | None = None

    @property
    def started(self) -> bool:
        """Whether the factory has been invoked."""
        return self._task is not None

    async def __call__(self) -> T:
        if self._task is None:
            self._task = asyncio.ensure_future(self._factory())
        return await asyncio.shield(self._task)


__all__ = ["AsyncOnce"]
