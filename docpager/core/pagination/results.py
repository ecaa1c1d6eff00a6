"""Lazy result objects shared by every paginator.

A paginator call returns immediately; nothing is fetched until an
accessor is awaited. Accessors can be awaited in any order, or
concurrently, and always see the same page:

    result = await find_with_cursor(store, sort={"field": "title"}, limit=20)
    edges, has_next = await asyncio.gather(result.edges(), result.page_info.has_next_page())
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial
from typing import Any

from docpager.core.pagination.cursor import encode_cursor
from docpager.core.pagination.schemas import Connection, Edge, PageInfo
from docpager.utils.memo import AsyncOnce


@dataclass(frozen=True, slots=True)
class LazyEdge:
    """A document paired with its cursor.

    The cursor is produced by ``cursor()``; for store paginators it is only
    encoded when asked for.
    """

    node: Any
    _encode: Callable[[], str] = field(repr=False)

    def cursor(self) -> str:
        return self._encode()

    @classmethod
    def for_identifier(cls, node: Any, identifier: Any) -> LazyEdge:
        """Edge whose cursor encodes ``identifier`` on demand."""
        return cls(node, partial(encode_cursor, identifier))

    @classmethod
    def with_cursor(cls, node: Any, cursor: str) -> LazyEdge:
        """Edge with a cursor computed up front."""
        return cls(node, partial(str, cursor))


def first_cursor(edges: list[LazyEdge]) -> str:
    return edges[0].cursor() if edges else ""


def last_cursor(edges: list[LazyEdge]) -> str:
    return edges[-1].cursor() if edges else ""


class BasePageInfo(ABC):
    """Lazily computed page metadata.

    Every accessor is a coroutine. Subclasses add the position fields of
    their paginator (keyset positions or offsets).
    """

    @abstractmethod
    async def has_next_page(self) -> bool: ...

    @abstractmethod
    async def has_previous_page(self) -> bool: ...

    @abstractmethod
    async def start_cursor(self) -> str: ...

    @abstractmethod
    async def end_cursor(self) -> str: ...

    async def positions(self) -> dict[str, int | None]:
        """Position fields for the snapshot, keyed by PageInfo field name."""
        return {}

    async def snapshot(self, total_count: int | None = None) -> PageInfo:
        """Await every field and build a PageInfo model."""
        has_next, has_previous, start, end, positions = await asyncio.gather(
            self.has_next_page(),
            self.has_previous_page(),
            self.start_cursor(),
            self.end_cursor(),
            self.positions(),
        )
        return PageInfo(
            has_next_page=has_next,
            has_previous_page=has_previous,
            start_cursor=start,
            end_cursor=end,
            total_count=total_count,
            **positions,
        )


class PaginationResult(ABC):
    """Result of one paginator call.

    Attributes:
        page_info: Lazily computed page metadata
    """

    page_info: BasePageInfo

    def __init__(self, format_edge: Callable[[LazyEdge], Any] | None = None) -> None:
        self._format_edge = format_edge
        self._edges = AsyncOnce(self._build_edges)

    @abstractmethod
    async def total_count(self) -> int:
        """Documents matching the base filter, ignoring cursor and limit."""

    @abstractmethod
    async def raw_edges(self) -> list[LazyEdge]:
        """Edges of the page before ``format_edge`` is applied."""

    async def _build_edges(self) -> list[Any]:
        edges = await self.raw_edges()
        if self._format_edge is None:
            return list(edges)
        return [self._format_edge(edge) for edge in edges]

    async def edges(self) -> list[Any]:
        """Edges of the page, passed through ``format_edge`` if given."""
        return await self._edges()

    async def resolve(self) -> Connection[Any]:
        """Await everything and return a Connection snapshot.

        The snapshot is built from unformatted edges.
        """
        edges, total = await asyncio.gather(self.raw_edges(), self.total_count())
        page_info = await self.page_info.snapshot(total_count=total)
        return Connection(
            edges=[Edge(node=edge.node, cursor=edge.cursor()) for edge in edges],
            page_info=page_info,
            total_count=total,
        )


__all__ = ["BasePageInfo", "LazyEdge", "PaginationResult", "first_cursor", "last_cursor"]
