"""Keyset (cursor) pagination against a document store.

One paginator instance serves one call:

    UNSTARTED -> WINDOW_FETCHED -> (RESET_FETCHED) -> RESOLVED

The window query runs on the first accessor that needs it and is shared by
every later (or concurrent) accessor. Secondary queries, the other-side
existence check and the position count, are memoized the same way and only
run when their accessor is awaited.

Window query:
    filter  = seek predicate AND base filter
    sort    = {field: order, _id: order}, inverted for BEFORE
    limit   = limit + 1, the extra document peeks for another page

BEFORE results are reversed back to caller order, and the peeked document
is dropped from the tail (AFTER) or head (BEFORE). A BEFORE page that comes
back shorter than ``limit`` would leave the caller on an artificially short
first page, so the first natural page is returned instead (reset).

Example:
    result = await find_with_cursor(
        store,
        query={"status": "published"},
        sort={"field": "title", "order": 1},
        limit=20,
        cursor=request_cursor,
        direction="AFTER",
    )
    edges = await result.edges()
    if await result.page_info.has_next_page():
        next_cursor = await result.page_info.end_cursor()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from docpager.core.pagination.cursor import PaginationCursor
from docpager.core.pagination.filters import (
    SeekPosition,
    build_boundary_predicate,
    build_seek_predicate,
    combine_filters,
    resolve_seek_position,
    with_identifier,
)
from docpager.core.pagination.params import CursorPaginationParams, validate_params
from docpager.core.pagination.results import (
    BasePageInfo,
    LazyEdge,
    PaginationResult,
    first_cursor,
    last_cursor,
)
from docpager.core.pagination.sorting import ID_FIELD, Direction, build_store_sort, invert_sort
from docpager.infra.logging import get_lazy_logger
from docpager.infra.store.base import DocumentStore, ensure_store
from docpager.utils.memo import AsyncOnce

if TYPE_CHECKING:
    from docpager.infra.store.base import Document

logger = logging.getLogger(__name__)
_lazy = get_lazy_logger(__name__)


@dataclass(frozen=True, slots=True)
class Window:
    """Documents of one page, in caller order.

    Attributes:
        results: Page documents, peek element already removed
        has_more_results: Another page exists in the active direction
        reset: The BEFORE query came back short and was replaced by the
            first natural page
    """

    results: list[Document]
    has_more_results: bool
    reset: bool = False


class KeysetPaginator(PaginationResult):
    """Cursor pagination over a DocumentStore.

    Build with :func:`find_with_cursor`. The cursor is decoded in the
    constructor, so a malformed cursor fails before any query is issued.
    """

    def __init__(self, store: DocumentStore, params: CursorPaginationParams) -> None:
        super().__init__(format_edge=params.format_edge)
        self.store = ensure_store(store)
        self.params = params
        self.identifier: Any = None
        if params.cursor is not None:
            self.identifier = PaginationCursor.decode(params.cursor)

        self.store_sort = build_store_sort(params.sort)
        self.query_sort = (
            invert_sort(self.store_sort) if params.direction is Direction.BEFORE else self.store_sort
        )
        self.projection = with_identifier(params.projection)

        self._position = AsyncOnce(self._resolve_position)
        self._window = AsyncOnce(self._fetch_window)
        self._other_side = AsyncOnce(self._check_other_side)
        self._preceding = AsyncOnce(self._count_preceding)
        self._total = AsyncOnce(self._count_total)
        self.page_info = KeysetPageInfo(self)

    @property
    def has_cursor(self) -> bool:
        return self.params.cursor is not None

    @property
    def direction(self) -> Direction:
        return self.params.direction

    async def _resolve_position(self) -> SeekPosition:
        return await resolve_seek_position(self.store, self.identifier, self.params.sort)

    async def _find(self, filter: dict[str, Any], sort: dict[str, int]) -> list[Document]:
        limit = self.params.limit + 1
        results = await self.store.find(filter, sort=sort, limit=limit, projection=self.projection)
        _lazy.store_call("find", filter, lambda: f"{len(results)} results", sort=sort, limit=limit)
        return list(results)

    async def _fetch_window(self) -> Window:
        params = self.params
        seek = None
        if self.has_cursor:
            position = await self._position()
            seek = build_seek_predicate(position, self.direction, params.sort)

        results = await self._find(combine_filters(seek, params.query), self.query_sort)

        if self.direction is Direction.BEFORE:
            results.reverse()
            if seek is not None and len(results) < params.limit:
                return await self._fetch_reset_window()

        has_more_results = len(results) > params.limit
        if has_more_results:
            # Drop the peeked document.
            if self.direction is Direction.BEFORE:
                results.pop(0)
            else:
                results.pop()
        return Window(results=results, has_more_results=has_more_results)

    async def _fetch_reset_window(self) -> Window:
        logger.debug(
            "BEFORE page shorter than limit=%d, returning the first page instead",
            self.params.limit,
        )
        results = await self._find(dict(self.params.query), self.store_sort)
        has_more_results = len(results) > self.params.limit
        if has_more_results:
            results.pop()
        return Window(results=results, has_more_results=has_more_results, reset=True)

    async def _check_other_side(self) -> bool:
        """Whether documents exist on the far side of the cursor.

        The boundary predicate includes the cursor's own document, so a
        cursor taken from the previous page always finds at least itself.
        """
        if not self.has_cursor:
            return False
        window = await self._window()
        if not window.results:
            return False
        position = await self._position()
        boundary = build_boundary_predicate(position, self.direction, self.params.sort)
        doc = await self.store.find_one(
            combine_filters(boundary, self.params.query),
            sort=self.query_sort,
            projection={ID_FIELD: 1},
        )
        _lazy.store_call(
            "find_one", boundary, lambda: f"other side found={doc is not None}", sort=self.query_sort
        )
        return doc is not None

    async def _count_preceding(self) -> int:
        """Documents ordered before the first document of the page."""
        window = await self._window()
        if window.reset:
            return 0
        if not self.has_cursor:
            if self.direction is Direction.AFTER:
                return 0
            return await self._total() - len(window.results)

        position = await self._position()
        sort = self.params.sort
        if self.direction is Direction.AFTER:
            # The cursor and everything before it.
            predicate = build_boundary_predicate(position, Direction.AFTER, sort)
            return await self._count(combine_filters(predicate, self.params.query))

        predicate = build_seek_predicate(position, Direction.BEFORE, sort)
        before_cursor = await self._count(combine_filters(predicate, self.params.query))
        return before_cursor - len(window.results)

    async def _count(self, filter: dict[str, Any]) -> int:
        count = await self.store.count_documents(filter)
        _lazy.store_call("count_documents", filter, count)
        return count

    async def _count_total(self) -> int:
        return await self._count(dict(self.params.query))

    async def window(self) -> Window:
        """The page's documents, fetched once."""
        return await self._window()

    async def other_side_exists(self) -> bool:
        return await self._other_side()

    async def preceding_count(self) -> int:
        return await self._preceding()

    async def total_count(self) -> int:
        """Count of the base filter, not the cursor query."""
        return await self._total()

    async def raw_edges(self) -> list[LazyEdge]:
        window = await self._window()
        return [LazyEdge.for_identifier(node, node[ID_FIELD]) for node in window.results]


class KeysetPageInfo(BasePageInfo):
    """Page metadata for a KeysetPaginator."""

    def __init__(self, paginator: KeysetPaginator) -> None:
        self._paginator = paginator

    async def has_next_page(self) -> bool:
        p = self._paginator
        window = await p.window()
        if p.direction is Direction.AFTER or window.reset:
            return window.has_more_results
        return await p.other_side_exists()

    async def has_previous_page(self) -> bool:
        p = self._paginator
        window = await p.window()
        if window.reset:
            return False
        if p.direction is Direction.BEFORE:
            return window.has_more_results
        return await p.other_side_exists()

    async def start_cursor(self) -> str:
        return first_cursor(await self._paginator.raw_edges())

    async def end_cursor(self) -> str:
        return last_cursor(await self._paginator.raw_edges())

    async def starting_position(self) -> int | None:
        """1-based position of the first document, None for an empty page."""
        window = await self._paginator.window()
        if not window.results:
            return None
        return await self._paginator.preceding_count() + 1

    async def ending_position(self) -> int | None:
        """1-based position of the last document, None for an empty page."""
        window = await self._paginator.window()
        if not window.results:
            return None
        return await self._paginator.preceding_count() + len(window.results)

    async def positions(self) -> dict[str, int | None]:
        return {
            "starting_position": await self.starting_position(),
            "ending_position": await self.ending_position(),
        }


async def find_with_cursor(store: DocumentStore, **params: Any) -> KeysetPaginator:
    """Paginate ``store`` with a cursor.

    Args:
        store: Document store
        **params: Options of :class:`CursorPaginationParams`: ``query``,
            ``sort``, ``limit``, ``cursor``, ``direction``, ``projection``,
            ``format_edge``

    Returns:
        Lazy paginator exposing ``total_count()``, ``edges()`` and
        ``page_info``

    Raises:
        PaginationValidationError: Invalid options
        CursorDecodeError: Malformed cursor
    """
    options = validate_params(CursorPaginationParams, params)
    return KeysetPaginator(store, options)


__all__ = ["KeysetPageInfo", "KeysetPaginator", "Window", "find_with_cursor"]
