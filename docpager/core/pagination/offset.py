"""Offset (skip/limit) pagination against a document store.

The page and both neighbours are detected with a single query:

    skip  = max(offset - 1, 0)
    limit = limit + 1 (+ 1 when offset > 0)

With a non-zero offset the first fetched document is the one just before
the page; its presence answers ``has_previous_page``. A document past
``limit`` answers ``has_next_page``. No count query is needed for either.

Example:
    result = await find_with_offset(store, sort={"field": "name"}, limit=25, offset=50)
    edges = await result.edges()
    end = await result.page_info.end_offset()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from docpager.core.pagination.filters import with_identifier
from docpager.core.pagination.params import OffsetPaginationParams, validate_params
from docpager.core.pagination.results import (
    BasePageInfo,
    LazyEdge,
    PaginationResult,
    first_cursor,
    last_cursor,
)
from docpager.core.pagination.sorting import ID_FIELD, build_store_sort
from docpager.infra.logging import get_lazy_logger
from docpager.infra.store.base import ensure_store
from docpager.utils.memo import AsyncOnce

if TYPE_CHECKING:
    from docpager.infra.store.base import Document, DocumentStore

_lazy = get_lazy_logger(__name__)


@dataclass(frozen=True, slots=True)
class OffsetWindow:
    """Documents of one offset page.

    Attributes:
        results: Page documents, sentinel and peek removed
        has_more_results: A document exists after the page
        has_previous_results: A document exists before the page
    """

    results: list[Document]
    has_more_results: bool
    has_previous_results: bool


class OffsetPaginator(PaginationResult):
    """Skip/limit pagination over a DocumentStore.

    Build with :func:`find_with_offset`.
    """

    def __init__(self, store: DocumentStore, params: OffsetPaginationParams) -> None:
        super().__init__(format_edge=params.format_edge)
        self.store = ensure_store(store)
        self.params = params
        self.store_sort = build_store_sort(params.sort)
        self.projection = with_identifier(params.projection)
        self._window = AsyncOnce(self._fetch_window)
        self._total = AsyncOnce(self._count_total)
        self.page_info = OffsetPageInfo(self)

    @property
    def offset(self) -> int:
        return self.params.offset

    async def _fetch_window(self) -> OffsetWindow:
        params = self.params
        limit = params.limit + 1 + (1 if params.offset else 0)
        skip = max(params.offset - 1, 0)
        results = list(
            await self.store.find(
                params.query,
                sort=self.store_sort,
                limit=limit,
                skip=skip,
                projection=self.projection,
            )
        )
        _lazy.store_call(
            "find", params.query, lambda: f"{len(results)} results", skip=skip, limit=limit
        )

        previous = results.pop(0) if params.offset and results else None
        has_more_results = len(results) > params.limit
        if has_more_results:
            results.pop()
        return OffsetWindow(
            results=results,
            has_more_results=has_more_results,
            has_previous_results=previous is not None,
        )

    async def _count_total(self) -> int:
        count = await self.store.count_documents(dict(self.params.query))
        _lazy.store_call("count_documents", self.params.query, count)
        return count

    async def window(self) -> OffsetWindow:
        """The page's documents, fetched once."""
        return await self._window()

    async def total_count(self) -> int:
        return await self._total()

    async def raw_edges(self) -> list[LazyEdge]:
        window = await self._window()
        return [LazyEdge.for_identifier(node, node[ID_FIELD]) for node in window.results]

    async def _build_edges(self) -> list[Any]:
        if self.params.on_load_edges is not None:
            window = await self._window()
            self.params.on_load_edges(list(window.results))
        return await super()._build_edges()


class OffsetPageInfo(BasePageInfo):
    """Page metadata for an OffsetPaginator."""

    def __init__(self, paginator: OffsetPaginator) -> None:
        self._paginator = paginator

    async def has_next_page(self) -> bool:
        return (await self._paginator.window()).has_more_results

    async def has_previous_page(self) -> bool:
        return (await self._paginator.window()).has_previous_results

    async def start_cursor(self) -> str:
        return first_cursor(await self._paginator.raw_edges())

    async def end_cursor(self) -> str:
        return last_cursor(await self._paginator.raw_edges())

    async def start_offset(self) -> int:
        return self._paginator.offset

    async def end_offset(self) -> int:
        window = await self._paginator.window()
        return self._paginator.offset + len(window.results)

    async def positions(self) -> dict[str, int | None]:
        return {
            "start_offset": await self.start_offset(),
            "end_offset": await self.end_offset(),
        }


async def find_with_offset(store: DocumentStore, **params: Any) -> OffsetPaginator:
    """Paginate ``store`` by offset.

    Args:
        store: Document store
        **params: Options of :class:`OffsetPaginationParams`: ``query``,
            ``sort``, ``limit``, ``offset``, ``projection``, ``format_edge``,
            ``on_load_edges``

    Raises:
        PaginationValidationError: Invalid options
    """
    options = validate_params(OffsetPaginationParams, params)
    return OffsetPaginator(store, options)


__all__ = ["OffsetPageInfo", "OffsetPaginator", "OffsetWindow", "find_with_offset"]
