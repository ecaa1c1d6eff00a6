"""Pagination over documents that are already in memory.

Same contract as the store paginators, applied to a list (or a callable
producing one, sync or async):

1. filter with a MongoDB-style query
2. stable multi-key sort, strings compared by their slug so accents and
   case do not split neighbours; the identifier is the final tiebreaker
3. a cursor is attached to every document up front
4. slice Relay style: AFTER is ``first=limit, after=cursor``, BEFORE is
   ``last=limit, before=cursor``

Everything is in memory, so ``has_next_page``/``has_previous_page`` look at
what remains on either side of the slice instead of peeking.

Example:
    result = await find_with_objects(
        articles,
        query={"published": True},
        sort=[{"field": "title", "order": 1}],
        limit=10,
    )
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

from docpager.core.exceptions import PaginationValidationError
from docpager.core.pagination.cursor import PaginationCursor
from docpager.core.pagination.matching import filter_objects
from docpager.core.pagination.params import (
    ObjectPaginationParams,
    OffsetObjectPaginationParams,
    validate_params,
)
from docpager.core.pagination.results import (
    BasePageInfo,
    LazyEdge,
    PaginationResult,
    first_cursor,
    last_cursor,
)
from docpager.core.pagination.sorting import Direction, SortSpec, get_path, sort_documents
from docpager.infra.logging import get_lazy_logger
from docpager.utils.memo import AsyncOnce

_lazy = get_lazy_logger(__name__)

DocumentSource: TypeAlias = Sequence[Mapping[str, Any]] | Callable[[], Any]


async def load_documents(docs: DocumentSource | None) -> list[Mapping[str, Any]]:
    """Materialize ``docs``, calling (and awaiting) it if it is callable.

    Raises:
        PaginationValidationError: The source is not a sequence of mappings
    """
    if callable(docs):
        docs = docs()
        if inspect.isawaitable(docs):
            docs = await docs
    if docs is None:
        return []
    if isinstance(docs, (str, bytes, Mapping)) or not isinstance(docs, Sequence):
        raise PaginationValidationError(
            "docs must be a sequence of documents",
            type=type(docs).__name__,
        )
    for index, doc in enumerate(docs):
        if not isinstance(doc, Mapping):
            raise PaginationValidationError(
                "docs must contain only mappings",
                index=index,
                type=type(doc).__name__,
            )
    return list(docs)


def sort_keys(sort: list[SortSpec], id_path: str) -> list[tuple[str, int]]:
    """Sort keys with the identifier appended ascending unless present."""
    keys = [(spec.field, spec.order) for spec in sort]
    if id_path not in {path for path, _ in keys}:
        keys.append((id_path, 1))
    return keys


async def prepare_edges(
    docs: DocumentSource | None,
    *,
    query: Mapping[str, Any],
    sort: list[SortSpec],
    id_path: str,
) -> list[LazyEdge]:
    """Filter, attach cursors and sort.

    Raises:
        PaginationValidationError: A document has no identifier at ``id_path``
    """
    documents = filter_objects(await load_documents(docs), query)

    edges = []
    for doc in documents:
        identifier = get_path(doc, id_path)
        if identifier is None:
            raise PaginationValidationError(
                f"Unable to extract a node ID using path {id_path}",
                document=dict(doc),
            )
        edges.append(LazyEdge.with_cursor(doc, PaginationCursor.encode(identifier)))

    ordered = sort_documents(edges, sort_keys(sort, id_path), getter=lambda edge: edge.node)
    _lazy.debug(lambda: f"prepared {len(ordered)} in-memory edges sorted by {sort_keys(sort, id_path)}")
    return ordered


@dataclass(frozen=True, slots=True)
class Slice:
    """The page as a half-open range ``[start, end)`` of all edges."""

    all_edges: list[LazyEdge]
    start: int
    end: int

    @property
    def edges(self) -> list[LazyEdge]:
        return self.all_edges[self.start : self.end]


def _index_of(all_edges: list[LazyEdge], cursor: str) -> int | None:
    for index, edge in enumerate(all_edges):
        if edge.cursor() == cursor:
            return index
    return None


def slice_edges(
    all_edges: list[LazyEdge],
    *,
    after: str | None = None,
    before: str | None = None,
    first: int | None = None,
    last: int | None = None,
) -> Slice:
    """Relay connection slicing.

    ``after`` drops everything up to and including its edge, ``before``
    keeps only what precedes its edge; a cursor that matches no edge is
    ignored. ``first``/``last`` then cap the remainder from either end.
    """
    start, end = 0, len(all_edges)
    if after is not None:
        index = _index_of(all_edges, after)
        if index is not None:
            start = index + 1
    if before is not None:
        index = _index_of(all_edges, before)
        if index is not None:
            end = index
    end = max(start, end)
    if first is not None:
        end = min(end, start + first)
    if last is not None:
        start = max(start, end - last)
    return Slice(all_edges=all_edges, start=start, end=end)


def canonical_cursor(cursor: str | None) -> str | None:
    """Re-encode a caller cursor so it compares equal to minted ones.

    Raises:
        CursorDecodeError: Malformed cursor
    """
    if cursor is None:
        return None
    return PaginationCursor.encode(PaginationCursor.decode(cursor))


class ObjectPaginator(PaginationResult):
    """Cursor pagination over in-memory documents.

    Build with :func:`find_with_objects`.
    """

    def __init__(self, docs: DocumentSource | None, params: ObjectPaginationParams) -> None:
        super().__init__()
        self.docs = docs
        self.params = params
        self.cursor = canonical_cursor(params.cursor)
        self._slice = AsyncOnce(self._compute_slice)
        self.page_info = ObjectPageInfo(self)

    async def _compute_slice(self) -> Slice:
        params = self.params
        all_edges = await prepare_edges(
            self.docs,
            query=params.query,
            sort=params.sort,
            id_path=params.id_path,
        )
        if params.direction is Direction.AFTER:
            return slice_edges(all_edges, after=self.cursor, first=params.limit)
        return slice_edges(all_edges, before=self.cursor, last=params.limit)

    async def slice(self) -> Slice:
        return await self._slice()

    async def total_count(self) -> int:
        return len((await self._slice()).all_edges)

    async def raw_edges(self) -> list[LazyEdge]:
        return (await self._slice()).edges


class ObjectPageInfo(BasePageInfo):
    """Page metadata for an ObjectPaginator."""

    def __init__(self, paginator: ObjectPaginator) -> None:
        self._paginator = paginator

    async def has_next_page(self) -> bool:
        page = await self._paginator.slice()
        return page.end < len(page.all_edges)

    async def has_previous_page(self) -> bool:
        return (await self._paginator.slice()).start > 0

    async def start_cursor(self) -> str:
        return first_cursor(await self._paginator.raw_edges())

    async def end_cursor(self) -> str:
        return last_cursor(await self._paginator.raw_edges())

    async def starting_position(self) -> int | None:
        page = await self._paginator.slice()
        return page.start + 1 if page.end > page.start else None

    async def ending_position(self) -> int | None:
        page = await self._paginator.slice()
        return page.end if page.end > page.start else None

    async def positions(self) -> dict[str, int | None]:
        return {
            "starting_position": await self.starting_position(),
            "ending_position": await self.ending_position(),
        }


class OffsetObjectPaginator(PaginationResult):
    """Offset pagination over in-memory documents.

    Build with :func:`find_with_offset_objects`.
    """

    def __init__(self, docs: DocumentSource | None, params: OffsetObjectPaginationParams) -> None:
        super().__init__()
        self.docs = docs
        self.params = params
        self._slice = AsyncOnce(self._compute_slice)
        self.page_info = OffsetObjectPageInfo(self)

    @property
    def offset(self) -> int:
        return self.params.offset

    async def _compute_slice(self) -> Slice:
        params = self.params
        all_edges = await prepare_edges(
            self.docs,
            query=params.query,
            sort=params.sort,
            id_path=params.id_path,
        )
        start = min(params.offset, len(all_edges))
        end = min(params.offset + params.limit, len(all_edges))
        return Slice(all_edges=all_edges, start=start, end=end)

    async def slice(self) -> Slice:
        return await self._slice()

    async def total_count(self) -> int:
        return len((await self._slice()).all_edges)

    async def raw_edges(self) -> list[LazyEdge]:
        return (await self._slice()).edges


class OffsetObjectPageInfo(BasePageInfo):
    """Page metadata for an OffsetObjectPaginator."""

    def __init__(self, paginator: OffsetObjectPaginator) -> None:
        self._paginator = paginator

    async def has_next_page(self) -> bool:
        page = await self._paginator.slice()
        return len(page.all_edges) > self._paginator.offset + self._paginator.params.limit

    async def has_previous_page(self) -> bool:
        page = await self._paginator.slice()
        return self._paginator.offset > 0 and bool(page.all_edges)

    async def start_cursor(self) -> str:
        return first_cursor(await self._paginator.raw_edges())

    async def end_cursor(self) -> str:
        return last_cursor(await self._paginator.raw_edges())

    async def start_offset(self) -> int:
        return self._paginator.offset

    async def end_offset(self) -> int | None:
        """Offset past the last document, None when nothing matched."""
        page = await self._paginator.slice()
        if not page.all_edges:
            return None
        return self._paginator.offset + len(page.edges)

    async def positions(self) -> dict[str, int | None]:
        return {
            "start_offset": await self.start_offset(),
            "end_offset": await self.end_offset(),
        }


async def find_with_objects(docs: DocumentSource | None, **params: Any) -> ObjectPaginator:
    """Cursor-paginate in-memory documents.

    Args:
        docs: Documents, or a sync/async callable returning them
        **params: Options of :class:`ObjectPaginationParams`: ``id_path``,
            ``query``, ``sort``, ``limit``, ``cursor``, ``direction``

    Raises:
        PaginationValidationError: Invalid options
        CursorDecodeError: Malformed cursor
    """
    options = validate_params(ObjectPaginationParams, params)
    return ObjectPaginator(docs, options)


async def find_with_offset_objects(
    docs: DocumentSource | None,
    **params: Any,
) -> OffsetObjectPaginator:
    """Offset-paginate in-memory documents.

    Args:
        docs: Documents, or a sync/async callable returning them
        **params: Options of :class:`OffsetObjectPaginationParams`:
            ``id_path``, ``query``, ``sort``, ``limit``, ``offset``

    Raises:
        PaginationValidationError: Invalid options
    """
    options = validate_params(OffsetObjectPaginationParams, params)
    return OffsetObjectPaginator(docs, options)


__all__ = [
    "ObjectPageInfo",
    "ObjectPaginator",
    "OffsetObjectPageInfo",
    "OffsetObjectPaginator",
    "Slice",
    "find_with_objects",
    "find_with_offset_objects",
    "load_documents",
    "slice_edges",
]
