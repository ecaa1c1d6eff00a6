"""Document store contract consumed by the paginators.

The engine never talks to a driver directly. It needs exactly three
operations, each taking a MongoDB-style filter document:

    find(filter, sort=..., limit=..., skip=..., projection=...) -> list
    find_one(filter, sort=..., projection=...) -> document or None
    count_documents(filter) -> int

Any object with these coroutine methods can back a paginator. Errors raised
by the store propagate to the caller unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from docpager.core.exceptions import PaginationValidationError

Document = dict[str, Any]
Filter = Mapping[str, Any]
SortMapping = Mapping[str, int]
Projection = Mapping[str, Any]


@runtime_checkable
class DocumentStore(Protocol):
    """Queryable document collection."""

    async def find(
        self,
        filter: Filter,
        *,
        sort: SortMapping | None = None,
        limit: int = 0,
        skip: int = 0,
        projection: Projection | None = None,
    ) -> list[Document]:
        """Return matching documents in ``sort`` order.

        ``limit=0`` means no limit, as in the MongoDB drivers.
        """
        ...

    async def find_one(
        self,
        filter: Filter,
        *,
        sort: SortMapping | None = None,
        projection: Projection | None = None,
    ) -> Document | None:
        """Return the first matching document, or None."""
        ...

    async def count_documents(self, filter: Filter) -> int:
        """Count matching documents."""
        ...


def ensure_store(store: Any) -> DocumentStore:
    """Return ``store`` if it implements DocumentStore.

    Raises:
        PaginationValidationError: A required method is missing
    """
    if not isinstance(store, DocumentStore):
        raise PaginationValidationError(
            "store must provide find, find_one and count_documents",
            store=type(store).__name__,
        )
    return store


def sort_items(sort: SortMapping | None) -> list[tuple[str, int]] | None:
    """Convert a sort mapping to the ordered key list drivers expect."""
    if not sort:
        return None
    return list(sort.items())


__all__ = [
    "Document",
    "DocumentStore",
    "Filter",
    "Projection",
    "SortMapping",
    "ensure_store",
    "sort_items",
]
