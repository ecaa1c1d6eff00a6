"""In-process document store.

Backed by a ``mongomock`` collection, so it evaluates the same filter,
sort and projection documents a MongoDB server would. Useful for local
development and for exercising the paginators in tests.

Example:
    store = MemoryStore.from_documents([{"_id": 1, "v": "a"}, {"_id": 2, "v": "b"}])
    result = await find_with_cursor(store, sort={"field": "v"}, limit=1)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

import mongomock

from docpager.infra.store.base import sort_items

if TYPE_CHECKING:
    from docpager.infra.store.base import Document, Filter, Projection, SortMapping


class MemoryStore:
    """DocumentStore backed by a mongomock collection."""

    __slots__ = ("collection",)

    def __init__(self, collection: mongomock.Collection) -> None:
        self.collection = collection

    @classmethod
    def from_documents(
        cls,
        documents: Iterable[Mapping[str, Any]] = (),
        *,
        name: str = "documents",
    ) -> MemoryStore:
        """Create a store holding copies of ``documents``."""
        collection = mongomock.MongoClient().get_database("docpager")[name]
        docs = [dict(doc) for doc in documents]
        if docs:
            collection.insert_many(docs)
        return cls(collection)

    async def find(
        self,
        filter: Filter,
        *,
        sort: SortMapping | None = None,
        limit: int = 0,
        skip: int = 0,
        projection: Projection | None = None,
    ) -> list[Document]:
        cursor = self.collection.find(
            dict(filter),
            projection=dict(projection) if projection else None,
            sort=sort_items(sort),
            limit=limit,
            skip=skip,
        )
        return list(cursor)

    async def find_one(
        self,
        filter: Filter,
        *,
        sort: SortMapping | None = None,
        projection: Projection | None = None,
    ) -> Document | None:
        return self.collection.find_one(
            dict(filter),
            projection=dict(projection) if projection else None,
            sort=sort_items(sort),
        )

    async def count_documents(self, filter: Filter) -> int:
        return self.collection.count_documents(dict(filter))

    def __repr__(self) -> str:
        return f"MemoryStore({self.collection.full_name!r})"


__all__ = ["MemoryStore"]
