"""Document store adapter for a live MongoDB collection.

Wraps a ``pymongo`` ``AsyncCollection`` so the paginators can use it:

    from pymongo import AsyncMongoClient

    client = AsyncMongoClient(url)
    store = AsyncCollectionStore(client.app.articles)
    result = await find_with_cursor(store, limit=20)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from docpager.infra.store.base import sort_items

if TYPE_CHECKING:
    from pymongo.asynchronous.collection import AsyncCollection

    from docpager.infra.store.base import Document, Filter, Projection, SortMapping


class AsyncCollectionStore:
    """DocumentStore backed by a pymongo AsyncCollection."""

    __slots__ = ("collection",)

    def __init__(self, collection: AsyncCollection[Any]) -> None:
        self.collection = collection

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
        return await cursor.to_list(None)

    async def find_one(
        self,
        filter: Filter,
        *,
        sort: SortMapping | None = None,
        projection: Projection | None = None,
    ) -> Document | None:
        return await self.collection.find_one(
            dict(filter),
            projection=dict(projection) if projection else None,
            sort=sort_items(sort),
        )

    async def count_documents(self, filter: Filter) -> int:
        return await self.collection.count_documents(dict(filter))

    def __repr__(self) -> str:
        return f"AsyncCollectionStore({self.collection.full_name!r})"


__all__ = ["AsyncCollectionStore"]
