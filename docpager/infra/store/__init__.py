"""Document store protocol and adapters."""

from docpager.infra.store.base import (
    Document,
    DocumentStore,
    Filter,
    Projection,
    SortMapping,
)
from docpager.infra.store.memory import MemoryStore
from docpager.infra.store.mongo import AsyncCollectionStore

__all__ = [
    "AsyncCollectionStore",
    "Document",
    "DocumentStore",
    "Filter",
    "MemoryStore",
    "Projection",
    "SortMapping",
]
