"""MongoDB-style filtering of in-memory documents.

The in-memory paginators accept the same filter documents as the store
paginators. Matching is delegated to mongomock's filter engine, which
implements the query operators ($eq, $in, $gt, $regex, $elemMatch, ...)
with server semantics.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from mongomock import OperationFailure
from mongomock.filtering import filter_applies

from docpager.core.exceptions import PaginationValidationError

D = TypeVar("D", bound=Mapping[str, Any])


def matches(doc: Mapping[str, Any], query: Mapping[str, Any] | None) -> bool:
    """Whether ``doc`` satisfies ``query``. An empty query matches everything.

    Raises:
        PaginationValidationError: The query uses an invalid operator
    """
    if not query:
        return True
    try:
        return filter_applies(dict(query), doc)
    except OperationFailure as e:
        raise PaginationValidationError(f"Invalid query: {e}", query=dict(query)) from e


def filter_objects(docs: Iterable[D], query: Mapping[str, Any] | None) -> list[D]:
    """Documents from ``docs`` that satisfy ``query``, in their original order."""
    return [doc for doc in docs if matches(doc, query)]


__all__ = ["filter_objects", "matches"]
