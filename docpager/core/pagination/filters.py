"""Seek predicates for keyset pagination.

Instead of skipping N documents, the next page is found by filtering for
documents ordered strictly after (or before) the cursor's position.

How it works:
    Sorting by _id only, with cursor c:
        AFTER ascending   ->  {"_id": {"$gt": c}}

    Sorting by field f, with cursor c whose document has f == v:
        {"$or": [
            {"f": {"$gt": v}},                          # strictly past the value
            {"f": {"$eq": v}, "_id": {"$gt": c}},       # tied value, broken by _id
        ]}

The operator is ``$gt`` when ``order * direction.sign == 1`` and ``$lt``
otherwise.

Compound sorts need the current value of the sort field on the cursor's
document, which costs one point lookup. Everything else here is a pure
function of (position, direction, sort).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from docpager.core.exceptions import CursorTargetNotFoundError
from docpager.core.pagination.cursor import PaginationCursor
from docpager.core.pagination.sorting import ID_FIELD, Direction, SortSpec, get_path
from docpager.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from docpager.infra.store.base import DocumentStore, Filter, Projection

_lazy = get_lazy_logger(__name__)

# "items.3" addresses element 3 of the "items" array.
_ARRAY_INDEX_PATTERN = re.compile(r"^(?P<path>.+)\.(?P<index>\d+)$")

_INCLUSIVE = {"$gt": "$gte", "$lt": "$lte"}


def comparison_operator(order: int, direction: Direction) -> str:
    """Strict comparison that selects documents past the cursor."""
    return "$gt" if order * direction.sign == 1 else "$lt"


@dataclass(frozen=True, slots=True)
class SeekPosition:
    """A decoded cursor resolved against the sort.

    Attributes:
        identifier: Identifier decoded from the cursor
        value: Current sort field value of that document (compound sorts)
        has_value: False for identifier-only sorts, where ``value`` is unused
    """

    identifier: Any
    value: Any = None
    has_value: bool = False


def lookup_projection(field: str) -> tuple[dict[str, Any], str]:
    """Projection for reading ``field`` from the cursor's document.

    Element-positional projection is not queryable, so ``items.3`` is
    requested as a one-element ``$slice`` starting at index 3. The returned
    path is where the value sits in the projected document.
    """
    match = _ARRAY_INDEX_PATTERN.match(field)
    if match:
        path = match.group("path")
        return {path: {"$slice": [int(match.group("index")), 1]}}, f"{path}.0"
    return {field: 1}, field


async def resolve_seek_position(
    store: DocumentStore,
    identifier: Any,
    sort: SortSpec,
) -> SeekPosition:
    """Resolve a decoded cursor identifier into a seek position.

    Identifier-only sorts need no lookup. Otherwise the cursor's document
    is fetched by identifier, projecting only the sort field.

    Raises:
        CursorTargetNotFoundError: The cursor's document does not exist
    """
    if sort.is_identifier:
        return SeekPosition(identifier=identifier)

    projection, value_path = lookup_projection(sort.field)
    doc = await store.find_one({ID_FIELD: identifier}, projection=projection)
    if doc is None:
        raise CursorTargetNotFoundError(identifier, sort.field)

    value = get_path(doc, value_path)
    _lazy.store_call(
        "find_one", {ID_FIELD: identifier}, lambda: f"{sort.field}={value!r}", projection=projection
    )
    return SeekPosition(identifier=identifier, value=value, has_value=True)


def build_seek_predicate(
    position: SeekPosition,
    direction: Direction,
    sort: SortSpec,
    *,
    inclusive: bool = False,
) -> dict[str, Any]:
    """Filter for documents ordered past ``position`` in ``direction``.

    Args:
        position: Resolved cursor position
        direction: AFTER or BEFORE
        sort: Caller sort
        inclusive: Also match the cursor's own document

    Returns:
        New filter document
    """
    op = comparison_operator(sort.order, direction)
    id_op = _INCLUSIVE[op] if inclusive else op

    if sort.is_identifier or not position.has_value:
        return {ID_FIELD: {id_op: position.identifier}}

    return {
        "$or": [
            {sort.field: {op: position.value}},
            {sort.field: {"$eq": position.value}, ID_FIELD: {id_op: position.identifier}},
        ]
    }


def build_boundary_predicate(
    position: SeekPosition,
    direction: Direction,
    sort: SortSpec,
) -> dict[str, Any]:
    """Complement of the seek predicate.

    Matches the cursor's document and everything on the other side of it:
    ``$gt`` becomes ``$lte`` and ``$lt`` becomes ``$gte``, with the
    tie-break on the identifier kept exact for compound sorts.
    """
    return build_seek_predicate(position, direction.opposite, sort, inclusive=True)


def with_identifier(projection: Projection | None) -> dict[str, Any] | None:
    """Projection that always returns the identifier, or None for all fields."""
    if not projection:
        return None
    return {**projection, ID_FIELD: 1}


def combine_filters(predicate: Filter | None, query: Filter | None) -> dict[str, Any]:
    """AND a seek predicate with the caller's base filter."""
    if predicate and query:
        return {"$and": [dict(predicate), dict(query)]}
    return dict(predicate or query or {})


async def create_cursor_query(
    store: DocumentStore,
    cursor: str | None,
    direction: Direction,
    sort: SortSpec,
) -> dict[str, Any] | None:
    """Decode ``cursor`` and build its seek predicate.

    Returns:
        None when no cursor is given, meaning no restriction

    Raises:
        CursorDecodeError: Malformed cursor, raised before any lookup
        CursorTargetNotFoundError: Compound sort and the document is gone
    """
    if not cursor:
        return None
    identifier = PaginationCursor.decode(cursor)
    position = await resolve_seek_position(store, identifier, sort)
    return build_seek_predicate(position, direction, sort)


__all__ = [
    "SeekPosition",
    "build_boundary_predicate",
    "build_seek_predicate",
    "combine_filters",
    "comparison_operator",
    "create_cursor_query",
    "lookup_projection",
    "resolve_seek_position",
    "with_identifier",
]
