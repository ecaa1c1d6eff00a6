"""Keyset and offset pagination over document stores and in-memory lists.

Every paginator call validates its options, then returns a lazy result.
Nothing touches the store until an accessor is awaited:

    result = await find_with_cursor(
        store,
        query={"status": "published"},
        sort={"field": "title", "order": 1},
        limit=20,
        cursor=after,
    )
    edges = await result.edges()
    has_next = await result.page_info.has_next_page()
    next_cursor = await result.page_info.end_cursor()

Keyset pages are stable while data changes between requests; offset pages
trade that for random access; the in-memory flavours apply the same
contract to documents already loaded.

For an API response, resolve everything at once:

    connection = await result.resolve()         # Relay Connection
    page = connection.to_cursor_page()          # REST style

Cursors are opaque base64 strings that clients pass back unchanged.
"""

from docpager.core.pagination.cursor import PaginationCursor, decode_cursor, encode_cursor
from docpager.core.pagination.filters import (
    build_boundary_predicate,
    build_seek_predicate,
    create_cursor_query,
)
from docpager.core.pagination.keyset import KeysetPageInfo, KeysetPaginator, find_with_cursor
from docpager.core.pagination.matching import filter_objects
from docpager.core.pagination.objects import (
    ObjectPaginator,
    OffsetObjectPaginator,
    find_with_objects,
    find_with_offset_objects,
)
from docpager.core.pagination.offset import OffsetPageInfo, OffsetPaginator, find_with_offset
from docpager.core.pagination.results import LazyEdge, PaginationResult
from docpager.core.pagination.schemas import (
    Connection,
    CursorPage,
    Edge,
    PageInfo,
    create_empty_connection,
)
from docpager.core.pagination.sorting import Direction, SortSpec, invert_sort

__all__ = [
    # Schemas
    "Connection",
    "CursorPage",
    # Sorting
    "Direction",
    "Edge",
    # Paginators
    "KeysetPageInfo",
    "KeysetPaginator",
    "LazyEdge",
    "ObjectPaginator",
    "OffsetObjectPaginator",
    "OffsetPageInfo",
    "OffsetPaginator",
    "PageInfo",
    # Cursor utilities
    "PaginationCursor",
    "PaginationResult",
    "SortSpec",
    # Seek predicates
    "build_boundary_predicate",
    "build_seek_predicate",
    "create_cursor_query",
    "create_empty_connection",
    "decode_cursor",
    "encode_cursor",
    "filter_objects",
    "find_with_cursor",
    "find_with_objects",
    "find_with_offset",
    "find_with_offset_objects",
    "invert_sort",
]
