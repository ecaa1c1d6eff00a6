"""Snapshot schemas for resolved pages.

Paginators are lazy: every page-info field is its own coroutine. When a
caller wants the whole page at once (to return it from an API, say),
``await result.resolve()`` produces a ``Connection``. ``CursorPage`` is the
flatter shape for REST payloads, derived from a connection.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

NodeT = TypeVar("NodeT")


class PageInfo(BaseModel):
    """Where a page sits in the ordered result set.

    Keyset pages fill ``starting_position``/``ending_position``; offset
    pages fill ``start_offset``/``end_offset``. The other pair stays None.
    Cursors are "" on an empty page so the model serializes the same way
    whether or not anything matched.
    """

    model_config = ConfigDict(frozen=True)

    has_previous_page: bool = Field(description="Documents exist before the first edge")
    has_next_page: bool = Field(description="Documents exist after the last edge")
    start_cursor: str = Field(default="", description="Cursor of the first edge")
    end_cursor: str = Field(default="", description="Cursor of the last edge")
    total_count: int | None = Field(default=None, description="Documents matching the base filter")
    starting_position: int | None = Field(default=None, description="1-based rank of the first edge")
    ending_position: int | None = Field(default=None, description="1-based rank of the last edge")
    start_offset: int | None = Field(default=None, description="Offset the page was requested at")
    end_offset: int | None = Field(default=None, description="Offset just past the last edge")


class Edge(BaseModel, Generic[NodeT]):
    """One document of a page and the cursor that resumes after it."""

    node: NodeT = Field(description="Document as returned by the store")
    cursor: str = Field(description="Opaque identifier cursor")


class Connection(BaseModel, Generic[NodeT]):
    """A resolved page.

    Paging onward reuses the page's own cursors:

        find_with_cursor(store, cursor=conn.page_info.end_cursor, direction="AFTER")
        find_with_cursor(store, cursor=conn.page_info.start_cursor, direction="BEFORE")
    """

    edges: list[Edge[NodeT]] = Field(default_factory=list, description="Edges in display order")
    page_info: PageInfo = Field(description="Navigation and position data")
    total_count: int = Field(default=0, description="Documents matching the base filter")

    @property
    def nodes(self) -> list[NodeT]:
        return [edge.node for edge in self.edges]

    def to_cursor_page(self) -> CursorPage[NodeT]:
        """Flatten into ``CursorPage``; cursors are None where no page follows."""
        info = self.page_info
        return CursorPage(
            items=self.nodes,
            next_cursor=info.end_cursor if info.has_next_page else None,
            prev_cursor=info.start_cursor if info.has_previous_page else None,
            has_more=info.has_next_page,
            total_count=self.total_count,
        )


class CursorPage(BaseModel, Generic[NodeT]):
    """Items plus the cursors to fetch the neighbouring pages."""

    items: list[NodeT] = Field(default_factory=list, description="Documents in display order")
    next_cursor: str | None = Field(default=None, description="Pass with direction AFTER")
    prev_cursor: str | None = Field(default=None, description="Pass with direction BEFORE")
    has_more: bool = Field(default=False, description="A following page exists")
    total_count: int | None = Field(default=None, description="Documents matching the base filter")


def create_empty_connection() -> Connection[Any]:
    """Connection with no edges and nothing on either side."""
    return Connection(page_info=PageInfo(has_previous_page=False, has_next_page=False))


__all__ = [
    "Connection",
    "CursorPage",
    "Edge",
    "PageInfo",
    "create_empty_connection",
]
