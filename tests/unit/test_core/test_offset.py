"""Unit tests for offset pagination against a document store."""
from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest

from docpager.core.exceptions import PaginationValidationError
from docpager.core.pagination.cursor import encode_cursor
from docpager.core.pagination.offset import OffsetPaginator, find_with_offset


async def ids(result) -> list:
    return [edge.node["_id"] for edge in await result.edges()]


class TestFindWithOffset:
    """Pages, neighbours and offsets."""

    @pytest.mark.asyncio
    async def test_first_page(self, six_store):
        result = await find_with_offset(six_store, sort={"field": "n"}, limit=2)

        assert isinstance(result, OffsetPaginator)
        assert await ids(result) == [1, 2]
        assert await result.page_info.has_previous_page() is False
        assert await result.page_info.has_next_page() is True
        assert await result.page_info.start_offset() == 0
        assert await result.page_info.end_offset() == 2

    @pytest.mark.asyncio
    async def test_middle_page(self, six_store):
        result = await find_with_offset(six_store, sort={"field": "n"}, limit=2, offset=2)

        assert await ids(result) == [3, 4]
        assert await result.page_info.has_previous_page() is True
        assert await result.page_info.has_next_page() is True
        assert await result.page_info.start_offset() == 2
        assert await result.page_info.end_offset() == 4
        assert await result.page_info.start_cursor() == encode_cursor(3)
        assert await result.page_info.end_cursor() == encode_cursor(4)

    @pytest.mark.asyncio
    async def test_last_page(self, six_store):
        result = await find_with_offset(six_store, sort={"field": "n"}, limit=2, offset=4)

        assert await ids(result) == [5, 6]
        assert await result.page_info.has_previous_page() is True
        assert await result.page_info.has_next_page() is False
        assert await result.page_info.end_offset() == 6

    @pytest.mark.asyncio
    async def test_descending_sort(self, six_store):
        result = await find_with_offset(six_store, sort={"field": "n", "order": -1}, limit=4, offset=1)

        assert await ids(result) == [5, 4, 3, 2]
        assert await result.page_info.has_previous_page() is True
        assert await result.page_info.has_next_page() is True

    @pytest.mark.asyncio
    async def test_offset_at_end(self, six_store):
        """Only the sentinel exists, so there is a previous page but no items."""
        result = await find_with_offset(six_store, limit=2, offset=6)

        assert await result.edges() == []
        assert await result.page_info.has_previous_page() is True
        assert await result.page_info.has_next_page() is False
        assert await result.page_info.start_cursor() == ""
        assert await result.page_info.end_cursor() == ""
        assert await result.page_info.end_offset() == 6

    @pytest.mark.asyncio
    async def test_offset_past_end(self, six_store):
        result = await find_with_offset(six_store, limit=2, offset=10)

        assert await result.edges() == []
        assert await result.page_info.has_previous_page() is False
        assert await result.total_count() == 6

    @pytest.mark.asyncio
    async def test_query_filters_total_and_page(self, six_store):
        result = await find_with_offset(six_store, query={"n": {"$lte": 30}}, limit=2, offset=2)

        assert await ids(result) == [3]
        assert await result.total_count() == 3
        assert await result.page_info.has_next_page() is False


class TestSingleQuery:
    """Neighbour detection piggybacks on the page query."""

    @pytest.mark.asyncio
    async def test_skip_and_limit_include_sentinel_and_peek(self, six_store, spy_store):
        spy = spy_store(six_store)
        result = await find_with_offset(spy, sort={"field": "n"}, limit=2, offset=2)

        await asyncio.gather(
            result.edges(),
            result.page_info.has_next_page(),
            result.page_info.has_previous_page(),
            result.page_info.end_offset(),
        )

        spy.find.assert_awaited_once()
        assert spy.find.await_args.kwargs["skip"] == 1
        assert spy.find.await_args.kwargs["limit"] == 4
        assert spy.find.await_args.kwargs["sort"] == {"n": 1, "_id": 1}
        spy.count_documents.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_zero_offset_has_no_sentinel(self, six_store, spy_store):
        spy = spy_store(six_store)
        result = await find_with_offset(spy, limit=2)

        await result.edges()

        assert spy.find.await_args.kwargs["skip"] == 0
        assert spy.find.await_args.kwargs["limit"] == 3


class TestCallbacks:
    """format_edge and on_load_edges."""

    @pytest.mark.asyncio
    async def test_on_load_edges_called_once_with_nodes(self, six_store):
        on_load = MagicMock()
        result = await find_with_offset(six_store, limit=2, offset=2, on_load_edges=on_load)

        await result.edges()
        await result.edges()

        on_load.assert_called_once_with([{"_id": 3, "n": 30}, {"_id": 4, "n": 40}])

    @pytest.mark.asyncio
    async def test_format_edge(self, six_store):
        result = await find_with_offset(
            six_store,
            limit=2,
            projection={"n": 1},
            format_edge=lambda edge: (edge.node["n"], edge.cursor()),
        )

        assert await result.edges() == [(10, encode_cursor(1)), (20, encode_cursor(2))]

    @pytest.mark.asyncio
    async def test_resolve(self, six_store):
        result = await find_with_offset(six_store, limit=2, offset=2)

        connection = await result.resolve()

        assert connection.total_count == 6
        assert connection.page_info.start_offset == 2
        assert connection.page_info.end_offset == 4
        assert connection.page_info.starting_position is None
        assert connection.to_cursor_page().has_more is True


class TestValidation:
    """Option validation."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "params",
        [{"offset": -1}, {"limit": 0}, {"cursor": "abc"}, {"direction": "AFTER"}],
    )
    async def test_invalid_params_raise(self, six_store, params):
        with pytest.raises(PaginationValidationError):
            await find_with_offset(six_store, **params)

    @pytest.mark.asyncio
    async def test_error_lists_failing_fields(self, six_store):
        with pytest.raises(PaginationValidationError) as exc_info:
            await find_with_offset(six_store, offset=-5)

        assert exc_info.value.details["fields"] == ["offset"]
