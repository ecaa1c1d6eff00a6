"""Unit tests for seek and boundary predicates."""
from __future__ import annotations

import itertools
from unittest.mock import AsyncMock

import pytest

from docpager.core.exceptions import CursorDecodeError, CursorTargetNotFoundError
from docpager.core.pagination.cursor import encode_cursor
from docpager.core.pagination.filters import (
    SeekPosition,
    build_boundary_predicate,
    build_seek_predicate,
    combine_filters,
    comparison_operator,
    create_cursor_query,
    lookup_projection,
    resolve_seek_position,
    with_identifier,
)
from docpager.core.pagination.matching import filter_objects
from docpager.core.pagination.sorting import Direction, SortSpec

# ──────────────────────────────────────────────────────────────
# Pure predicate construction
# ──────────────────────────────────────────────────────────────


class TestComparisonOperator:
    """Tests for comparison_operator."""

    @pytest.mark.parametrize(
        ("order", "direction", "expected"),
        [
            (1, Direction.AFTER, "$gt"),
            (-1, Direction.AFTER, "$lt"),
            (1, Direction.BEFORE, "$lt"),
            (-1, Direction.BEFORE, "$gt"),
        ],
    )
    def test_operator_table(self, order, direction, expected):
        assert comparison_operator(order, direction) == expected


class TestBuildSeekPredicate:
    """Tests for build_seek_predicate."""

    def test_identifier_sort(self):
        predicate = build_seek_predicate(SeekPosition(identifier=5), Direction.AFTER, SortSpec())

        assert predicate == {"_id": {"$gt": 5}}

    def test_identifier_sort_before_descending(self):
        predicate = build_seek_predicate(
            SeekPosition(identifier=5), Direction.BEFORE, SortSpec(order=-1)
        )

        assert predicate == {"_id": {"$gt": 5}}

    def test_compound_sort(self):
        position = SeekPosition(identifier=5, value=3, has_value=True)

        predicate = build_seek_predicate(position, Direction.AFTER, SortSpec(field="score"))

        assert predicate == {
            "$or": [
                {"score": {"$gt": 3}},
                {"score": {"$eq": 3}, "_id": {"$gt": 5}},
            ]
        }

    def test_compound_sort_descending(self):
        position = SeekPosition(identifier=5, value=3, has_value=True)

        predicate = build_seek_predicate(position, Direction.AFTER, SortSpec(field="score", order=-1))

        assert predicate == {
            "$or": [
                {"score": {"$lt": 3}},
                {"score": {"$eq": 3}, "_id": {"$lt": 5}},
            ]
        }

    def test_inclusive_only_relaxes_identifier(self):
        position = SeekPosition(identifier=5, value=3, has_value=True)

        predicate = build_seek_predicate(
            position, Direction.AFTER, SortSpec(field="score"), inclusive=True
        )

        assert predicate["$or"][0] == {"score": {"$gt": 3}}
        assert predicate["$or"][1]["_id"] == {"$gte": 5}

    def test_missing_sort_value_is_kept(self):
        """A document without the sort field seeks on null."""
        position = SeekPosition(identifier=1, value=None, has_value=True)

        predicate = build_seek_predicate(position, Direction.AFTER, SortSpec(field="score"))

        assert predicate["$or"][1] == {"score": {"$eq": None}, "_id": {"$gt": 1}}


class TestBuildBoundaryPredicate:
    """Tests for build_boundary_predicate."""

    @pytest.mark.parametrize(
        ("direction", "order", "expected"),
        [
            (Direction.AFTER, 1, {"_id": {"$lte": 5}}),
            (Direction.BEFORE, 1, {"_id": {"$gte": 5}}),
            (Direction.AFTER, -1, {"_id": {"$gte": 5}}),
            (Direction.BEFORE, -1, {"_id": {"$lte": 5}}),
        ],
    )
    def test_identifier_sort(self, direction, order, expected):
        predicate = build_boundary_predicate(SeekPosition(identifier=5), direction, SortSpec(order=order))

        assert predicate == expected

    def test_compound_sort(self):
        position = SeekPosition(identifier=5, value=3, has_value=True)

        predicate = build_boundary_predicate(position, Direction.AFTER, SortSpec(field="score"))

        assert predicate == {
            "$or": [
                {"score": {"$lt": 3}},
                {"score": {"$eq": 3}, "_id": {"$lte": 5}},
            ]
        }

    @pytest.mark.parametrize(
        ("direction", "order"),
        list(itertools.product([Direction.AFTER, Direction.BEFORE], [1, -1])),
    )
    def test_boundary_is_complement_of_seek(self, direction, order):
        """Every document matches exactly one of seek and boundary."""
        docs = [
            {"_id": 1, "score": 5},
            {"_id": 2, "score": 3},
            {"_id": 3, "score": 5},
            {"_id": 4, "score": 3},
            {"_id": 5, "score": 7},
        ]
        sort = SortSpec(field="score", order=order)

        for cursor_doc in docs:
            position = SeekPosition(cursor_doc["_id"], cursor_doc["score"], has_value=True)
            seek = filter_objects(docs, build_seek_predicate(position, direction, sort))
            boundary = filter_objects(docs, build_boundary_predicate(position, direction, sort))

            assert cursor_doc in boundary
            assert cursor_doc not in seek
            assert sorted(d["_id"] for d in seek + boundary) == [1, 2, 3, 4, 5]


class TestHelpers:
    """Tests for lookup_projection, with_identifier and combine_filters."""

    def test_lookup_projection_plain_field(self):
        assert lookup_projection("score") == ({"score": 1}, "score")

    def test_lookup_projection_nested_field(self):
        assert lookup_projection("stats.views") == ({"stats.views": 1}, "stats.views")

    def test_lookup_projection_array_index(self):
        assert lookup_projection("items.3") == ({"items": {"$slice": [3, 1]}}, "items.0")

    def test_with_identifier(self):
        assert with_identifier(None) is None
        assert with_identifier({}) is None
        assert with_identifier({"title": 1}) == {"title": 1, "_id": 1}

    def test_combine_filters(self):
        seek = {"_id": {"$gt": 1}}
        query = {"status": "open"}

        assert combine_filters(seek, query) == {"$and": [seek, query]}
        assert combine_filters(None, query) == query
        assert combine_filters(seek, {}) == seek
        assert combine_filters(None, None) == {}


# ──────────────────────────────────────────────────────────────
# Store-backed resolution
# ──────────────────────────────────────────────────────────────


class TestResolveSeekPosition:
    """Tests for resolve_seek_position."""

    @pytest.mark.asyncio
    async def test_identifier_sort_skips_lookup(self):
        store = AsyncMock()

        position = await resolve_seek_position(store, 7, SortSpec())

        assert position == SeekPosition(identifier=7)
        store.find_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_compound_sort_reads_current_value(self):
        store = AsyncMock()
        store.find_one.return_value = {"_id": 7, "score": 42}

        position = await resolve_seek_position(store, 7, SortSpec(field="score"))

        assert position == SeekPosition(identifier=7, value=42, has_value=True)
        store.find_one.assert_awaited_once_with({"_id": 7}, projection={"score": 1})

    @pytest.mark.asyncio
    async def test_array_index_uses_slice_projection(self):
        store = AsyncMock()
        store.find_one.return_value = {"_id": 7, "ranks": [9]}

        position = await resolve_seek_position(store, 7, SortSpec(field="ranks.2"))

        assert position.value == 9
        store.find_one.assert_awaited_once_with({"_id": 7}, projection={"ranks": {"$slice": [2, 1]}})

    @pytest.mark.asyncio
    async def test_missing_document_raises(self):
        store = AsyncMock()
        store.find_one.return_value = None

        with pytest.raises(CursorTargetNotFoundError) as exc_info:
            await resolve_seek_position(store, 7, SortSpec(field="score"))

        assert exc_info.value.identifier == 7
        assert exc_info.value.field == "score"


class TestCreateCursorQuery:
    """Tests for create_cursor_query."""

    @pytest.mark.asyncio
    async def test_no_cursor_returns_none(self):
        store = AsyncMock()

        assert await create_cursor_query(store, None, Direction.AFTER, SortSpec(field="v")) is None
        store.find_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_cursor_raises_before_lookup(self):
        store = AsyncMock()

        with pytest.raises(CursorDecodeError):
            await create_cursor_query(store, "%%%", Direction.AFTER, SortSpec(field="v"))

        store.find_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_compound_cursor_query(self):
        store = AsyncMock()
        store.find_one.return_value = {"_id": 2, "v": "b"}

        predicate = await create_cursor_query(
            store, encode_cursor(2), Direction.BEFORE, SortSpec(field="v")
        )

        assert predicate == {
            "$or": [
                {"v": {"$lt": "b"}},
                {"v": {"$eq": "b"}, "_id": {"$lt": 2}},
            ]
        }
