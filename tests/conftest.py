"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: isolate cached settings between tests
    - Store Fixtures: mongomock-backed stores and a call-recording wrapper
    - Document Fixtures: small collections used across paginator tests
"""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from docpager.core.settings import clear_settings_cache
from docpager.infra.store import MemoryStore

# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    """Drop cached settings and PAGINATION_/LOG_ overrides around each test."""
    for key in (
        "PAGINATION_DEFAULT_LIMIT",
        "PAGINATION_MAX_LIMIT",
        "PAGINATION_DEFAULT_DIRECTION",
        "PAGINATION_ID_PATH",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


# ============================================================================
# Store Fixtures
# ============================================================================


class SpyStore:
    """Records every store call while delegating to the wrapped store."""

    def __init__(self, store: MemoryStore) -> None:
        self.find = AsyncMock(wraps=store.find)
        self.find_one = AsyncMock(wraps=store.find_one)
        self.count_documents = AsyncMock(wraps=store.count_documents)

    @property
    def call_count(self) -> int:
        return self.find.await_count + self.find_one.await_count + self.count_documents.await_count


def make_store(documents: list[dict[str, Any]]) -> MemoryStore:
    return MemoryStore.from_documents(documents)


@pytest.fixture
def store_factory():
    """Build a MemoryStore from a list of documents."""
    return make_store


@pytest.fixture
def spy_store():
    """Wrap a store so every call is recorded and still hits the store."""
    return SpyStore


@pytest.fixture
def letters() -> list[dict[str, Any]]:
    """Four documents, identifier and value in the same order."""
    return [{"_id": i, "v": v} for i, v in enumerate(["a", "b", "c", "d"], start=1)]


@pytest.fixture
def letters_store(letters) -> MemoryStore:
    return make_store(letters)


@pytest.fixture
def six_store() -> MemoryStore:
    """Six documents, sortable by ``_id`` or ``n``."""
    return make_store([{"_id": i, "n": i * 10} for i in range(1, 7)])


@pytest.fixture
def tied_store() -> MemoryStore:
    """Documents whose sort field ties, so the identifier breaks order."""
    return make_store(
        [
            {"_id": 1, "score": 5},
            {"_id": 2, "score": 3},
            {"_id": 3, "score": 5},
            {"_id": 4, "score": 3},
            {"_id": 5, "score": 7},
        ]
    )
