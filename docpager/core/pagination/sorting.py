"""Sort specifications and helpers.

A sort is always a single caller-chosen field plus the identifier as a
tiebreaker, so two documents never compare equal:

    SortSpec(field="title", order=-1)  ->  {"title": -1, "_id": -1}

Backward pagination reuses the same machinery with every order inverted,
then reverses the fetched list back into caller order.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, Field, field_validator

ID_FIELD = "_id"

T = TypeVar("T")

_MISSING = object()
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


class Direction(StrEnum):
    """Cursor direction.

    AFTER walks forward from the cursor, BEFORE walks backward. Parsing is
    case-insensitive: ``Direction("before") is Direction.BEFORE``.
    """

    AFTER = "AFTER"
    BEFORE = "BEFORE"

    @classmethod
    def _missing_(cls, value: object) -> Direction | None:
        if isinstance(value, str):
            return cls.__members__.get(value.strip().upper())
        return None

    @property
    def sign(self) -> int:
        """1 for AFTER, -1 for BEFORE."""
        return 1 if self is Direction.AFTER else -1

    @property
    def opposite(self) -> Direction:
        return Direction.BEFORE if self is Direction.AFTER else Direction.AFTER


class SortSpec(BaseModel):
    """Sort on one field, ascending (1) or descending (-1).

    ``order`` also accepts ``"asc"`` and ``"desc"``.
    """

    field: str = Field(default=ID_FIELD, min_length=1, description="Dotted field path")
    order: Literal[1, -1] = Field(default=1, description="1 ascending, -1 descending")

    model_config = {"frozen": True}

    @field_validator("order", mode="before")
    @classmethod
    def _parse_order(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"asc": 1, "desc": -1}.get(value.strip().lower(), value)
        return value

    @property
    def is_identifier(self) -> bool:
        return self.field == ID_FIELD


def invert_sort(sort: Mapping[str, int]) -> dict[str, int]:
    """Return a copy of ``sort`` with every order multiplied by -1."""
    return {key: order * -1 for key, order in sort.items()}


def build_store_sort(sort: SortSpec) -> dict[str, int]:
    """Sort document for the store, identifier always last."""
    return {sort.field: sort.order, ID_FIELD: sort.order}


def get_path(doc: Any, path: str, default: Any = None) -> Any:
    """Read a dotted path from nested mappings and sequences.

    Numeric segments index into lists: ``get_path(doc, "tags.0")``.
    """
    current = doc
    for part in path.split("."):
        if isinstance(current, Mapping):
            current = current.get(part, _MISSING)
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)) and part.isdigit():
            index = int(part)
            current = current[index] if index < len(current) else _MISSING
        else:
            current = _MISSING
        if current is _MISSING:
            return default
    return current


def slug_key(value: str) -> str:
    # Accents folded, case dropped, punctuation runs collapsed.
    folded = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM.sub("-", folded.lower()).strip("-")


def natural_sort_key(value: Any) -> tuple[Any, ...]:
    """Comparable key that orders mixed values without raising.

    Strings compare by their slug so "Éclair" sorts next to "eclair";
    numbers before strings before dates; missing values last.
    """
    if value is None:
        return (9,)
    if isinstance(value, bool):
        return (1, int(value))
    if isinstance(value, (int, float, Decimal)):
        return (1, value)
    if isinstance(value, str):
        return (2, slug_key(value), value.casefold())
    if isinstance(value, datetime):
        return (3, value.timestamp())
    return (4, str(value))


def sort_documents(
    items: Iterable[T],
    keys: Sequence[tuple[str, int]],
    *,
    getter: Callable[[T], Any] = lambda item: item,
) -> list[T]:
    """Stable multi-key sort on dotted paths.

    Args:
        items: Items to sort
        keys: ``(path, order)`` pairs, most significant first
        getter: Extracts the document to read paths from

    Returns:
        New sorted list
    """
    result = list(items)
    for path, order in reversed(keys):
        result.sort(
            key=lambda item, p=path: natural_sort_key(get_path(getter(item), p)),
            reverse=order == -1,
        )
    return result


__all__ = [
    "ID_FIELD",
    "Direction",
    "SortSpec",
    "build_store_sort",
    "get_path",
    "invert_sort",
    "natural_sort_key",
    "slug_key",
    "sort_documents",
]
