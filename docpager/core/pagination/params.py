"""Validated paginator inputs.

Every paginator call goes through one of these frozen models before it
touches a store. Each lists every recognized option with its default;
unknown options are rejected.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from docpager.core.exceptions import PaginationValidationError
from docpager.core.pagination.sorting import Direction, SortSpec
from docpager.core.settings import get_pagination_settings

P = TypeVar("P", bound=BaseModel)


def _default_limit() -> int:
    return get_pagination_settings().default_limit


def _default_direction() -> Direction:
    return Direction(get_pagination_settings().default_direction)


def _default_id_path() -> str:
    return get_pagination_settings().id_path


class _PaginationParams(BaseModel):
    """Options shared by every paginator."""

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    query: dict[str, Any] = Field(
        default_factory=dict,
        description="Base filter document",
    )
    limit: int = Field(
        default_factory=_default_limit,
        ge=1,
        description="Page size",
    )

    @field_validator("query", mode="before")
    @classmethod
    def _none_query(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("limit")
    @classmethod
    def _cap_limit(cls, value: int) -> int:
        max_limit = get_pagination_settings().max_limit
        if value > max_limit:
            msg = f"limit must be less than or equal to {max_limit}"
            raise ValueError(msg)
        return value


class _CursorOptions(BaseModel):
    cursor: str | None = Field(default=None, description="Cursor to seek from")
    direction: Direction = Field(
        default_factory=_default_direction,
        description="AFTER (next page) or BEFORE (previous page)",
    )

    @field_validator("cursor", mode="before")
    @classmethod
    def _empty_cursor(cls, value: Any) -> Any:
        # The empty string is what start/end cursors return for an empty page.
        return None if value == "" else value

    @field_validator("direction", mode="before")
    @classmethod
    def _parse_direction(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, Direction):
            try:
                return Direction(value)
            except ValueError:
                return value
        return value


class CursorPaginationParams(_CursorOptions, _PaginationParams):
    """Options for keyset pagination against a store."""

    sort: SortSpec = Field(default_factory=SortSpec, description="Sort field and order")
    projection: dict[str, Any] | None = Field(
        default=None,
        description="Projection; the identifier is always included",
    )
    format_edge: Callable[[Any], Any] | None = Field(
        default=None,
        description="Applied to every edge returned by edges()",
    )


class OffsetPaginationParams(_PaginationParams):
    """Options for skip/limit pagination against a store."""

    sort: SortSpec = Field(default_factory=SortSpec, description="Sort field and order")
    offset: int = Field(default=0, ge=0, description="Documents to skip")
    projection: dict[str, Any] | None = Field(
        default=None,
        description="Projection; the identifier is always included",
    )
    format_edge: Callable[[Any], Any] | None = Field(
        default=None,
        description="Applied to every edge returned by edges()",
    )
    on_load_edges: Callable[[list[Any]], Any] | None = Field(
        default=None,
        description="Called with the page's documents when edges are built",
    )


class _ObjectOptions(BaseModel):
    id_path: str = Field(
        default_factory=_default_id_path,
        min_length=1,
        description="Dotted path of each document's identifier",
    )
    sort: list[SortSpec] = Field(
        default_factory=list,
        description="Sort keys, most significant first",
    )

    @field_validator("id_path")
    @classmethod
    def _strip_id_path(cls, value: str) -> str:
        value = value.strip()
        if not value:
            msg = "id_path cannot be blank"
            raise ValueError(msg)
        return value


class ObjectPaginationParams(_CursorOptions, _ObjectOptions, _PaginationParams):
    """Options for cursor pagination over in-memory documents."""


class OffsetObjectPaginationParams(_ObjectOptions, _PaginationParams):
    """Options for offset pagination over in-memory documents."""

    offset: int = Field(default=0, ge=0, description="Documents to skip")


def validate_params(model: type[P], params: dict[str, Any]) -> P:
    """Validate raw keyword options into ``model``.

    Raises:
        PaginationValidationError: If any option is invalid
    """
    try:
        return model.model_validate(params)
    except ValidationError as e:
        raise PaginationValidationError(
            f"Invalid {model.__name__} options",
            errors=e.errors(include_url=False),
        ) from e


__all__ = [
    "CursorPaginationParams",
    "ObjectPaginationParams",
    "OffsetObjectPaginationParams",
    "OffsetPaginationParams",
    "validate_params",
]
