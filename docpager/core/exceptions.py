"""Errors raised by paginator calls.

All of them derive from ``PaginationError`` and carry a ``details`` dict.
Store failures are not wrapped: whatever the store adapter raises (for
example ``pymongo.errors.PyMongoError``) propagates unmodified.
"""
from __future__ import annotations

from typing import Any


class PaginationError(Exception):
    """A paginator call was aborted.

    Args:
        message: Human readable summary
        details: Values that explain the failure, rendered by ``str()``
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details) if details else {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        rendered = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.message} ({rendered})"


class PaginationValidationError(PaginationError):
    """Malformed paginator input.

    Raised for a bad limit, offset, direction or sort, or for in-memory
    documents that cannot be paginated. Always raised before the store is
    touched. When built from pydantic errors, the dotted locations of the
    offending fields are listed under ``details["fields"]``.
    """

    def __init__(
        self,
        message: str,
        errors: list[dict[str, Any]] | None = None,
        **details: Any,
    ):
        self.errors = list(errors or [])
        if self.errors:
            details["fields"] = [".".join(map(str, err.get("loc", ()))) for err in self.errors]
        super().__init__(message, details=details)


class CursorDecodeError(PaginationError):
    """Cursor string could not be decoded.

    A malformed cursor is never treated as "no cursor".
    """

    def __init__(self, cursor: str, reason: str):
        self.cursor = cursor
        self.reason = reason
        super().__init__(f"Invalid cursor: {reason}", details={"cursor": cursor})


class CursorTargetNotFoundError(PaginationError):
    """The cursor's document is gone, so its sort value is unknown."""

    def __init__(self, identifier: Any, field: str):
        self.identifier = identifier
        self.field = field
        super().__init__(
            "Cursor document not found",
            details={"identifier": identifier, "field": field},
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(identifier={self.identifier!r}, field={self.field!r})"


__all__ = [
    "CursorDecodeError",
    "CursorTargetNotFoundError",
    "PaginationError",
    "PaginationValidationError",
]
