"""Cursor encoding and decoding for pagination.

Cursors are opaque strings that encode a position in a result set. A
cursor holds exactly one value: the identifier of the document it was
minted from (or any other value a caller chooses to encode). Nothing about
the page that produced it is stored, so a cursor stays valid across
processes and releases.

The cursor format is:
1. MongoDB Extended JSON (canonical mode), so ObjectId, datetime, Binary
   and Decimal128 values survive the round trip with their types intact
2. Base64 URL-safe encoded, without padding, for use in URLs

Example:
    PaginationCursor.encode(2) -> base64url('{"$numberInt":"2"}')
"""

from __future__ import annotations

import base64
from datetime import UTC
from typing import Any

from bson import json_util
from bson.errors import BSONError
from bson.json_util import CANONICAL_JSON_OPTIONS

from docpager.core.exceptions import CursorDecodeError

_JSON_OPTIONS = CANONICAL_JSON_OPTIONS.with_options(tz_aware=True, tzinfo=UTC)


class PaginationCursor:
    """Encode and decode pagination cursors.

    Usage:
        cursor = PaginationCursor.encode(doc["_id"])
        PaginationCursor.decode(cursor) == doc["_id"]  # True

    Decoding never needs to know which page produced the cursor.
    """

    @staticmethod
    def encode(value: Any) -> str:
        """Encode a value to an opaque cursor string.

        Args:
            value: Any BSON-representable value, including nested
                documents and arrays

        Returns:
            URL-safe base64 string without padding
        """
        payload = json_util.dumps(value, json_options=_JSON_OPTIONS, separators=(",", ":"))
        return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii").rstrip("=")

    @staticmethod
    def decode(cursor: str) -> Any:
        """Decode a cursor string back to the value it was minted from.

        Args:
            cursor: String produced by :meth:`encode`

        Returns:
            The encoded value

        Raises:
            CursorDecodeError: If the cursor is not valid base64 or not
                valid Extended JSON
        """
        if not isinstance(cursor, str) or not cursor:
            raise CursorDecodeError(str(cursor), "cursor must be a non-empty string")

        padded = cursor + "=" * (-len(cursor) % 4)
        try:
            raw = base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
            return json_util.loads(raw.decode("utf-8"), json_options=_JSON_OPTIONS)
        except (ValueError, TypeError, BSONError) as e:
            raise CursorDecodeError(cursor, str(e)) from e


def encode_cursor(value: Any) -> str:
    """Shortcut for :meth:`PaginationCursor.encode`."""
    return PaginationCursor.encode(value)


def decode_cursor(cursor: str) -> Any:
    """Shortcut for :meth:`PaginationCursor.decode`."""
    return PaginationCursor.decode(cursor)


__all__ = ["PaginationCursor", "decode_cursor", "encode_cursor"]
