""" Opaque cursors

A cursor is an opaque string that points to a row within a sorted result set.
Inside, it's just base64-encoded text: either the value of the sort column, or "value|id" when the sort column is not unique.
"""

from .encode import encode_cursor, decode_cursor
from .value import CursorValue
