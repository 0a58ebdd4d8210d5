from __future__ import annotations

import datetime
import decimal
import uuid
from collections import abc
from typing import Any, NamedTuple, Optional

import sqlalchemy as sa

from relaypage import exc
from relaypage.sainfo.columns import get_column_type

from .encode import encode_cursor, decode_cursor


# Separates the sort column value from the tiebreaker in a composite cursor
COMPOSITE_SEPARATOR = '|'


class CursorValue(NamedTuple):
    """ Cursor data: the position of a row within the sorted result set

    A plain cursor only has the value of the sort column, which must be unique (e.g. the `id`).
    A composite cursor also has the tiebreaker: the unique `id` of the row. It's used when the sort column is not unique.

    Example:
        CursorValue('prod-05').encode()  #-> 'cHJvZC0wNQ=='
        CursorValue('510', 'prod-01').encode()  # -> base64('510|prod-01')
    """
    # Value of the sort column, as text
    primary: str

    # Value of the unique identifier, as text. Only for composite cursors.
    tiebreaker: Optional[str] = None

    @property
    def is_composite(self) -> bool:
        return self.tiebreaker is not None

    @classmethod
    def for_row(cls, primary: Any, tiebreaker: Any = None) -> CursorValue:
        """ Make a cursor value from raw row values """
        return cls(
            primary=serialize_value(primary),
            tiebreaker=serialize_value(tiebreaker) if tiebreaker is not None else None,
        )

    def serialize(self) -> str:
        """ Get the plain text form: "primary" or "primary|tiebreaker" """
        if self.tiebreaker is None:
            return self.primary
        else:
            return f'{self.primary}{COMPOSITE_SEPARATOR}{self.tiebreaker}'

    def encode(self) -> str:
        return encode_cursor(self.serialize())

    @classmethod
    def decode(cls, cursor: str, *, composite: bool) -> CursorValue:
        """ Decode an opaque cursor

        Args:
            cursor: The opaque cursor string
            composite: Expect a composite "primary|tiebreaker" value?

        Raises:
            exc.InvalidCursorError
        """
        value = decode_cursor(cursor)

        # Plain cursor: the whole value is the bound
        if not composite:
            return cls(primary=value)

        # Composite cursor.
        # Split on the last separator: the sort column value may contain one, the identifier may not.
        primary, sep, tiebreaker = value.rpartition(COMPOSITE_SEPARATOR)
        if not sep:
            raise exc.InvalidCursorError(cursor, 'expected a composite "value|id" cursor')
        return cls(primary=primary, tiebreaker=tiebreaker)

    def bounds(self, primary_column: sa.sql.ColumnElement, tiebreaker_column: sa.sql.ColumnElement = None) -> tuple[Any, Any]:
        """ Convert the text values into comparison bounds typed for the given columns

        Raises:
            exc.InvalidCursorError: the value does not fit the column type
        """
        primary = deserialize_value(self.primary, primary_column)
        if self.tiebreaker is None or tiebreaker_column is None:
            return primary, None
        else:
            return primary, deserialize_value(self.tiebreaker, tiebreaker_column)


def serialize_value(value: Any) -> str:
    """ Convert a column value into cursor text """
    # Dates & times: use ISO format so that it can be parsed back without loss
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    else:
        return str(value)


def deserialize_value(text: str, column: sa.sql.ColumnElement) -> Any:
    """ Convert cursor text into a Python value that the column would accept

    Raises:
        exc.InvalidCursorError
    """
    python_type = get_column_python_type(column)

    # Unknown type: leave as is. The database will have to figure it out.
    if python_type is None:
        return text

    # Find a parser
    parse = _PARSERS.get(python_type, python_type)

    try:
        return parse(text)
    except (ValueError, TypeError, ArithmeticError) as e:
        raise exc.InvalidCursorError(text, f'{text!r} is not a valid {python_type.__name__}') from e


def get_column_python_type(column: sa.sql.ColumnElement) -> Optional[type]:
    """ Get the Python type of a column, if SqlAlchemy knows it """
    # Try the type itself first: a TypeDecorator may know better than the type it wraps
    for type_ in (column.type, get_column_type(column)):
        try:
            return type_.python_type
        except NotImplementedError:
            continue
    return None


def _parse_bool(text: str) -> bool:
    if text in ('True', 'true', '1'):
        return True
    elif text in ('False', 'false', '0'):
        return False
    else:
        raise ValueError(text)


# Parsers for types that can't be restored by calling the type itself
_PARSERS: dict[type, abc.Callable[[str], Any]] = {
    datetime.datetime: datetime.datetime.fromisoformat,
    datetime.date: datetime.date.fromisoformat,
    datetime.time: datetime.time.fromisoformat,
    bool: _parse_bool,
    decimal.Decimal: decimal.Decimal,
    uuid.UUID: uuid.UUID,
}
