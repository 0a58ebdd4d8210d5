""" Keyset ordering: sort by one column, break ties with the unique identifier """

from __future__ import annotations

import operator
from collections import abc
from dataclasses import dataclass
from typing import Any, Optional

import sqlalchemy as sa

from relaypage.cursor import CursorValue
from relaypage.typing import SAAttribute, SAInstance


@dataclass
class KeysetOrder:
    """ A total ordering over the result set

    The rows are sorted by the `primary` column. When that column is not the unique identifier,
    the identifier is the `tiebreaker`: rows with equal primary values are sorted by it in the same direction.
    Thanks to it, every row has a distinct position, and pages never overlap nor skip rows.
    """
    # The column to sort by
    primary: SAAttribute

    # The unique identifier. `None` when `primary` is the identifier already.
    tiebreaker: Optional[SAAttribute]

    # Sort direction: ASC? or DESC?
    ascending: bool

    @property
    def composite(self) -> bool:
        """ Are cursors for this ordering composite "value|id" pairs? """
        return self.tiebreaker is not None

    def reversed(self) -> KeysetOrder:
        """ Get the same ordering, but the other way round """
        return KeysetOrder(self.primary, self.tiebreaker, not self.ascending)

    def order_by(self) -> list[sa.sql.ColumnElement]:
        """ Get ORDER BY clauses """
        columns = [self.primary] if self.tiebreaker is None else [self.primary, self.tiebreaker]
        return [
            column.asc() if self.ascending else column.desc()
            for column in columns
        ]

    def follows(self, bounds: tuple[Any, Any]) -> sa.sql.ColumnElement:
        """ Condition: rows that come strictly after the given position """
        return self._compare(operator.gt if self.ascending else operator.lt, bounds)

    def precedes(self, bounds: tuple[Any, Any]) -> sa.sql.ColumnElement:
        """ Condition: rows that come strictly before the given position """
        return self._compare(operator.lt if self.ascending else operator.gt, bounds)

    def _compare(self, op: abc.Callable, bounds: tuple[Any, Any]) -> sa.sql.ColumnElement:
        primary_bound, tiebreaker_bound = bounds

        # Unique column: a simple comparison
        if self.tiebreaker is None:
            return op(self.primary, primary_bound)

        # Non-unique column: (col op p) OR (col = p AND id op s)
        return sa.or_(
            op(self.primary, primary_bound),
            sa.and_(
                self.primary == primary_bound,
                op(self.tiebreaker, tiebreaker_bound),
            ),
        )

    # region Rows

    def row_bounds(self, row: SAInstance) -> tuple[Any, Any]:
        """ Get the position of a row: the values of its primary and tiebreaker columns """
        return (
            getattr(row, self.primary.key),
            getattr(row, self.tiebreaker.key) if self.tiebreaker is not None else None,
        )

    def row_cursor(self, row: SAInstance) -> str:
        """ Make an opaque cursor that points to the row """
        return CursorValue.for_row(*self.row_bounds(row)).encode()

    def cursor_bounds(self, cursor: str) -> tuple[Any, Any]:
        """ Decode an opaque cursor into a position

        Raises:
            exc.InvalidCursorError
        """
        value = CursorValue.decode(cursor, composite=self.composite)
        return value.bounds(self.primary, self.tiebreaker)

    # endregion
