""" Paginate a query: one page of results as a Relay connection """

from __future__ import annotations

import logging
from typing import Optional, Union

import sqlalchemy as sa
import sqlalchemy.orm

from relaypage import exc
from relaypage.sainfo.columns import resolve_column_by_name, is_nullable_column
from relaypage.sainfo.models import resolve_entity_by_alias
from relaypage.sainfo.names import split_field_path

from .args import PaginationArgs, PageDirection
from .connection import Connection, Edge, PageInfo
from .keyset import KeysetOrder
from .settings import PaginationSettings, DEFAULT_SETTINGS


logger = logging.getLogger(__name__)

# The name of the unique identifier column. Every paginated entity must have one.
IDENTIFIER_COLUMN = 'id'


def paginate(session: sa.orm.Session,
             stmt: sa.sql.Select,
             args: Union[PaginationArgs, dict],
             cursor_column: str = IDENTIFIER_COLUMN,
             *,
             settings: Optional[PaginationSettings] = None,
             ) -> Connection:
    """ Load one page of results

    The statement is sorted by `cursor_column` (with the identifier as a tiebreaker, if necessary),
    limited to the page size, and continued from the cursor, if given.
    Then two more queries count the rows before and after the page.

    Example:
        stmt = select(aliased(Product, name='product')).where(...)
        page = paginate(ssn, stmt, PaginationArgs(first=5))
        next_page = paginate(ssn, stmt, PaginationArgs(first=5, after=page.page_info.end_cursor))

    Args:
        session: The session to execute queries with
        stmt: A statement that selects one entity. It may already be filtered and joined; its ordering is replaced.
        args: Pagination arguments: first/after, or last/before
        cursor_column: The column to sort by: "column", or "Alias.column"
        settings: Default and max page size

    Raises:
        exc.PaginationArgumentsError: invalid arguments
        exc.InvalidCursorError: invalid cursor
        exc.InvalidColumnError: the sort column, or the identifier, does not exist
    """
    if isinstance(args, dict):
        args = PaginationArgs.from_dict(args)
    settings = settings or DEFAULT_SETTINGS

    # Validate everything before any query is made
    args.validate()
    forward = args.direction == PageDirection.FORWARD
    window = settings.get_final_limit(args.limit)

    # Forward pagination goes ASC, backward pagination goes DESC. `reverse` flips both.
    order = resolve_keyset_order(stmt, cursor_column, ascending=forward != args.reverse)
    bounds = order.cursor_bounds(args.cursor) if args.cursor is not None else None

    logger.debug('Paginating %s: %s, %s by %r, window=%d, cursor=%r',
                 stmt.column_descriptions[0]['name'],
                 args.direction.value,
                 'ASC' if order.ascending else 'DESC',
                 cursor_column,
                 window,
                 args.cursor)

    # Load the window
    rows = load_window(session, stmt, order, bounds, window)

    # Backward pagination loads rows in the opposite order: the ones nearest to the cursor first.
    # Put them back in the presentation order.
    if not forward:
        rows.reverse()
    presentation_order = order if forward else order.reversed()

    # Count the rows around the window
    count_before, count_after = count_around(session, stmt, presentation_order, rows)

    logger.debug('Loaded %d rows; %d before, %d after', len(rows), count_before, count_after)

    # Done
    edges = [
        Edge(node=row, cursor=order.row_cursor(row))
        for row in rows
    ]
    return Connection(
        edges=edges,
        page_info=PageInfo.from_counts(edges, count_before, count_after),
    )


def resolve_keyset_order(stmt: sa.sql.Select, cursor_column: str, *, ascending: bool) -> KeysetOrder:
    """ Find the sort column and the identifier on the statement's entity

    Raises:
        exc.PaginationArgumentsError
        exc.InvalidColumnError
    """
    if not cursor_column:
        raise exc.PaginationArgumentsError('Cursor column is required')

    alias, column_name = split_field_path(cursor_column)
    if not column_name:
        raise exc.PaginationArgumentsError(f'Cursor column is required, got {cursor_column!r}')

    entity = resolve_entity_by_alias(alias, stmt, where='cursor column')
    primary = resolve_column_by_name(column_name, entity, where='cursor column')
    identifier = resolve_column_by_name(IDENTIFIER_COLUMN, entity, where='cursor column')

    # NULLs can't be compared to a cursor: such rows would never make it into a page
    if is_nullable_column(primary):
        raise exc.PaginationArgumentsError(f'Cursor column {cursor_column!r} is nullable; sort by a NOT NULL column')

    return KeysetOrder(
        primary=primary,
        # Only sorting by a non-unique column needs a tiebreaker
        tiebreaker=None if primary.key == identifier.key else identifier,
        ascending=ascending,
    )


def load_window(session: sa.orm.Session, stmt: sa.sql.Select, order: KeysetOrder, bounds: Optional[tuple], window: int) -> list:
    """ Load rows of the page, in the physical `order`, continuing from the cursor `bounds` """
    # Replace the ordering: our keyset ordering goes first and only
    stmt = stmt.order_by(None).order_by(*order.order_by())

    # Continue from the cursor
    if bounds is not None:
        stmt = stmt.where(order.follows(bounds))

    stmt = stmt.limit(window)
    return list(session.scalars(stmt).all())


def count_around(session: sa.orm.Session, stmt: sa.sql.Select, order: KeysetOrder, rows: list) -> tuple[int, int]:
    """ Count the rows before the first row and after the last row, in the presentation `order`

    The counts are made against the caller's statement: with all its filters, but without the cursor.
    """
    if rows:
        before_condition = order.precedes(order.row_bounds(rows[0]))
        after_condition = order.follows(order.row_bounds(rows[-1]))
    # No rows: nothing is before, nothing is after
    else:
        before_condition = after_condition = sa.false()

    # ORDER BY makes no sense in a COUNT()
    stmt = stmt.order_by(None)

    return (
        count_rows(session, stmt.where(before_condition)),
        count_rows(session, stmt.where(after_condition)),
    )


def count_rows(session: sa.orm.Session, stmt: sa.sql.Select) -> int:
    """ Count the rows that a statement would return """
    count_stmt = sa.select(sa.func.count()).select_from(stmt.subquery())
    return session.scalar(count_stmt)
