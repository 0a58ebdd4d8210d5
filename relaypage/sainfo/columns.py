""" Columns: find them by name, check they can be sorted by """

from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy.orm import ColumnProperty, QueryableAttribute

from relaypage import exc
from relaypage.sainfo.names import model_name
from relaypage.typing import SAModelOrAlias, SAAttribute


def resolve_column_by_name(field_name: str, Model: SAModelOrAlias, *, where: str) -> QueryableAttribute:
    """ Get a sortable column attribute by name

    When `Model` is an alias, the attribute is adapted to it: the query will refer to the alias, not to the table.

    Raises:
        exc.InvalidColumnError: no such attribute, or it's not a column (e.g. a relationship or a composite)
    """
    try:
        attribute = getattr(Model, field_name)
    except AttributeError as e:
        raise exc.InvalidColumnError(model_name(Model), field_name, where=where) from e

    if not is_sortable_column(attribute):
        raise exc.InvalidColumnError(model_name(Model), field_name, where=where)

    return attribute


def is_sortable_column(attribute: SAAttribute) -> bool:
    """ Is it a column, or a column expression, that yields one value per row? """
    return (
        isinstance(attribute, QueryableAttribute) and
        isinstance(attribute.property, ColumnProperty) and
        # Composites and multi-column properties can't be compared to one value
        len(attribute.property.columns) == 1
    )


def get_column_type(attribute: SAAttribute) -> sa.types.TypeEngine:
    """ Get the column's SQL type; for a TypeDecorator, the type it wraps """
    if isinstance(attribute.type, sa.types.TypeDecorator):
        return attribute.type.impl
    return attribute.type


def is_nullable_column(attribute: SAAttribute) -> bool:
    """ Can the column hold NULLs? Column expressions are assumed not to """
    return any(getattr(column, 'nullable', False) for column in attribute.property.columns)
