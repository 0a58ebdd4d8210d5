""" Filter operators and their SQL implementations """

from __future__ import annotations

import enum
from collections import abc
from typing import Any

import sqlalchemy as sa

from relaypage import exc


class ComparisonOperator(str, enum.Enum):
    """ Operators that compare a field to a value """
    EQUAL = 'eq'
    NOT = 'not'
    GREATER_THAN = 'gt'
    GREATER_THAN_OR_EQUAL = 'gte'
    LESS_THAN = 'lt'
    LESS_THAN_OR_EQUAL = 'lte'
    IN = 'in'
    NOT_IN = 'not_in'
    BETWEEN = 'between'
    LIKE = 'like'
    NOT_LIKE = 'not_like'
    ILIKE = 'ilike'
    OVERLAP = 'overlap'

    @classmethod
    def parse(cls, operator: Any) -> ComparisonOperator:
        """ Get the operator by its value, e.g. 'eq'

        Raises:
            exc.UnknownOperatorError
        """
        try:
            return cls(operator)
        except ValueError as e:
            raise exc.UnknownOperatorError(operator) from e


class LogicalOperator(str, enum.Enum):
    """ Operators that combine conditions """
    AND = 'and'
    OR = 'or'

    @classmethod
    def parse(cls, operator: Any) -> LogicalOperator:
        """ Get the operator by its value: 'and' or 'or'

        Raises:
            exc.UnknownOperatorError
        """
        try:
            return cls(operator)
        except ValueError as e:
            raise exc.UnknownOperatorError(operator) from e


def like_pattern(value: Any) -> str:
    """ Make a pattern that matches the value anywhere in the string """
    return f'%{value}%'


# Operators for scalar values
# Mapping:
#   operator: lambda column, value
#   `value` is a bind parameter; for BETWEEN, a tuple of two
COMPARISON_OPERATORS: dict[ComparisonOperator, abc.Callable[[sa.sql.ColumnElement, Any], sa.sql.ColumnElement]] = {
    ComparisonOperator.EQUAL: lambda col, val: col == val,
    ComparisonOperator.NOT: lambda col, val: col != val,
    ComparisonOperator.GREATER_THAN: lambda col, val: col > val,
    ComparisonOperator.GREATER_THAN_OR_EQUAL: lambda col, val: col >= val,
    ComparisonOperator.LESS_THAN: lambda col, val: col < val,
    ComparisonOperator.LESS_THAN_OR_EQUAL: lambda col, val: col <= val,
    ComparisonOperator.IN: lambda col, val: col.in_(val),  # field IN(values)
    ComparisonOperator.NOT_IN: lambda col, val: col.not_in(val),  # field NOT IN(values)
    ComparisonOperator.BETWEEN: lambda col, val: col.between(*val),  # field BETWEEN x AND y
    ComparisonOperator.LIKE: lambda col, val: col.like(val),
    ComparisonOperator.NOT_LIKE: lambda col, val: col.not_like(val),
    # Postgres: ILIKE; other databases: lower(x) LIKE lower(y)
    ComparisonOperator.ILIKE: lambda col, val: col.ilike(val),
}

# Operators whose value is wrapped into %...%
PATTERN_OPERATORS = frozenset((
    ComparisonOperator.LIKE,
    ComparisonOperator.NOT_LIKE,
    ComparisonOperator.ILIKE,
))

# Operators that take an array of values
ARRAY_OPERATORS = frozenset((
    ComparisonOperator.IN,
    ComparisonOperator.NOT_IN,
))


def get_operator_lambda(operator: ComparisonOperator) -> abc.Callable[[sa.sql.ColumnElement, Any], sa.sql.ColumnElement]:
    """ Get a callable that implements the operator

    Raises:
        exc.UnknownOperatorError: the operator exists, but can't be compiled (e.g. "overlap")
    """
    try:
        return COMPARISON_OPERATORS[operator]
    except KeyError:
        raise exc.UnknownOperatorError(getattr(operator, 'value', operator))
