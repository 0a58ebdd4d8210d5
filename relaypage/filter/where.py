""" Compile a filter expression into a WHERE clause """

from __future__ import annotations

import itertools
import re
from collections import abc
from typing import Any, NamedTuple, Optional

import sqlalchemy as sa
from sqlalchemy.sql.elements import BindParameter, Grouping

from relaypage import exc
from relaypage.sainfo.columns import resolve_column_by_name
from relaypage.typing import SAModelOrAlias
from relaypage.util.values import is_empty_value

from .inputs import FilterInput, FiltersExpression
from .operators import (
    ComparisonOperator, LogicalOperator,
    get_operator_lambda, like_pattern,
    PATTERN_OPERATORS, ARRAY_OPERATORS,
)


class CompiledWhere(NamedTuple):
    """ A compiled WHERE clause: SQL text and bound parameters

    Example:
        CompiledWhere('(User.name = :User.name_1)', {'User.name_1': 'John'})
    """
    sql: str
    params: dict[str, Any]


class WhereBuilder:
    """ Where Builder: compiles a FiltersExpression tree into a WHERE clause

    Every node of the tree is put in parentheses; its filters and children are joined by the node's operator.
    Every filter gets a bind parameter named "field_N", where N is a counter shared across the whole tree:
    this way the same field can be filtered many times, e.g. `price > 10 AND price < 20`.

    Filters with empty values (None, "", []) are skipped. Nodes with nothing inside are skipped too.

    Without `aliases`, fields go into SQL as is: "Product.name". With `aliases`, every field is resolved
    to the column of its entity, and the dialect quotes the alias the same way it does in the FROM clause.
    """

    def __init__(self, expression: Optional[FiltersExpression], aliases: Optional[abc.Mapping[str, SAModelOrAlias]] = None):
        """

        Args:
            expression: The filter expression to compile
            aliases: Entities available in the query, by alias. `None`: use fields as SQL text
        """
        self.expression = expression
        self.aliases = aliases

    def build_clause(self) -> Optional[sa.sql.ColumnElement]:
        """ Get the WHERE clause, or `None` if there's nothing to filter by

        Raises:
            exc.UnknownOperatorError
            exc.FilterError
            exc.InvalidColumnError
        """
        if self.expression is None:
            return None

        # The counter starts from 1: the first parameter gets "_1"
        return compile_expression(self.expression, itertools.count(1), self.aliases)

    def compile(self, dialect: sa.engine.interfaces.Dialect = None) -> CompiledWhere:
        """ Compile into SQL text with named parameters """
        clause = self.build_clause()
        if clause is None:
            return CompiledWhere('', {})

        compiled = clause.compile(dialect=dialect)
        return CompiledWhere(
            _unescape_bind_names(compiled),
            compiled.construct_params(escape_names=False),
        )

    def apply(self, stmt: sa.sql.Select) -> sa.sql.Select:
        """ Add the WHERE clause to the statement. All at once. """
        clause = self.build_clause()
        if clause is None:
            return stmt
        return stmt.where(clause)


def compile_expression(expression: FiltersExpression,
                       counter: abc.Iterator[int],
                       aliases: Optional[abc.Mapping[str, SAModelOrAlias]] = None,
                       ) -> Optional[sa.sql.ColumnElement]:
    """ Compile a node: (filter op filter op (child) op (child))

    Args:
        expression: The node to compile
        counter: Parameter number generator, shared across the whole tree
        aliases: Entities to resolve fields against

    Returns:
        The clause, in parentheses, or `None` if the node is empty
    """
    # Compile: own filters, then children
    clauses = [
        clause
        for clause in itertools.chain(
            (compile_filter(filter, counter, aliases) for filter in expression.filters),
            (compile_expression(child, counter, aliases) for child in expression.child_expressions),
        )
        if clause is not None
    ]

    # Empty nodes are elided
    if not clauses:
        return None

    # Join them together using the operator
    if expression.operator == LogicalOperator.AND:
        cc = sa.and_(*clauses)
    elif expression.operator == LogicalOperator.OR:
        cc = sa.or_(*clauses)
    else:
        raise exc.UnknownOperatorError(expression.operator)

    # Put parentheses around it
    return Grouping(cc)


def compile_filter(filter: FilterInput,
                   counter: abc.Iterator[int],
                   aliases: Optional[abc.Mapping[str, SAModelOrAlias]] = None,
                   ) -> Optional[sa.sql.ColumnElement]:
    """ Compile a leaf: "field operator :field_N"

    Returns:
        The clause, or `None` if the value is empty and the filter should be skipped
    """
    # Skip empty values: this is how optional filters work
    if is_empty_value(filter.value):
        return None

    operator = ComparisonOperator.parse(filter.operator)
    operator_lambda = get_operator_lambda(operator)

    # The left operand: the field
    column = filter_column(filter, aliases)

    # The right operand: bind parameter(s)
    if operator == ComparisonOperator.BETWEEN:
        value = _between_pair(filter)
        param = (
            _bindparam(filter.field, counter, value[0]),
            _bindparam(filter.field, counter, value[1]),
        )
    elif operator in ARRAY_OPERATORS:
        value = list(filter.value) if _is_array(filter.value) else [filter.value]
        param = _bindparam(filter.field, counter, value, expanding=True)
    elif operator in PATTERN_OPERATORS:
        param = _bindparam(filter.field, counter, like_pattern(filter.value))
    else:
        param = _bindparam(filter.field, counter, filter.value)

    return operator_lambda(column, param)


def filter_column(filter: FilterInput, aliases: Optional[abc.Mapping[str, SAModelOrAlias]] = None) -> sa.sql.ColumnElement:
    """ Get the column a filter compares: the entity's column, or, without `aliases`, the field as SQL text

    Raises:
        exc.MalformedFieldError: unknown entity
        exc.InvalidColumnError: unknown column
    """
    if aliases is None:
        return sa.literal_column(filter.field)

    alias, _, column_name = filter.field.partition('.')
    try:
        entity = aliases[alias]
    except KeyError as e:
        raise exc.MalformedFieldError(filter.field, f'unknown entity "{alias}"') from e
    return resolve_column_by_name(column_name, entity, where='filter')


def _bindparam(field: str, counter: abc.Iterator[int], value: Any, *, expanding: bool = False) -> BindParameter:
    """ Make a uniquely named bind parameter: "field_N" """
    return sa.bindparam(f'{field}_{next(counter)}', value, expanding=expanding)


def _between_pair(filter: FilterInput) -> tuple[Any, Any]:
    """ Validate or fail: BETWEEN needs exactly two values """
    if not _is_array(filter.value) or len(filter.value) != 2:
        raise exc.FilterError(f'Filter "{filter.field}": "between" needs a pair of values, got {filter.value!r}')
    low, high = filter.value
    return low, high


def _unescape_bind_names(compiled: sa.sql.compiler.SQLCompiler) -> str:
    """ Get the SQL text with bind parameters named the way they were given

    Dialects escape some characters in bind names (e.g. "." becomes "_").
    The statement executes fine either way, but the text should show "field_N" as is.
    """
    sql = compiled.string
    for name, escaped_name in compiled.escaped_bind_names.items():
        escaped_param = compiled.bindtemplate % {'name': escaped_name}
        param = compiled.bindtemplate % {'name': name}
        sql = re.sub(re.escape(escaped_param) + r'(?![\w.])', lambda m: param, sql)
    return sql


def _is_array(value):
    """ Is the provided value an array of some sorts (list, tuple, set)? """
    return isinstance(value, (list, tuple, set, frozenset))
