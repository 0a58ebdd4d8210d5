""" Filter input: a tree of conditions """

from __future__ import annotations

from collections import abc
from dataclasses import dataclass, field
from typing import Any, Optional

from relaypage import exc
from relaypage.util.funcy import collecting, get_any

from .operators import ComparisonOperator, LogicalOperator


@dataclass
class FilterInput:
    """ A filter for a field

    Example:
        FilterInput('product.price', ComparisonOperator.GREATER_THAN, 100)
        FilterInput('category.name', ComparisonOperator.EQUAL, 'Books', relation_field='product.category')
    """
    # Field to filter: "Entity.column"
    field: str

    operator: ComparisonOperator

    # A scalar; an array for IN; a pair for BETWEEN
    value: Any

    # Relationship to join the entity through: "Entity.relation"
    relation_field: Optional[str] = None

    @property
    def entity_alias(self) -> str:
        """ The entity this field belongs to: the text before the first dot """
        alias, dot, _ = self.field.partition('.')
        return alias if dot else ''

    @classmethod
    def from_dict(cls, filter: dict) -> FilterInput:
        """ Parse a filter from a dict, e.g. a GraphQL input

        Both `relationField` and `relation_field` keys are accepted.

        Raises:
            exc.UnknownOperatorError
            exc.MalformedFieldError
        """
        if not isinstance(filter, dict):
            raise exc.FilterError(f'A filter must be an object, got {type(filter).__name__}')
        if 'field' not in filter:
            raise exc.MalformedFieldError('', 'the "field" key is missing')

        return cls(
            field=filter['field'],
            operator=ComparisonOperator.parse(filter.get('operator')),
            value=filter.get('value'),
            relation_field=get_any(filter, 'relationField', 'relation_field'),
        )


@dataclass
class FiltersExpression:
    """ A boolean expression over filters and sub-expressions

    Example:
        FiltersExpression(LogicalOperator.OR, filters=[
            FilterInput('product.price', ComparisonOperator.LESS_THAN, 20),
            FilterInput('product.price', ComparisonOperator.GREATER_THAN, 1000),
        ])
    """
    operator: LogicalOperator

    # Leaf conditions
    filters: list[FilterInput] = field(default_factory=list)

    # Nested expressions
    child_expressions: list[FiltersExpression] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.filters and not self.child_expressions

    def walk_filters(self) -> abc.Iterator[FilterInput]:
        """ Iterate all leaf filters, depth-first: own filters, then children """
        yield from self.filters
        for child in self.child_expressions:
            yield from child.walk_filters()

    @classmethod
    def from_dict(cls, expression: dict) -> FiltersExpression:
        """ Parse an expression tree from a dict, e.g. a GraphQL input

        Both `childExpressions` and `child_expressions` keys are accepted.

        Raises:
            exc.FilterError
        """
        if not isinstance(expression, dict):
            raise exc.FilterError(f'A filter expression must be an object, got {type(expression).__name__}')

        return cls(
            operator=LogicalOperator.parse(expression.get('operator')),
            filters=cls._parse_filters(expression.get('filters') or []),
            child_expressions=cls._parse_children(get_any(expression, 'childExpressions', 'child_expressions') or []),
        )

    @staticmethod
    @collecting
    def _parse_filters(filters: list[dict]) -> abc.Iterator[FilterInput]:
        for filter in filters:
            yield FilterInput.from_dict(filter)

    @classmethod
    @collecting
    def _parse_children(cls, children: list[dict]) -> abc.Iterator[FiltersExpression]:
        for child in children:
            yield cls.from_dict(child)
