""" Infer JOINs from a filter expression """

from __future__ import annotations

from collections import abc
from typing import Optional

import sqlalchemy as sa
import sqlalchemy.orm

from relaypage import exc
from relaypage.sainfo.names import split_field_path
from relaypage.sainfo.relations import resolve_relation_by_name, target_model
from relaypage.typing import SAModelOrAlias

from .inputs import FilterInput, FiltersExpression


class JoinBuilder:
    """ Join Builder: joins the entities that filters refer to through their relation fields

    A filter on "category.name" with `relation_field="product.category"` makes the builder
    LEFT JOIN `product.category` aliased as "category". Every alias is joined only once,
    no matter how many filters refer to it.

    Every apply() call starts over from the entities given to the constructor.

    Example:
        builder = JoinBuilder(expression, {'product': aliased(Product, name='product')})
        stmt = builder.apply(select(builder.aliases['product']))
    """

    def __init__(self, expression: Optional[FiltersExpression], aliases: abc.Mapping[str, SAModelOrAlias]):
        """

        Args:
            expression: The filter expression to look for relation fields in
            aliases: Entities available in the query, by alias: at least, the root entity
        """
        self.expression = expression
        self.root_aliases: dict[str, SAModelOrAlias] = dict(aliases)

        # Entities available after the last apply(): the root ones, and the joined ones
        self.aliases: dict[str, SAModelOrAlias] = dict(aliases)
        self._joined: list[str] = []

    @property
    def joined_entities(self) -> frozenset[str]:
        """ Aliases of the entities that were joined """
        return frozenset(self._joined)

    def apply(self, stmt: sa.sql.Select) -> sa.sql.Select:
        """ Add LEFT JOINs to the statement

        Raises:
            exc.MalformedFieldError
            exc.InvalidRelationError
        """
        self.aliases = dict(self.root_aliases)
        self._joined = []

        if self.expression is None:
            return stmt

        # Depth-first: own filters, then children
        for filter in self.expression.walk_filters():
            # Every field must name its entity
            if not filter.entity_alias:
                raise exc.MalformedFieldError(filter.field, 'Entity name is required')

            if filter.relation_field:
                stmt = self._join_for_filter(stmt, filter)
        return stmt

    def _join_for_filter(self, stmt: sa.sql.Select, filter: FilterInput) -> sa.sql.Select:
        # The entity is the field's prefix
        alias = filter.entity_alias

        # Joined already?
        if alias in self.aliases:
            return stmt

        # Find the relationship: "parent.relation"
        parent_alias, relation_name = split_field_path(filter.relation_field)  # type: ignore[arg-type]
        try:
            parent = self.aliases[parent_alias]
        except KeyError as e:
            raise exc.MalformedFieldError(filter.relation_field, f'unknown entity "{parent_alias}"') from e  # type: ignore[arg-type]
        relation = resolve_relation_by_name(relation_name, parent, where='filter')

        # Join it
        target = sa.orm.aliased(target_model(relation), name=alias)
        self.aliases[alias] = target
        self._joined.append(alias)
        return stmt.outerjoin(target, relation)
