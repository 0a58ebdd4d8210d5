""" Build a filtered query for an entity """

from __future__ import annotations

import logging
from typing import Optional

import sqlalchemy as sa
import sqlalchemy.orm

from relaypage.typing import SAModel

from .inputs import FiltersExpression
from .join import JoinBuilder
from .where import WhereBuilder


logger = logging.getLogger(__name__)


class FilterQueryBuilder:
    """ Filter Query Builder: a SELECT of an entity, with JOINs and a WHERE clause from a filter expression

    Example:
        builder = FilterQueryBuilder(Product, expression, alias='product')
        stmt = builder.build()
        products = ssn.scalars(stmt).all()
    """

    def __init__(self, Model: SAModel, expression: Optional[FiltersExpression] = None, alias: Optional[str] = None):
        """

        Args:
            Model: The entity to select
            expression: Filters. Their fields refer to entities by alias: "product.price"
            alias: The name of the entity in the query. Default: the model name
        """
        self.Model = Model
        self.expression = expression
        self.alias = alias or Model.__name__
        self.entity = sa.orm.aliased(Model, name=self.alias)

    def build(self) -> sa.sql.Select:
        """ Build the statement

        Raises:
            exc.FilterError
            exc.InvalidColumnError
            exc.InvalidRelationError
        """
        stmt = sa.select(self.entity)

        # JOINs go first: filters may refer to the joined entities
        join_builder = JoinBuilder(self.expression, {self.alias: self.entity})
        stmt = join_builder.apply(stmt)

        # WHERE: the whole tree at once, with fields resolved against the entities in the query
        stmt = WhereBuilder(self.expression, join_builder.aliases).apply(stmt)

        if self.expression is not None:
            logger.debug('Filtered %s: joined %s', self.alias, sorted(join_builder.joined_entities) or 'nothing')
        return stmt
