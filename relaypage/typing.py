""" Annotations for SqlAlchemy things """

from typing import Any, Union, Protocol

import sqlalchemy as sa
import sqlalchemy.orm

# A declarative model class
SAModel = type

# A model, or its alias: `aliased(Product, name='product')`
SAModelOrAlias = Union[SAModel, sa.orm.util.AliasedClass]

# A model instance: a row loaded by the ORM
SAInstance = object

# A model attribute: `Product.price`, or `product_alias.price`
SAAttribute = sa.orm.QueryableAttribute


class NodeEntity(Protocol):
    """ Anything that can be a node of a Connection: it has a unique `id` """
    id: Any
