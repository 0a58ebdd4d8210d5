from __future__ import annotations

import sqlalchemy as sa
import sqlalchemy.orm

from relaypage.typing import SAModelOrAlias
from relaypage import exc


def unaliased_class(Model: SAModelOrAlias) -> type:
    """ Get the actual model class; unaliased, if was

    Args:
         Model: model class or AliasedClass
    """
    return sa.inspect(Model).mapper.class_


def statement_entities(stmt: sa.sql.Select) -> dict[str, SAModelOrAlias]:
    """ Get ORM entities selected by a statement, keyed by the name they go by in the query

    Example:
        statement_entities(select(aliased(Product, name='product')))  #-> {'product': <AliasedClass>}
    """
    return {
        desc['name']: desc['entity']
        for desc in stmt.column_descriptions
        if desc['entity'] is not None and desc['expr'] is desc['entity']
    }


def resolve_entity_by_alias(alias: str, stmt: sa.sql.Select, *, where: str) -> SAModelOrAlias:
    """ Find the ORM entity selected by `stmt`

    Args:
        alias: Entity name, as used in the query. Empty: the one and only entity
        stmt: The statement to look into
        where: Where the name was mentioned, for error reporting

    Raises:
        exc.PaginationArgumentsError: the statement selects no single entity, or none by this name
    """
    entities = statement_entities(stmt)

    if not alias:
        if len(entities) != 1:
            raise exc.PaginationArgumentsError(f'{where}: the statement must select exactly one entity, got {len(entities)}')
        return next(iter(entities.values()))

    try:
        return entities[alias]
    except KeyError as e:
        raise exc.PaginationArgumentsError(f'{where}: unknown entity "{alias}"; available: {", ".join(entities)}') from e
