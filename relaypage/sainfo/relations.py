""" Relationships: find them by name, see where they lead """

from __future__ import annotations

from sqlalchemy.orm import QueryableAttribute, RelationshipProperty

from relaypage import exc
from relaypage.sainfo.names import model_name
from relaypage.typing import SAModelOrAlias, SAAttribute


def resolve_relation_by_name(field_name: str, Model: SAModelOrAlias, *, where: str) -> QueryableAttribute:
    """ Get a relationship attribute by name

    Raises:
        exc.InvalidRelationError: no such attribute, or it's not a relationship
    """
    attribute = getattr(Model, field_name, None)
    if attribute is None or not is_relation(attribute):
        raise exc.InvalidRelationError(model_name(Model), field_name, where=where)
    return attribute


def is_relation(attribute: SAAttribute) -> bool:
    return (
        isinstance(attribute, QueryableAttribute) and
        isinstance(attribute.property, RelationshipProperty)
    )


def target_model(attribute: SAAttribute) -> type:
    """ Get the model class a relationship points to """
    return attribute.property.mapper.class_
