""" Test database structure: create tables for a test, drop them afterwards """

from __future__ import annotations

from contextlib import contextmanager
from typing import Union

import sqlalchemy as sa

EngineOrConnection = Union[sa.engine.Engine, sa.engine.Connection]
MetadataOrBase = Union[sa.MetaData, type]


@contextmanager
def created_tables(bind: EngineOrConnection, metadata: MetadataOrBase):
    """ Tables that exist for the duration of the context

    Example:
        with created_tables(connection, Base):
            insert(connection, Product, *product_rows())
            ...

    Args:
        bind: Engine or Connection
        metadata: MetaData, or a declarative base that has one
    """
    metadata = get_metadata(metadata)
    create_tables(bind, metadata)
    try:
        yield metadata
    finally:
        drop_tables(bind, metadata)


def create_tables(bind: EngineOrConnection, metadata: MetadataOrBase):
    get_metadata(metadata).create_all(bind=bind)


def drop_tables(bind: EngineOrConnection, metadata: MetadataOrBase):
    get_metadata(metadata).drop_all(bind=bind)


def get_metadata(obj: MetadataOrBase) -> sa.MetaData:
    """ Get MetaData from a MetaData or a declarative base """
    if isinstance(obj, sa.MetaData):
        return obj

    metadata = getattr(obj, 'metadata', None)
    if not isinstance(metadata, sa.MetaData):
        raise TypeError(f'Expected MetaData or a declarative base, got {obj!r}')
    return metadata
