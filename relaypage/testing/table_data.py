""" Test data: fill tables with rows """

from typing import Union

import sqlalchemy as sa


def insert(connection: sa.engine.Connection, Model: Union[sa.sql.Selectable, type], *values: dict):
    """ INSERT rows into the model's table, bypassing the ORM

    All rows must have the same keys: they go into one multi-row INSERT.

    Example:
        insert(connection, Category,
               dict(id='cat-1', name='Electronics', slug='electronics'),
               dict(id='cat-2', name='Books', slug='books'),
        )
    """
    if not values:
        return

    keys = values[0].keys()
    assert all(row.keys() == keys for row in values), 'All rows must have the same keys'

    connection.execute(sa.insert(Model).values(list(values)))
