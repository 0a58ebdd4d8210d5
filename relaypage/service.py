""" Entity pagination service: filter, sort, search and paginate an entity """

from __future__ import annotations

import dataclasses
import logging
from collections import abc
from typing import Optional, Union

import sqlalchemy as sa
import sqlalchemy.orm

from relaypage.filter import FiltersExpression, FilterQueryBuilder, build_filters_expression_from_query_string
from relaypage.pagination import Connection, PaginationArgs, PaginationSettings, SortDirection, SortInput, paginate
from relaypage.pagination.paginate import IDENTIFIER_COLUMN
from relaypage.typing import SAModel


class EntityPaginationService:
    """ Paginated access to one entity

    Subclass it to add domain-specific queries; override get_order_by() to validate or map sort fields.

    Example:
        class ProductService(EntityPaginationService):
            def __init__(self):
                super().__init__(Product, 'product')

        page = ProductService().get_filtered_connection(ssn, PaginationArgs(first=10),
                                                        filters=expression,
                                                        sort=SortInput('price', SortDirection.DESC))
    """

    def __init__(self, Model: SAModel, alias: Optional[str] = None, settings: Optional[PaginationSettings] = None):
        """

        Args:
            Model: The entity to paginate
            alias: The name of the entity in queries and filters. Default: the model name
            settings: Page size settings
        """
        self.Model = Model
        self.alias = alias or Model.__name__
        self.settings = settings
        self.logger = logging.getLogger(f'{__name__}.{self.alias}')

    def get_order_by(self, sort: Optional[SortInput] = None) -> str:
        """ Get the cursor column to sort by: "alias.field" """
        field = sort.field if sort is not None and sort.field else IDENTIFIER_COLUMN
        return f'{self.alias}.{field}'

    def get_filtered_connection(self,
                                session: sa.orm.Session,
                                args: Union[PaginationArgs, dict],
                                filters: Optional[FiltersExpression] = None,
                                sort: Optional[SortInput] = None,
                                ) -> Connection:
        """ Get a page of entities that match the filters

        Raises:
            exc.PaginationArgumentsError
            exc.FilterError
            exc.InvalidColumnError
        """
        if isinstance(args, dict):
            args = PaginationArgs.from_dict(args)

        # Descending sort is the reversed natural order
        if sort is not None and sort.direction == SortDirection.DESC:
            args = dataclasses.replace(args, reverse=not args.reverse)

        stmt = self.get_filtered_statement(filters)
        cursor_column = self.get_order_by(sort)

        self.logger.debug('Connection: filters=%r, sort=%s', filters, cursor_column)
        return paginate(session, stmt, args, cursor_column, settings=self.settings)

    def get_filtered_statement(self, filters: Optional[FiltersExpression] = None) -> sa.sql.Select:
        """ Get the SELECT statement for the entity, filtered """
        return FilterQueryBuilder(self.Model, filters, alias=self.alias).build()

    def search(self,
               session: sa.orm.Session,
               query: str,
               field_names: abc.Iterable[str],
               args: Union[PaginationArgs, dict],
               sort: Optional[SortInput] = None,
               ) -> Connection:
        """ Get a page of entities where any of the fields contains any word of the query """
        filters = build_filters_expression_from_query_string(query, self.alias, field_names)
        return self.get_filtered_connection(session, args, filters, sort)
