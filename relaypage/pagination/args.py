""" Pagination arguments: first/after, last/before """

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from relaypage import exc


class PageDirection(enum.Enum):
    """ Which way we're paginating """
    # `first` + `after`: towards the end of the list
    FORWARD = 'forward'

    # `last` + `before`: towards the start of the list
    BACKWARD = 'backward'


class SortDirection(str, enum.Enum):
    """ Sorting direction for a field """
    ASC = 'asc'
    DESC = 'desc'


@dataclass
class SortInput:
    """ Sort the results by a field

    Example:
        SortInput(field='price', direction=SortDirection.DESC)
    """
    # Field name. Default: the identifier
    field: Optional[str] = None

    direction: SortDirection = SortDirection.ASC

    @classmethod
    def from_dict(cls, sort: Optional[dict]) -> Optional[SortInput]:
        if sort is None:
            return None

        try:
            direction = SortDirection(sort.get('direction') or SortDirection.ASC)
        except ValueError as e:
            raise exc.PaginationArgumentsError(f'Invalid sort direction: {sort["direction"]!r}') from e

        return cls(
            field=sort.get('field'),
            direction=direction,
        )


@dataclass
class PaginationArgs:
    """ Relay pagination arguments

    Example:
        PaginationArgs(first=5)  # the first page
        PaginationArgs(first=5, after=page.page_info.end_cursor)  # the next page
        PaginationArgs(last=5, before=page.page_info.start_cursor)  # the previous page
    """
    # Forward pagination: the number of items to take, and the cursor to start after
    first: Optional[int] = None
    after: Optional[str] = None

    # Backward pagination: the number of items to take, and the cursor to end before
    last: Optional[int] = None
    before: Optional[str] = None

    # Flip the natural ordering: descending for forward pagination, ascending for backward pagination
    reverse: bool = False

    @classmethod
    def from_dict(cls, args: dict) -> PaginationArgs:
        """ Get arguments from a dict, e.g. from GraphQL field arguments """
        return cls(
            first=args.get('first'),
            after=args.get('after'),
            last=args.get('last'),
            before=args.get('before'),
            reverse=bool(args.get('reverse', False)),
        )

    @property
    def direction(self) -> PageDirection:
        return PageDirection.BACKWARD if self.last is not None else PageDirection.FORWARD

    @property
    def cursor(self) -> Optional[str]:
        """ The cursor to continue from, if any """
        return self.before if self.direction == PageDirection.BACKWARD else self.after

    @property
    def limit(self) -> Optional[int]:
        """ The number of rows requested, if any """
        return self.last if self.direction == PageDirection.BACKWARD else self.first

    def validate(self):
        """ Validate or fail: that the arguments make sense together

        Raises:
            exc.PaginationArgumentsError
        """
        if self.first is not None and self.last is not None:
            raise exc.PaginationArgumentsError('"first" and "last" cannot be used together')

        for name in ('first', 'last'):
            value = getattr(self, name)
            if value is None:
                continue
            # `bool` is an `int` too, but it's not a count
            if not isinstance(value, int) or isinstance(value, bool):
                raise exc.PaginationArgumentsError(f'"{name}" must be an integer, got {value!r}')
            if value < 0:
                raise exc.PaginationArgumentsError(f'"{name}" must not be negative, got {value}')

        if self.after is not None and self.first is None:
            raise exc.PaginationArgumentsError('"after" can only be used with "first"')
        if self.before is not None and self.last is None:
            raise exc.PaginationArgumentsError('"before" can only be used with "last"')
