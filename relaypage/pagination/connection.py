""" Relay connection: the paginated result """

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Optional, TypedDict, TypeVar

from relaypage.typing import NodeEntity


NodeT = TypeVar('NodeT', bound=NodeEntity)


@dataclass
class Edge(Generic[NodeT]):
    """ A paginated item, with a cursor that points to it """
    node: NodeT
    cursor: str

    def to_dict(self) -> EdgeDict:
        return {'node': self.node, 'cursor': self.cursor}


@dataclass
class PageInfo:
    """ Information about the page: where it is in the result set """
    # Cursors of the first and the last edges. `None` when the page is empty.
    start_cursor: Optional[str]
    end_cursor: Optional[str]

    # Are there any rows before and after this page?
    has_previous_page: bool
    has_next_page: bool

    # The number of rows before and after this page
    count_before: int
    count_after: int

    # The number of rows in the whole result set: count_before + len(edges) + count_after
    total_count: int

    @classmethod
    def from_counts(cls, edges: list[Edge], count_before: int, count_after: int) -> PageInfo:
        """ Make page info for a page of edges with so many rows around it """
        return cls(
            start_cursor=edges[0].cursor if edges else None,
            end_cursor=edges[-1].cursor if edges else None,
            has_previous_page=count_before > 0,
            has_next_page=count_after > 0,
            count_before=count_before,
            count_after=count_after,
            total_count=count_before + count_after + len(edges),
        )

    def to_dict(self) -> PageInfoDict:
        return {
            'startCursor': self.start_cursor,
            'endCursor': self.end_cursor,
            'hasPreviousPage': self.has_previous_page,
            'hasNextPage': self.has_next_page,
            'countBefore': self.count_before,
            'countAfter': self.count_after,
            'totalCount': self.total_count,
        }


@dataclass
class Connection(Generic[NodeT]):
    """ Relay Connection: one page of results """
    edges: list[Edge[NodeT]]
    page_info: PageInfo = field(default_factory=lambda: PageInfo.from_counts([], 0, 0))

    @property
    def total_count(self) -> int:
        return self.page_info.total_count

    @property
    def nodes(self) -> list[NodeT]:
        """ Just the items, without cursors """
        return [edge.node for edge in self.edges]

    def to_dict(self) -> ConnectionDict:
        """ Get the result in the Relay wire format """
        return {
            'edges': [edge.to_dict() for edge in self.edges],
            'pageInfo': self.page_info.to_dict(),
            'totalCount': self.total_count,
        }


class ConnectionDict(TypedDict):
    """ Relay Connection type: paginated list """
    edges: list[EdgeDict]
    pageInfo: PageInfoDict
    totalCount: int


class EdgeDict(TypedDict):
    """ Relay Edge type: paginated item """
    node: object
    cursor: str


class PageInfoDict(TypedDict):
    """ Relay Page Info, with counts """
    hasPreviousPage: bool
    hasNextPage: bool
    startCursor: Optional[str]
    endCursor: Optional[str]
    countBefore: int
    countAfter: int
    totalCount: int
