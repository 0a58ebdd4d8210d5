""" Relay cursor pagination """

from .args import PaginationArgs, PageDirection, SortDirection, SortInput
from .settings import PaginationSettings
from .connection import Connection, Edge, PageInfo
from .connection import ConnectionDict, EdgeDict, PageInfoDict
from .keyset import KeysetOrder
from .paginate import paginate
