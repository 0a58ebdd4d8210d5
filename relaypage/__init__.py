__version__ = __import__('importlib.metadata').metadata.version('relaypage')

from .pagination import paginate
from .pagination import PaginationArgs, PaginationSettings, SortDirection, SortInput
from .pagination import Connection, Edge, PageInfo

from .cursor import encode_cursor, decode_cursor

from .filter import ComparisonOperator, LogicalOperator
from .filter import FilterInput, FiltersExpression
from .filter import FilterQueryBuilder, JoinBuilder, WhereBuilder
from .filter import build_filters_expression_from_query_string

from .service import EntityPaginationService

from . import exc
