""" Filter expressions: a tree of conditions compiled into JOINs and a WHERE clause """

from .operators import ComparisonOperator, LogicalOperator
from .inputs import FilterInput, FiltersExpression
from .join import JoinBuilder
from .where import WhereBuilder, CompiledWhere
from .builder import FilterQueryBuilder
from .search import build_filters_expression_from_query_string
