""" Tools for testing """

from .recreate_tables import created_tables
from .recreate_tables import create_tables, drop_tables
from .table_data import insert

from .stmt_text import stmt2sql
from .query_logger import QueryCounter, ExpectedQueryCounter
