""" Count SQL statements: make sure pagination does not run more queries than it should """

from __future__ import annotations

import logging

import sqlalchemy as sa

from .stmt_text import _insert_query_params

logger = logging.getLogger(__name__)


class QueryCounter:
    """ Collects SQL statements executed on the engine while the context is active

    Example:
        with QueryCounter(engine) as qc:
            paginate(ssn, stmt, {'first': 5})
        assert qc.n == 3
    """

    def __init__(self, engine: sa.engine.Engine):
        self.engine = engine
        self.statements: list[str] = []

    @property
    def n(self) -> int:
        """ The number of statements executed so far """
        return len(self.statements)

    def log_statements(self, level: int = logging.INFO):
        for i, statement in enumerate(self.statements, 1):
            logger.log(level, 'Query #%d:\n%s', i, statement)

    def _on_execute(self, conn, cursor, statement, parameters, context, executemany):
        self.statements.append(_insert_query_params(statement, parameters))

    def _done(self):
        """ Called when the context exits without an error """

    def __enter__(self):
        sa.event.listen(self.engine, 'after_cursor_execute', self._on_execute)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        sa.event.remove(self.engine, 'after_cursor_execute', self._on_execute)
        if exc_type is None:
            self._done()
        else:
            self.log_statements(logging.ERROR)
        return False


class ExpectedQueryCounter(QueryCounter):
    """ Fails unless exactly `expected_queries` statements were executed

    Example:
        with ExpectedQueryCounter(engine, 3, 'Expected: load, count before, count after'):
            paginate(ssn, stmt, {'first': 5})
    """

    def __init__(self, engine: sa.engine.Engine, expected_queries: int, comment: str):
        super().__init__(engine)
        self.expected_queries = expected_queries
        self.comment = comment

    def _done(self):
        if self.n != self.expected_queries:
            self.log_statements(logging.ERROR)
            raise AssertionError(f'{self.comment} (expected {self.expected_queries} queries, actually had {self.n})')
