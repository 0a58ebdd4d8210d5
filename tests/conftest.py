import os
import pytest
import sqlalchemy as sa
import sqlalchemy.orm

from relaypage.testing import created_tables, insert

from .util.models import Base, Category, Product, category_rows, product_rows


@pytest.fixture(scope='function')
def engine() -> sa.engine.Engine:
    engine = sa.engine.create_engine(DATABASE_URL)
    yield engine
    engine.dispose()


@pytest.fixture(scope='function')
def connection(engine: sa.engine.Engine) -> sa.engine.Connection:
    with engine.connect() as conn:
        yield conn


@pytest.fixture(scope='function')
def products_db(connection: sa.engine.Connection):
    """ Tables with 3 categories and 40 products """
    with created_tables(connection, Base):
        insert(connection, Category, *category_rows())
        insert(connection, Product, *product_rows())
        yield


@pytest.fixture(scope='function')
def ssn(connection: sa.engine.Connection, products_db) -> sa.orm.Session:
    """ A session over the products database """
    with sa.orm.Session(bind=connection, autoflush=False) as ssn:
        yield ssn


# URL of the database to connect to
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite://')
