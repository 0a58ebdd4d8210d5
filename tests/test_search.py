import pytest
import sqlalchemy as sa
import sqlalchemy.orm

from relaypage.filter import FilterQueryBuilder, FilterInput, ComparisonOperator, LogicalOperator
from relaypage.filter import build_filters_expression_from_query_string
from relaypage.filter.search import split_search_terms

from .util.models import Product, product_ids


@pytest.mark.parametrize(('query', 'expected_terms'), [
    ('laptop', ['laptop']),
    ('laptop gaming', ['laptop', 'gaming']),
    ('laptop   gaming', ['laptop', 'gaming']),
    # Empty terms are kept: they get skipped later
    ('', ['']),
    (' laptop', ['', 'laptop']),
    # Quoted phrases: the words still become separate terms
    ('"gaming laptop"', ['', 'gaming', 'laptop', '']),
    ('"red dragon" keyboard', ['', 'red', 'dragon', 'keyboard']),
])
def test_split_search_terms(query: str, expected_terms: list[str]):
    assert split_search_terms(query) == expected_terms


def test_build_filters_expression_from_query_string():
    """ Test: every term, every field, ORed together """
    expression = build_filters_expression_from_query_string('laptop gaming', 'product', ['name', 'description', 'category'])

    assert expression.operator == LogicalOperator.OR
    assert expression.child_expressions == []
    assert expression.filters == [
        FilterInput('product.name', ComparisonOperator.ILIKE, 'laptop'),
        FilterInput('product.description', ComparisonOperator.ILIKE, 'laptop'),
        FilterInput('product.category', ComparisonOperator.ILIKE, 'laptop'),
        FilterInput('product.name', ComparisonOperator.ILIKE, 'gaming'),
        FilterInput('product.description', ComparisonOperator.ILIKE, 'gaming'),
        FilterInput('product.category', ComparisonOperator.ILIKE, 'gaming'),
    ]


def test_build_filters_expression_from_empty_query_string():
    """ Test: an empty query makes filters with empty values """
    expression = build_filters_expression_from_query_string('', 'product', ['name', 'description', 'category'])
    assert len(expression.filters) == 3
    assert all(filter.value == '' for filter in expression.filters)


@pytest.mark.parametrize(('query', 'expected_ids'), [
    # Case-insensitive
    ('LAPTOP', product_ids(*range(1, 16))),
    # Any of the terms
    ('book shirt', product_ids(*range(16, 41))),
    # Quoted phrase: any of its words
    ('"interesting book" shirt', product_ids(*range(16, 41))),
    # Nothing to search for: no filtering at all
    ('', product_ids(*range(1, 41))),
    ('keyboard', []),
])
def test_search_results(ssn: sa.orm.Session, query: str, expected_ids: list[str]):
    """ Test: search real data """
    expression = build_filters_expression_from_query_string(query, 'product', ['name', 'description'])
    builder = FilterQueryBuilder(Product, expression, alias='product')

    products = ssn.scalars(builder.build().order_by(builder.entity.id)).all()
    assert [p.id for p in products] == expected_ids
