import pytest
import sqlalchemy as sa
import sqlalchemy.orm

from relaypage import exc
from relaypage.filter import JoinBuilder, FiltersExpression, FilterInput, ComparisonOperator, LogicalOperator
from relaypage.testing import stmt2sql

from .util.models import Product

AND, OR = LogicalOperator.AND, LogicalOperator.OR
EQ = ComparisonOperator.EQUAL


@pytest.mark.parametrize(('expression', 'expected_joins'), [
    # Nothing to join
    (None, set()),
    (FiltersExpression(AND), set()),
    (FiltersExpression(AND, [FilterInput('product.name', EQ, 'Book 1')]), set()),
    # One relation, one join
    (FiltersExpression(AND, [
        FilterInput('category.name', EQ, 'Books', relation_field='product.category_relation'),
    ]), {'category'}),
    # Same relation twice: still one join
    (FiltersExpression(AND, [
        FilterInput('category.name', EQ, 'Books', relation_field='product.category_relation'),
        FilterInput('category.slug', EQ, 'books', relation_field='product.category_relation'),
    ]), {'category'}),
    # Nested expressions are joined as well
    (FiltersExpression(OR, [FilterInput('product.name', EQ, 'Book 1')], [
        FiltersExpression(AND, [FilterInput('category.slug', EQ, 'books', relation_field='product.category_relation')]),
        FiltersExpression(AND, [FilterInput('category.name', EQ, 'Books', relation_field='product.category_relation')]),
    ]), {'category'}),
    # Empty values still join: the filter is skipped, the join is harmless
    (FiltersExpression(AND, [
        FilterInput('category.name', EQ, None, relation_field='product.category_relation'),
    ]), {'category'}),
    # Two aliases for the same relationship: two joins
    (FiltersExpression(AND, [
        FilterInput('category.name', EQ, 'Books', relation_field='product.category_relation'),
        FilterInput('cat2.name', EQ, 'Books', relation_field='product.category_relation'),
    ]), {'category', 'cat2'}),
])
def test_join_builder(expression: FiltersExpression, expected_joins: set[str]):
    """ Test: every alias is joined at most once """
    product = sa.orm.aliased(Product, name='product')
    builder = JoinBuilder(expression, {'product': product})
    stmt = builder.apply(sa.select(product))

    assert builder.joined_entities == expected_joins
    assert set(builder.aliases) == {'product', *expected_joins}

    # Check the SQL
    sql = stmt2sql(stmt)
    assert sql.count('LEFT OUTER JOIN') == len(expected_joins)
    for alias in expected_joins:
        assert f'LEFT OUTER JOIN categories AS {alias} ON ' in sql


@pytest.mark.parametrize(('filter', 'expected_exception', 'expected_message'), [
    # No entity prefix
    (FilterInput('name', EQ, 'Books', relation_field='product.category_relation'), exc.MalformedFieldError, 'Entity name is required'),
    (FilterInput('.name', EQ, 'Books', relation_field='product.category_relation'), exc.MalformedFieldError, 'Entity name is required'),
    (FilterInput('name', EQ, 'Books'), exc.MalformedFieldError, 'Entity name is required'),
    (FilterInput('.name', EQ, 'Books'), exc.MalformedFieldError, 'Entity name is required'),
    (FilterInput('', EQ, 'Books'), exc.MalformedFieldError, 'Entity name is required'),
    # Unknown parent entity
    (FilterInput('category.name', EQ, 'Books', relation_field='user.category_relation'), exc.MalformedFieldError, 'unknown entity "user"'),
    # Not a relationship
    (FilterInput('category.name', EQ, 'Books', relation_field='product.nonexistent'), exc.InvalidRelationError, 'Invalid column "nonexistent"'),
    (FilterInput('category.name', EQ, 'Books', relation_field='product.price'), exc.InvalidRelationError, 'Invalid column "price"'),
])
def test_join_builder_errors(filter: FilterInput, expected_exception: type, expected_message: str):
    product = sa.orm.aliased(Product, name='product')
    builder = JoinBuilder(FiltersExpression(AND, [filter]), {'product': product})

    with pytest.raises(expected_exception) as e:
        builder.apply(sa.select(product))

    assert expected_message in str(e.value)


def test_join_builder_apply_again():
    """ Test: every apply() joins from scratch """
    product = sa.orm.aliased(Product, name='product')
    builder = JoinBuilder(FiltersExpression(AND, [
        FilterInput('category.name', EQ, 'Books', relation_field='product.category_relation'),
    ]), {'product': product})

    for _ in range(2):
        sql = stmt2sql(builder.apply(sa.select(product)))
        assert sql.count('LEFT OUTER JOIN') == 1
        assert builder.joined_entities == {'category'}
        assert set(builder.aliases) == {'product', 'category'}

    # The entities given to the constructor stay as they were
    assert set(builder.root_aliases) == {'product'}
