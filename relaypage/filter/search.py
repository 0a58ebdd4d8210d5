""" Free-text search: match any term in any field """

from __future__ import annotations

import re
from collections import abc

from .inputs import FilterInput, FiltersExpression
from .operators import ComparisonOperator, LogicalOperator


def build_filters_expression_from_query_string(query: str, entity_name: str, field_names: abc.Iterable[str]) -> FiltersExpression:
    """ Build a search filter: every term of the query, ILIKE every field, ORed together

    Example:
        build_filters_expression_from_query_string('red keyboard', 'product', ['name', 'sku'])
        # -> product.name ILIKE '%red%' OR product.sku ILIKE '%red%' OR product.name ILIKE '%keyboard%' OR ...

    Args:
        query: Search string, e.g. 'red keyboard'
        entity_name: Alias of the entity to search
        field_names: Fields to look in
    """
    field_names = list(field_names)
    return FiltersExpression(
        operator=LogicalOperator.OR,
        filters=[
            FilterInput(
                field=f'{entity_name}.{field_name}',
                operator=ComparisonOperator.ILIKE,
                value=term,
            )
            for term in split_search_terms(query)
            for field_name in field_names
        ],
    )


def split_search_terms(query: str) -> list[str]:
    """ Split a search string into terms

    Quoted phrases are cut out of the query, but their words still become separate terms.
    Empty terms are kept: the WHERE builder skips them.

    Example:
        split_search_terms('red keyboard')  #-> ['red', 'keyboard']
        split_search_terms('"red dragon" keyboard')  #-> ['', 'red', 'dragon', 'keyboard']
    """
    # No quotes: just words
    if '"' not in query:
        return WHITESPACE_REX.split(query)

    return [
        term
        for part in QUOTED_PHRASE_REX.split(query)
        for term in WHITESPACE_REX.split(part.strip().replace('"', ''))
    ]


# A quoted phrase: "..."
QUOTED_PHRASE_REX = re.compile(r'"([\s\S]+)"')

# Whitespace between terms
WHITESPACE_REX = re.compile(r'\s+')
