"""Query Builder - composable search, filter, sort, pagination and projection."""

from academia.query_builder.builder import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    DEFAULT_SORT,
    MAX_SQL_INTEGER,
    RESERVED_KEYS,
    QueryBuilder,
    coerce_positive_int,
    to_snake_case,
)

__all__ = [
    "DEFAULT_LIMIT",
    "DEFAULT_PAGE",
    "DEFAULT_SORT",
    "MAX_SQL_INTEGER",
    "RESERVED_KEYS",
    "QueryBuilder",
    "coerce_positive_int",
    "to_snake_case",
]
