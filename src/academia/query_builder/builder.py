"""QueryBuilder - turns raw client query parameters into a composed SELECT."""

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import String, cast, false, func, inspect, or_, select
from sqlalchemy.orm import load_only

from academia.logging import get_logger
from academia.records.models import to_naive_utc

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy import ColumnElement, Select
    from sqlalchemy.orm import Mapper

    from academia.records.models import Base

logger = get_logger("query_builder")

# Query keys consumed by the builder itself; everything else is a filter
RESERVED_KEYS = frozenset({"searchTerm", "sort", "limit", "page", "fields"})

DEFAULT_SORT = "-created_at"
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

# Largest OFFSET or LIMIT SQLite accepts (signed 64-bit)
MAX_SQL_INTEGER = 2**63 - 1

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")
_LIST_SEPARATOR = re.compile(r"[,\s]+")


def to_snake_case(name: str) -> str:
    """Convert a camelCase name to snake_case."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def coerce_positive_int(value: Any, default: int) -> int:
    """Coerce a raw query value to a positive integer.

    Args:
        value: Raw value, usually a string from the query string.
        default: Returned when the value is missing, malformed, not positive
            or too large for a SQL integer.

    Returns:
        The parsed integer or the default.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(str(value).strip())
    except ValueError:
        return default
    return number if 0 < number <= MAX_SQL_INTEGER else default


class QueryBuilder:
    """Composes search, filter, sort, pagination and projection on a SELECT.

    The builder owns one query per request. Each stage rebinds the immutable
    ``Select`` and returns the builder so stages can be chained:

        builder = (
            QueryBuilder(select(AcademicSemester), params)
            .search(["name", "code"])
            .filter()
            .sort()
            .paginate()
            .fields()
        )
        records = session.execute(builder.query).scalars().all()

    The raw parameter mapping is copied and never modified. Malformed input is
    coerced to defaults rather than rejected.
    """

    def __init__(
        self,
        query: Select[Any],
        params: Mapping[str, Any],
        default_limit: int = DEFAULT_LIMIT,
    ) -> None:
        """Initialize the builder.

        Args:
            query: Base query selecting exactly one mapped model. May already
                carry loader options such as ``selectinload``.
            params: Raw client query parameters.
            default_limit: Page size used when ``limit`` is absent or invalid.
        """
        self.query = query
        self.params: dict[str, Any] = dict(params)
        self.model: type[Base] = query.column_descriptions[0]["entity"]
        self.default_limit = default_limit
        self.page = DEFAULT_PAGE
        self.limit = default_limit
        self.skip = 0
        self.projection: list[str] = self.model.default_fields()

    @property
    def _mapper(self) -> Mapper[Any]:
        return inspect(self.model)

    def resolve_attribute(self, name: str) -> str | None:
        """Map a client field name (snake or camel case) to a mapped attribute key."""
        name = name.strip()
        if not name:
            return None
        for candidate in (name, to_snake_case(name)):
            if candidate in self._mapper.attrs:
                return candidate
        return None

    def resolve_column(self, name: str) -> ColumnElement[Any] | None:
        """Map a client field name to a column expression.

        Relationship names resolve to their foreign key column so that
        ``academicSemester=<id>`` filters on ``academic_semester_id``.
        """
        key = self.resolve_attribute(name)
        if key is None:
            return None
        if key in self._mapper.column_attrs:
            return getattr(self.model, key)
        relationship = self._mapper.relationships[key]
        local_columns = list(relationship.local_columns)
        if len(local_columns) != 1:
            return None
        return local_columns[0]

    def search(self, searchable_fields: Sequence[str]) -> QueryBuilder:
        """Case-insensitive partial match of ``searchTerm`` across fields (OR)."""
        term = self.params.get("searchTerm")
        if term is None or not str(term).strip():
            return self

        term = str(term).strip()
        conditions = []
        for field in searchable_fields:
            column = self.resolve_column(field)
            if column is None:
                logger.debug("Ignoring unknown searchable field %r", field)
                continue
            if not isinstance(column.type, String):
                column = cast(column, String)
            conditions.append(column.icontains(term, autoescape=True))

        if conditions:
            self.query = self.query.where(or_(*conditions))
        return self

    def filter(self) -> QueryBuilder:
        """Exact-match filter for every non-reserved key."""
        for key, value in self.params.items():
            if key in RESERVED_KEYS:
                continue
            column = self.resolve_column(key)
            if column is None:
                # A field no record has matches no record
                logger.debug("Filter on unknown field %r matches nothing", key)
                self.query = self.query.where(false())
                continue
            self.query = self.query.where(column == _coerce_to_column(column, value))
        return self

    def sort(self) -> QueryBuilder:
        """Compound sort from a comma list, ``-`` prefix for descending."""
        raw = self.params.get("sort")
        if raw is None or not str(raw).strip():
            raw = DEFAULT_SORT

        clauses = []
        for token in str(raw).split(","):
            token = token.strip()
            descending = token.startswith("-")
            column = self.resolve_column(token[1:] if descending else token)
            if column is None:
                if token:
                    logger.debug("Ignoring unknown sort field %r", token)
                continue
            clauses.append(column.desc() if descending else column.asc())

        if clauses:
            self.query = self.query.order_by(*clauses)
        return self

    def paginate(self) -> QueryBuilder:
        """Apply ``skip = (page - 1) * limit`` then ``limit``."""
        self.page = coerce_positive_int(self.params.get("page"), DEFAULT_PAGE)
        self.limit = coerce_positive_int(self.params.get("limit"), self.default_limit)
        self.skip = min((self.page - 1) * self.limit, MAX_SQL_INTEGER)
        self.query = self.query.offset(self.skip).limit(self.limit)
        return self

    def fields(self) -> QueryBuilder:
        """Restrict loaded and serialized fields to the ``fields`` list."""
        raw = self.params.get("fields")
        if raw is None or not str(raw).strip():
            return self

        names: list[str] = ["id"]
        for token in _LIST_SEPARATOR.split(str(raw)):
            key = self.resolve_attribute(token)
            if key is not None and key not in names:
                names.append(key)

        mapper = self._mapper
        loaded = [getattr(self.model, name) for name in names if name in mapper.column_attrs]
        # Foreign keys stay loaded so eager-loaded relationships can resolve
        for relationship in mapper.relationships:
            for column in relationship.local_columns:
                loaded.append(getattr(self.model, mapper.get_property_by_column(column).key))

        self.query = self.query.options(load_only(*loaded))
        self.projection = names
        return self

    def count_query(self) -> Select[tuple[int]]:
        """Count of records matching the query, ignoring sort and pagination."""
        unpaged = self.query.limit(None).offset(None).order_by(None)
        return select(func.count()).select_from(unpaged.subquery())

    def meta(self, total: int) -> dict[str, int]:
        """Pagination metadata for a total record count."""
        return {
            "page": self.page,
            "limit": self.limit,
            "total": total,
            "total_page": math.ceil(total / self.limit),
        }


def _coerce_to_column(column: ColumnElement[Any], value: Any) -> Any:
    """Cast a raw string to the column's Python type where that is unambiguous."""
    if not isinstance(value, str):
        return value
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value
    if python_type is int:
        try:
            number = int(value.strip())
        except ValueError:
            return value
        return number if abs(number) <= MAX_SQL_INTEGER else value
    if python_type is datetime:
        try:
            return to_naive_utc(datetime.fromisoformat(value.strip()))
        except ValueError:
            return value
    return value
