"""Unit tests for QueryBuilder."""

from datetime import datetime

import pytest
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from academia.query_builder import (
    DEFAULT_LIMIT,
    MAX_SQL_INTEGER,
    QueryBuilder,
    coerce_positive_int,
    to_snake_case,
)
from academia.records import AcademicSemester, Database, SemesterRegistration
from academia.services import Page

SEARCHABLE = ("name", "code", "year")


def build(params: dict, default_limit: int = DEFAULT_LIMIT) -> QueryBuilder:
    """Run the full pipeline over academic semesters."""
    return (
        QueryBuilder(select(AcademicSemester), params, default_limit=default_limit)
        .search(SEARCHABLE)
        .filter()
        .sort()
        .paginate()
        .fields()
    )


def fetch(db: Database, params: dict) -> Page:
    return Page.fetch(db, build(params))


@pytest.mark.unit
class TestHelpers:
    """Tests for module helpers."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("createdAt", "created_at"),
            ("academicSemester", "academic_semester"),
            ("start_month", "start_month"),
            ("year", "year"),
        ],
    )
    def test_to_snake_case(self, name: str, expected: str) -> None:
        assert to_snake_case(name) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("3", 3),
            (" 7 ", 7),
            (4, 4),
            (None, 10),
            ("", 10),
            ("abc", 10),
            ("2.5", 10),
            ("0", 10),
            ("-3", 10),
            (True, 10),
            ("100000000000000000000", 10),
            (2**63, 10),
        ],
    )
    def test_coerce_positive_int(self, value: object, expected: int) -> None:
        assert coerce_positive_int(value, 10) == expected


@pytest.mark.unit
class TestPaginate:
    """Tests for paginate()."""

    def test_defaults_without_page_or_limit(self) -> None:
        """Page 1, default limit, zero skip."""
        builder = build({})

        assert builder.page == 1
        assert builder.limit == DEFAULT_LIMIT
        assert builder.skip == 0

    @pytest.mark.parametrize(("page", "limit"), [(1, 1), (2, 5), (3, 10), (7, 3)])
    def test_skip_formula(self, page: int, limit: int) -> None:
        """skip = (page - 1) * limit."""
        builder = build({"page": str(page), "limit": str(limit)})

        assert builder.skip == (page - 1) * limit
        assert builder.limit == limit

    @pytest.mark.parametrize(
        "params",
        [
            {"page": "0", "limit": "0"},
            {"page": "-2", "limit": "-5"},
            {"page": "abc", "limit": "xyz"},
            {"page": "", "limit": ""},
            {"page": "100000000000000000000", "limit": "100000000000000000000"},
        ],
    )
    def test_malformed_values_fall_back_to_defaults(self, params: dict) -> None:
        """Never raises and never produces a negative skip."""
        builder = build(params)

        assert builder.page == 1
        assert builder.limit == DEFAULT_LIMIT
        assert builder.skip == 0

    def test_skip_is_clamped_to_sql_integer_range(self) -> None:
        builder = build({"page": str(2**62), "limit": "100"})

        assert builder.page == 2**62
        assert builder.skip == MAX_SQL_INTEGER

    def test_oversized_values_still_query(self, db: Database, add_semester) -> None:
        add_semester(year=2030)

        huge = fetch(db, {"page": "100000000000000000000"})
        far = fetch(db, {"page": str(2**62), "limit": "100"})

        assert [r["year"] for r in huge.data] == [2030]
        assert far.data == []
        assert far.meta["total"] == 1

    def test_configured_default_limit(self) -> None:
        builder = build({}, default_limit=25)

        assert builder.limit == 25

    def test_pages_through_records(self, db: Database, add_semester) -> None:
        for year in range(2020, 2032):
            add_semester(year=year)

        page = fetch(db, {"sort": "year", "limit": "5", "page": "3"})

        assert [r["year"] for r in page.data] == [2030, 2031]
        assert page.meta == {"page": 3, "limit": 5, "total": 12, "total_page": 3}

    def test_descending_year_page_two(self, db: Database, add_semester) -> None:
        """12 semesters, sort -year, limit 5, page 2 returns ranks 6-10."""
        for year in range(2020, 2032):
            add_semester(year=year)

        page = fetch(db, {"sort": "-year", "limit": "5", "page": "2"})

        assert [r["year"] for r in page.data] == [2026, 2025, 2024, 2023, 2022]


@pytest.mark.unit
class TestSort:
    """Tests for sort()."""

    def test_default_sort_is_newest_first(self, db: Database, add_semester) -> None:
        add_semester(year=2030, created_at=datetime(2024, 1, 1))
        add_semester(year=2031, created_at=datetime(2024, 3, 1))
        add_semester(year=2032, created_at=datetime(2024, 2, 1))

        page = fetch(db, {})

        assert [r["year"] for r in page.data] == [2031, 2032, 2030]

    def test_compound_sort_with_tie_break(self, db: Database, add_semester) -> None:
        """-createdAt first, then ascending name."""
        same_time = datetime(2024, 5, 1)
        add_semester(name="Summer", year=2030, created_at=same_time)
        add_semester(name="Autumn", year=2030, created_at=same_time)
        add_semester(name="Fall", year=2030, created_at=datetime(2024, 6, 1))

        page = fetch(db, {"sort": "-createdAt,name"})

        assert [r["name"] for r in page.data] == ["Fall", "Autumn", "Summer"]

    def test_unknown_sort_field_is_ignored(self, db: Database, add_semester) -> None:
        add_semester(year=2031)
        add_semester(year=2030)

        page = fetch(db, {"sort": "bogus,year"})

        assert [r["year"] for r in page.data] == [2030, 2031]


@pytest.mark.unit
class TestFilter:
    """Tests for filter()."""

    def test_equality_filter_coerces_integers(self, db: Database, add_semester) -> None:
        add_semester(name="Autumn", year=2030)
        add_semester(name="Summer", year=2030)
        add_semester(name="Fall", year=2031)

        page = fetch(db, {"year": "2030"})

        assert {r["name"] for r in page.data} == {"Autumn", "Summer"}

    def test_camel_case_filter_key(self, db: Database, add_semester) -> None:
        add_semester(year=2030)

        assert len(fetch(db, {"startMonth": "January"}).data) == 1
        assert len(fetch(db, {"startMonth": "May"}).data) == 0

    def test_reserved_keys_are_not_filters(self, db: Database, add_semester) -> None:
        add_semester(year=2030)

        page = fetch(db, {"sort": "year", "page": "1", "limit": "10", "fields": "name"})

        assert len(page.data) == 1

    def test_unknown_field_matches_nothing(self, db: Database, add_semester) -> None:
        add_semester(year=2030)

        page = fetch(db, {"nonexistent": "value"})

        assert page.data == []
        assert page.meta["total"] == 0

    def test_relationship_name_filters_on_foreign_key(
        self, db: Database, add_semester, add_registration
    ) -> None:
        first = add_semester(year=2030)
        second = add_semester(year=2031)
        add_registration(first.id, status="ENDED")
        add_registration(second.id, status="UPCOMING")

        builder = (
            QueryBuilder(select(SemesterRegistration), {"academicSemester": second.id})
            .filter()
            .paginate()
        )
        page = Page.fetch(db, builder)

        assert [r["academic_semester_id"] for r in page.data] == [second.id]

    @pytest.mark.parametrize(
        "value", ["2030-01-01", "2030-01-01T00:00:00", "2030-01-01T02:00:00+02:00"]
    )
    def test_datetime_filter_coerces_iso_strings(
        self, db: Database, add_semester, add_registration, value: str
    ) -> None:
        add_registration(add_semester(year=2030).id, start_date=datetime(2030, 1, 1))
        add_registration(
            add_semester(year=2031).id, status="ENDED", start_date=datetime(2031, 1, 1)
        )

        builder = QueryBuilder(select(SemesterRegistration), {"startDate": value}).filter()
        page = Page.fetch(db, builder.paginate())

        assert [r["start_date"] for r in page.data] == [datetime(2030, 1, 1)]

    def test_unparseable_datetime_matches_nothing(
        self, db: Database, add_semester, add_registration
    ) -> None:
        add_registration(add_semester(year=2030).id)

        builder = QueryBuilder(select(SemesterRegistration), {"startDate": "soon"}).filter()

        assert Page.fetch(db, builder.paginate()).data == []

    def test_oversized_integer_filter_matches_nothing(self, db: Database, add_semester) -> None:
        add_semester(year=2030)

        assert fetch(db, {"year": "100000000000000000000"}).data == []

    def test_params_are_not_mutated(self) -> None:
        params = {"year": "2030", "sort": "-year", "page": "2"}
        snapshot = dict(params)

        build(params)

        assert params == snapshot


@pytest.mark.unit
class TestSearch:
    """Tests for search()."""

    def test_case_insensitive_partial_match(self, db: Database, add_semester) -> None:
        add_semester(name="Autumn", year=2030)
        add_semester(name="Summer", year=2030)

        page = fetch(db, {"searchTerm": "aut"})

        assert [r["name"] for r in page.data] == ["Autumn"]

    def test_matches_any_searchable_field(self, db: Database, add_semester) -> None:
        add_semester(name="Autumn", year=2030)
        add_semester(name="Summer", year=2041)

        page = fetch(db, {"searchTerm": "204"})

        assert [r["name"] for r in page.data] == ["Summer"]

    def test_wildcards_are_literal(self, db: Database, add_semester) -> None:
        add_semester(year=2030)

        assert fetch(db, {"searchTerm": "%"}).data == []

    def test_blank_term_is_noop(self, db: Database, add_semester) -> None:
        add_semester(year=2030)
        add_semester(year=2031)

        assert len(fetch(db, {"searchTerm": "   "}).data) == 2

    def test_search_combines_with_filter(self, db: Database, add_semester) -> None:
        add_semester(name="Autumn", year=2030)
        add_semester(name="Autumn", year=2031)
        add_semester(name="Summer", year=2031)

        page = fetch(db, {"searchTerm": "autumn", "year": "2031"})

        assert [(r["name"], r["year"]) for r in page.data] == [("Autumn", 2031)]


@pytest.mark.unit
class TestFields:
    """Tests for fields()."""

    def test_default_projection_hides_version(self, db: Database, add_semester) -> None:
        add_semester(year=2030)

        record = fetch(db, {}).data[0]

        assert "version" not in record
        assert {"id", "name", "year", "code", "created_at"} <= set(record)

    def test_projection_limits_fields_and_keeps_id(self, db: Database, add_semester) -> None:
        add_semester(year=2030)

        record = fetch(db, {"fields": "name,year"}).data[0]

        assert set(record) == {"id", "name", "year"}

    def test_projection_accepts_spaces_and_camel_case(self, db: Database, add_semester) -> None:
        add_semester(year=2030)

        record = fetch(db, {"fields": "name startMonth"}).data[0]

        assert set(record) == {"id", "name", "start_month"}

    def test_version_can_be_requested(self, db: Database, add_semester) -> None:
        add_semester(year=2030)

        record = fetch(db, {"fields": "version"}).data[0]

        assert record["version"] == 1

    def test_projection_with_populated_relationship(
        self, db: Database, add_semester, add_registration
    ) -> None:
        semester = add_semester(year=2030)
        add_registration(semester.id)

        base = select(SemesterRegistration).options(
            selectinload(SemesterRegistration.academic_semester)
        )
        builder = QueryBuilder(base, {"fields": "status,academicSemester"}).paginate().fields()
        record = Page.fetch(db, builder).data[0]

        assert set(record) == {"id", "status", "academic_semester"}
        assert record["academic_semester"]["year"] == 2030


@pytest.mark.unit
class TestEmptyPipeline:
    """An empty mapping only adds the default sort and limit."""

    def test_returns_every_record(self, db: Database, add_semester) -> None:
        for year in range(2030, 2035):
            add_semester(year=year)

        page = fetch(db, {})

        assert len(page.data) == 5
        assert page.meta == {"page": 1, "limit": DEFAULT_LIMIT, "total": 5, "total_page": 1}

    def test_chaining_returns_same_builder(self) -> None:
        builder = QueryBuilder(select(AcademicSemester), {})

        assert builder.search(SEARCHABLE) is builder
        assert builder.filter() is builder
        assert builder.sort() is builder
        assert builder.paginate() is builder
        assert builder.fields() is builder
