"""Shared pytest fixtures and configuration."""

from collections.abc import Callable, Iterator
from datetime import datetime, timedelta
from typing import Any

import pytest

from academia.records import (
    SEMESTER_NAME_CODE_MAP,
    AcademicSemester,
    Database,
    SemesterName,
    SemesterRegistration,
)


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture
def db() -> Iterator[Database]:
    """In-memory database with tables created."""
    database = Database(":memory:")
    database.create_tables()
    yield database
    database.close()


@pytest.fixture
def add_semester(db: Database) -> Callable[..., AcademicSemester]:
    """Insert an academic semester directly, bypassing the service."""

    def _add(name: str = "Autumn", year: int = 2030, **kwargs: Any) -> AcademicSemester:
        with db.session_scope() as session:
            semester = AcademicSemester(
                name=name,
                year=year,
                code=SEMESTER_NAME_CODE_MAP[SemesterName(name)].value,
                start_month="January",
                end_month="April",
                **kwargs,
            )
            session.add(semester)
            session.commit()
            session.refresh(semester)
        return semester

    return _add


@pytest.fixture
def add_registration(db: Database) -> Callable[..., SemesterRegistration]:
    """Insert a semester registration directly, bypassing the state machine."""

    def _add(
        academic_semester_id: str, status: str = "UPCOMING", **kwargs: Any
    ) -> SemesterRegistration:
        kwargs.setdefault("start_date", datetime(2030, 1, 1))
        kwargs.setdefault("end_date", kwargs["start_date"] + timedelta(days=119))
        with db.session_scope() as session:
            registration = SemesterRegistration(
                academic_semester_id=academic_semester_id, status=status, **kwargs
            )
            session.add(registration)
            session.commit()
            session.refresh(registration)
        return registration

    return _add
