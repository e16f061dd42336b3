"""Academic semester service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import select

from academia.exceptions import BadRequestError, NotFoundError
from academia.logging import get_logger
from academia.query_builder import DEFAULT_LIMIT, QueryBuilder
from academia.records import SEMESTER_NAME_CODE_MAP, AcademicSemester, SemesterName
from academia.services.models import Page

if TYPE_CHECKING:
    from collections.abc import Mapping

    from academia.records import Database

logger = get_logger("services.academic_semester")

SEARCHABLE_FIELDS = ("name", "code", "year")


def ensure_code_matches_name(name: str, code: str) -> None:
    """Check that ``code`` is the code paired with semester ``name``.

    Raises:
        BadRequestError: If the pair is not in the lookup table.
    """
    try:
        expected = SEMESTER_NAME_CODE_MAP[SemesterName(name)]
    except ValueError as e:
        raise BadRequestError(f"Invalid semester name '{name}'") from e
    if expected != code:
        raise BadRequestError(f"Invalid semester code '{code}' for {name}, expected {expected}")


class AcademicSemesterService:
    """Create, query and update academic semesters."""

    def __init__(self, db: Database, default_limit: int = DEFAULT_LIMIT) -> None:
        self._db = db
        self._default_limit = default_limit

    def create_semester(
        self,
        name: str,
        year: int,
        code: str,
        start_month: str,
        end_month: str,
    ) -> AcademicSemester:
        """Create a new academic semester.

        Returns:
            Created AcademicSemester with generated ID.

        Raises:
            BadRequestError: If name and code are not a matching pair.
            ConflictError: If a semester with the same name and year exists.
        """
        ensure_code_matches_name(name, code)

        with self._db.session_scope() as session:
            semester = AcademicSemester(
                name=name,
                year=year,
                code=code,
                start_month=start_month,
                end_month=end_month,
            )
            session.add(semester)
            session.commit()
            session.refresh(semester)

        logger.info("Created academic semester %s %s (%s)", name, year, semester.id)
        return semester

    def list_semesters(self, params: Mapping[str, Any]) -> Page:
        """List semesters using the client query contract."""
        builder = (
            QueryBuilder(select(AcademicSemester), params, default_limit=self._default_limit)
            .search(SEARCHABLE_FIELDS)
            .filter()
            .sort()
            .paginate()
            .fields()
        )
        return Page.fetch(self._db, builder)

    def get_semester(self, semester_id: str) -> AcademicSemester:
        """Get semester by ID.

        Raises:
            NotFoundError: If the semester doesn't exist.
        """
        with self._db.session_scope() as session:
            semester = session.get(AcademicSemester, semester_id)
            if semester is None:
                raise NotFoundError(f"Academic semester with id '{semester_id}' does not exist")
            return semester

    def update_semester(
        self,
        semester_id: str,
        name: str | None = None,
        year: int | None = None,
        code: str | None = None,
        start_month: str | None = None,
        end_month: str | None = None,
    ) -> AcademicSemester:
        """Update semester fields. Only provided fields are updated.

        The name/code pairing is checked against the merged record, so changing
        the name alone requires sending the matching code too.

        Raises:
            NotFoundError: If the semester doesn't exist.
            BadRequestError: If the merged name and code don't match.
            ConflictError: If the merged name and year collide with another semester.
        """
        with self._db.session_scope() as session:
            semester = session.get(AcademicSemester, semester_id)
            if semester is None:
                raise NotFoundError(f"Academic semester with id '{semester_id}' does not exist")

            ensure_code_matches_name(
                name if name is not None else semester.name,
                code if code is not None else semester.code,
            )

            if name is not None:
                semester.name = name
            if year is not None:
                semester.year = year
            if code is not None:
                semester.code = code
            if start_month is not None:
                semester.start_month = start_month
            if end_month is not None:
                semester.end_month = end_month

            session.commit()
            session.refresh(semester)

        logger.info("Updated academic semester %s", semester_id)
        return semester
