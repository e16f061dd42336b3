"""Semester registration service.

Wires the registration state machine to persistence. All checks run before
any write, so a rejected call leaves the database untouched.
"""

from __future__ import annotations

import threading
from datetime import datetime  # noqa: TC003
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from academia.logging import get_logger
from academia.query_builder import DEFAULT_LIMIT, QueryBuilder
from academia.records import (
    DEFAULT_MAX_CREDIT,
    DEFAULT_MIN_CREDIT,
    AcademicSemester,
    RegistrationStatus,
    SemesterRegistration,
    to_naive_utc,
)
from academia.registration import (
    IN_FLIGHT_STATUSES,
    INITIAL_STATUS,
    ensure_none_in_flight,
    ensure_not_ended,
    ensure_registration_exists,
    ensure_semester_exists,
    ensure_semester_not_registered,
    ensure_transition,
    validate_schedule,
)
from academia.services.models import Page

if TYPE_CHECKING:
    from collections.abc import Mapping

    from academia.records import Database

logger = get_logger("services.semester_registration")

SEARCHABLE_FIELDS = ("status",)


class SemesterRegistrationService:
    """Create, query and update semester registrations.

    Creation and update are check-then-act sequences over the whole
    collection, so they are serialized through a lock held for the duration
    of the checks and the write.
    """

    def __init__(self, db: Database, default_limit: int = DEFAULT_LIMIT) -> None:
        self._db = db
        self._default_limit = default_limit
        self._write_lock = threading.Lock()

    def create_registration(
        self,
        academic_semester_id: str,
        start_date: datetime,
        end_date: datetime,
        status: RegistrationStatus | None = None,
        min_credit: int = DEFAULT_MIN_CREDIT,
        max_credit: int = DEFAULT_MAX_CREDIT,
    ) -> SemesterRegistration:
        """Open a registration for an academic semester.

        Args:
            academic_semester_id: Semester being registered.
            start_date: Registration window start.
            end_date: Registration window end.
            status: Initial status. Defaults to UPCOMING.
            min_credit: Minimum credits a student must take.
            max_credit: Maximum credits a student may take.

        Returns:
            Created SemesterRegistration.

        Raises:
            ConflictError: If a registration is UPCOMING or ONGOING, or the
                semester is already registered.
            NotFoundError: If the academic semester doesn't exist.
            ValidationError: If dates or credits are inconsistent.
        """
        status = RegistrationStatus(status) if status is not None else INITIAL_STATUS
        start_date = to_naive_utc(start_date)
        end_date = to_naive_utc(end_date)
        validate_schedule(start_date, end_date, min_credit, max_credit)

        with self._write_lock, self._db.session_scope() as session:
            stmt = (
                select(SemesterRegistration)
                .where(SemesterRegistration.status.in_([s.value for s in IN_FLIGHT_STATUSES]))
                .limit(1)
            )
            ensure_none_in_flight(session.execute(stmt).scalar_one_or_none())

            semester = session.get(AcademicSemester, academic_semester_id)
            ensure_semester_exists(semester, academic_semester_id)

            stmt = select(SemesterRegistration).where(
                SemesterRegistration.academic_semester_id == academic_semester_id
            )
            ensure_semester_not_registered(session.execute(stmt).scalar_one_or_none())

            registration = SemesterRegistration(
                academic_semester_id=academic_semester_id,
                status=status.value,
                start_date=start_date,
                end_date=end_date,
                min_credit=min_credit,
                max_credit=max_credit,
            )
            session.add(registration)
            session.commit()
            session.refresh(registration)

        logger.info(
            "Created semester registration %s for semester %s (status=%s)",
            registration.id,
            academic_semester_id,
            registration.status,
        )
        return registration

    def list_registrations(self, params: Mapping[str, Any]) -> Page:
        """List registrations with their academic semester populated."""
        base = select(SemesterRegistration).options(
            selectinload(SemesterRegistration.academic_semester)
        )
        builder = (
            QueryBuilder(base, params, default_limit=self._default_limit)
            .search(SEARCHABLE_FIELDS)
            .filter()
            .sort()
            .paginate()
            .fields()
        )
        return Page.fetch(self._db, builder)

    def get_registration(self, registration_id: str) -> SemesterRegistration:
        """Get registration by ID, with its academic semester loaded.

        Raises:
            NotFoundError: If the registration doesn't exist.
        """
        with self._db.session_scope() as session:
            registration = session.get(
                SemesterRegistration,
                registration_id,
                options=[selectinload(SemesterRegistration.academic_semester)],
            )
            ensure_registration_exists(registration, registration_id)
            return registration

    def update_registration(
        self,
        registration_id: str,
        status: RegistrationStatus | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        min_credit: int | None = None,
        max_credit: int | None = None,
    ) -> SemesterRegistration:
        """Update a registration. Only provided fields are updated.

        Raises:
            NotFoundError: If the registration doesn't exist.
            BadRequestError: If the registration is already ENDED.
            TransitionError: If the status change is not an allowed edge.
            ValidationError: If the merged dates or credits are inconsistent.
        """
        if status is not None:
            status = RegistrationStatus(status)

        with self._write_lock, self._db.session_scope() as session:
            registration = session.get(SemesterRegistration, registration_id)
            ensure_registration_exists(registration, registration_id)

            current = registration.registration_status
            ensure_not_ended(current)
            ensure_transition(current, status)

            if status is not None:
                registration.status = status.value
            if start_date is not None:
                registration.start_date = to_naive_utc(start_date)
            if end_date is not None:
                registration.end_date = to_naive_utc(end_date)
            if min_credit is not None:
                registration.min_credit = min_credit
            if max_credit is not None:
                registration.max_credit = max_credit

            validate_schedule(
                registration.start_date,
                registration.end_date,
                registration.min_credit,
                registration.max_credit,
            )

            session.commit()
            session.refresh(registration)

        if status is not None and status != current:
            logger.info(
                "Semester registration %s moved from %s to %s", registration_id, current, status
            )
        else:
            logger.info("Updated semester registration %s", registration_id)
        return registration
