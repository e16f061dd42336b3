"""Semester registration lifecycle rules.

Status moves forward one step at a time::

    UPCOMING -> ONGOING -> ENDED

ENDED is terminal. At most one registration may be UPCOMING or ONGOING at a
time, and each academic semester may be registered once.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from academia.exceptions import (
    BadRequestError,
    ConflictError,
    ErrorSource,
    NotFoundError,
    TransitionError,
    ValidationError,
)
from academia.records.models import RegistrationStatus

if TYPE_CHECKING:
    from datetime import datetime

    from academia.records.models import AcademicSemester, SemesterRegistration

INITIAL_STATUS = RegistrationStatus.UPCOMING
TERMINAL_STATUS = RegistrationStatus.ENDED
IN_FLIGHT_STATUSES = (RegistrationStatus.UPCOMING, RegistrationStatus.ONGOING)

# Same-status edges are allowed so non-status fields can still be updated
ALLOWED_TRANSITIONS: dict[RegistrationStatus, frozenset[RegistrationStatus]] = {
    RegistrationStatus.UPCOMING: frozenset(
        {RegistrationStatus.UPCOMING, RegistrationStatus.ONGOING}
    ),
    RegistrationStatus.ONGOING: frozenset({RegistrationStatus.ONGOING, RegistrationStatus.ENDED}),
    RegistrationStatus.ENDED: frozenset(),
}


def is_transition_allowed(current: RegistrationStatus, requested: RegistrationStatus) -> bool:
    """Whether ``current -> requested`` is an allowed edge."""
    return requested in ALLOWED_TRANSITIONS[current]


# --- Creation checks, applied in this order ---


def ensure_none_in_flight(in_flight: SemesterRegistration | None) -> None:
    """Reject creation while another registration is UPCOMING or ONGOING.

    Raises:
        ConflictError: Naming the status of the in-flight registration.
    """
    if in_flight is not None:
        raise ConflictError(
            f"There is already a semester registration with status {in_flight.status}"
        )


def ensure_semester_exists(semester: AcademicSemester | None, semester_id: str) -> None:
    """Reject creation for an academic semester that does not exist.

    Raises:
        NotFoundError: If the semester was not found.
    """
    if semester is None:
        raise NotFoundError(f"Academic semester with id '{semester_id}' does not exist")


def ensure_semester_not_registered(existing: SemesterRegistration | None) -> None:
    """Reject creation for an academic semester that is already registered.

    Raises:
        ConflictError: If a registration already references the semester.
    """
    if existing is not None:
        raise ConflictError("This academic semester is already registered")


# --- Update checks, applied in this order ---


def ensure_registration_exists(
    registration: SemesterRegistration | None, registration_id: str
) -> None:
    """Reject updates of unknown registrations.

    Raises:
        NotFoundError: If the registration was not found.
    """
    if registration is None:
        raise NotFoundError(f"Semester registration with id '{registration_id}' does not exist")


def ensure_not_ended(current: RegistrationStatus) -> None:
    """Reject any mutation of a registration in the terminal state.

    Raises:
        BadRequestError: If the registration is ENDED.
    """
    if current == TERMINAL_STATUS:
        raise BadRequestError(f"This semester registration is already {current}")


def ensure_transition(current: RegistrationStatus, requested: RegistrationStatus | None) -> None:
    """Reject status changes that are not allowed edges.

    Args:
        current: Status stored on the registration.
        requested: Status from the update payload, or None if unchanged.

    Raises:
        TransitionError: Naming both statuses.
    """
    if requested is None:
        return
    if not is_transition_allowed(current, requested):
        raise TransitionError(f"Can not change {current} to {requested}")


def validate_schedule(
    start_date: datetime,
    end_date: datetime,
    min_credit: int,
    max_credit: int,
) -> None:
    """Check date ordering and credit bounds of a registration.

    Raises:
        ValidationError: With one source per violated field.
    """
    sources = []
    if start_date >= end_date:
        sources.append(ErrorSource(path="end_date", message="end_date must be after start_date"))
    if min_credit < 0:
        sources.append(ErrorSource(path="min_credit", message="min_credit must not be negative"))
    if min_credit > max_credit:
        sources.append(
            ErrorSource(path="max_credit", message="max_credit must not be less than min_credit")
        )
    if sources:
        raise ValidationError("Validation error", sources)
