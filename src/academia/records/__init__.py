"""Records - Persistent storage for academic semesters and registrations."""

from academia.records.database import Database
from academia.records.models import (
    DEFAULT_MAX_CREDIT,
    DEFAULT_MIN_CREDIT,
    SEMESTER_NAME_CODE_MAP,
    AcademicSemester,
    Base,
    Month,
    RegistrationStatus,
    SemesterCode,
    SemesterName,
    SemesterRegistration,
    to_naive_utc,
)

__all__ = [
    "DEFAULT_MAX_CREDIT",
    "DEFAULT_MIN_CREDIT",
    "SEMESTER_NAME_CODE_MAP",
    "AcademicSemester",
    "Base",
    "Database",
    "Month",
    "RegistrationStatus",
    "SemesterCode",
    "SemesterName",
    "SemesterRegistration",
    "to_naive_utc",
]
