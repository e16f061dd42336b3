"""Services - orchestration of persistence, query building and lifecycle rules."""

from academia.services.academic_semester import AcademicSemesterService
from academia.services.models import Page
from academia.services.semester_registration import SemesterRegistrationService

__all__ = [
    "AcademicSemesterService",
    "Page",
    "SemesterRegistrationService",
]
