"""REST API for Academia."""

from academia.api.app import create_app
from academia.api.models import (
    AcademicSemesterCreate,
    AcademicSemesterResponse,
    APIResponse,
    ErrorResponse,
    SemesterRegistrationCreate,
    SemesterRegistrationResponse,
)

__all__ = [
    "APIResponse",
    "AcademicSemesterCreate",
    "AcademicSemesterResponse",
    "ErrorResponse",
    "SemesterRegistrationCreate",
    "SemesterRegistrationResponse",
    "create_app",
]
