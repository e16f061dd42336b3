"""Pydantic models for REST API."""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from academia.records import (
    DEFAULT_MAX_CREDIT,
    DEFAULT_MIN_CREDIT,
    AcademicSemester,
    Month,
    RegistrationStatus,
    SemesterCode,
    SemesterName,
    SemesterRegistration,
)

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Pagination details returned with list responses."""

    page: int
    limit: int
    total: int
    total_page: int


class APIResponse(BaseModel, Generic[T]):
    """Standard success envelope."""

    success: bool = True
    message: str
    data: T | None = None
    meta: PaginationMeta | None = None


class ErrorSourceResponse(BaseModel):
    """One field-level error."""

    path: str
    message: str


class ErrorResponse(BaseModel):
    """Standard error envelope. Serialize with ``by_alias=True``."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = False
    message: str
    error_sources: list[ErrorSourceResponse] = Field(alias="errorSources")
    stack: str | None = None


# Academic semester models


class AcademicSemesterCreate(BaseModel):
    """Request model for creating an academic semester."""

    name: SemesterName
    year: int = Field(..., ge=1900, le=3000)
    code: SemesterCode
    start_month: Month
    end_month: Month


class AcademicSemesterUpdate(BaseModel):
    """Request model for updating an academic semester (partial update)."""

    name: SemesterName | None = None
    year: int | None = Field(default=None, ge=1900, le=3000)
    code: SemesterCode | None = None
    start_month: Month | None = None
    end_month: Month | None = None


class AcademicSemesterResponse(BaseModel):
    """Response model for an academic semester."""

    id: str
    name: str
    year: int
    code: str
    start_month: str
    end_month: str
    created_at: datetime
    updated_at: datetime


def semester_to_response(semester: AcademicSemester) -> AcademicSemesterResponse:
    """Convert an AcademicSemester model to AcademicSemesterResponse."""
    return AcademicSemesterResponse.model_validate(semester.to_dict())


# Semester registration models


class SemesterRegistrationCreate(BaseModel):
    """Request model for opening a semester registration."""

    academic_semester_id: str = Field(..., min_length=1)
    status: RegistrationStatus | None = None
    start_date: datetime
    end_date: datetime
    min_credit: int = Field(default=DEFAULT_MIN_CREDIT, ge=0)
    max_credit: int = Field(default=DEFAULT_MAX_CREDIT, ge=0)


class SemesterRegistrationUpdate(BaseModel):
    """Request model for updating a semester registration (partial update)."""

    status: RegistrationStatus | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    min_credit: int | None = Field(default=None, ge=0)
    max_credit: int | None = Field(default=None, ge=0)


class SemesterRegistrationResponse(BaseModel):
    """Response model for a semester registration."""

    id: str
    academic_semester_id: str
    academic_semester: AcademicSemesterResponse | None = None
    status: RegistrationStatus
    start_date: datetime
    end_date: datetime
    min_credit: int
    max_credit: int
    created_at: datetime
    updated_at: datetime


def registration_to_response(registration: SemesterRegistration) -> SemesterRegistrationResponse:
    """Convert a SemesterRegistration model to SemesterRegistrationResponse.

    The academic semester is included only when it was loaded with the record.
    """
    return SemesterRegistrationResponse.model_validate(registration.to_dict())
