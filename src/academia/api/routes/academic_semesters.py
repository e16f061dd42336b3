"""Academic semester endpoints."""

from typing import Any

from fastapi import APIRouter, Request, status

from academia.api.dependencies import SemesterServiceDep
from academia.api.models import (
    AcademicSemesterCreate,
    AcademicSemesterResponse,
    AcademicSemesterUpdate,
    APIResponse,
    PaginationMeta,
    semester_to_response,
)

router = APIRouter(prefix="/academic-semesters", tags=["academic-semesters"])


@router.post(
    "",
    response_model=APIResponse[AcademicSemesterResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_academic_semester(
    semester: AcademicSemesterCreate, service: SemesterServiceDep
) -> APIResponse[AcademicSemesterResponse]:
    """Create a new academic semester."""
    created = service.create_semester(
        name=semester.name.value,
        year=semester.year,
        code=semester.code.value,
        start_month=semester.start_month.value,
        end_month=semester.end_month.value,
    )
    return APIResponse(
        message="Academic semester is created successfully",
        data=semester_to_response(created),
    )


@router.get("", response_model=APIResponse[list[dict[str, Any]]])
def list_academic_semesters(
    request: Request, service: SemesterServiceDep
) -> APIResponse[list[dict[str, Any]]]:
    """List academic semesters.

    Accepts searchTerm, sort, page, limit and fields; any other query
    parameter filters by equality.
    """
    page = service.list_semesters(dict(request.query_params))
    return APIResponse(
        message="Academic semesters are retrieved successfully",
        data=page.data,
        meta=PaginationMeta(**page.meta),
    )


@router.get("/{semester_id}", response_model=APIResponse[AcademicSemesterResponse])
def get_academic_semester(
    semester_id: str, service: SemesterServiceDep
) -> APIResponse[AcademicSemesterResponse]:
    """Get an academic semester by ID."""
    semester = service.get_semester(semester_id)
    return APIResponse(
        message="Academic semester is retrieved successfully",
        data=semester_to_response(semester),
    )


@router.patch("/{semester_id}", response_model=APIResponse[AcademicSemesterResponse])
def update_academic_semester(
    semester_id: str, semester: AcademicSemesterUpdate, service: SemesterServiceDep
) -> APIResponse[AcademicSemesterResponse]:
    """Update an academic semester (partial update)."""
    updated = service.update_semester(
        semester_id,
        name=semester.name.value if semester.name else None,
        year=semester.year,
        code=semester.code.value if semester.code else None,
        start_month=semester.start_month.value if semester.start_month else None,
        end_month=semester.end_month.value if semester.end_month else None,
    )
    return APIResponse(
        message="Academic semester is updated successfully",
        data=semester_to_response(updated),
    )
