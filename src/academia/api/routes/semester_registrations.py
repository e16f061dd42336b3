"""Semester registration endpoints."""

from typing import Any

from fastapi import APIRouter, Request, status

from academia.api.dependencies import RegistrationServiceDep
from academia.api.models import (
    APIResponse,
    PaginationMeta,
    SemesterRegistrationCreate,
    SemesterRegistrationResponse,
    SemesterRegistrationUpdate,
    registration_to_response,
)

router = APIRouter(prefix="/semester-registrations", tags=["semester-registrations"])


@router.post(
    "",
    response_model=APIResponse[SemesterRegistrationResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_semester_registration(
    registration: SemesterRegistrationCreate, service: RegistrationServiceDep
) -> APIResponse[SemesterRegistrationResponse]:
    """Open a registration for an academic semester."""
    created = service.create_registration(
        academic_semester_id=registration.academic_semester_id,
        status=registration.status,
        start_date=registration.start_date,
        end_date=registration.end_date,
        min_credit=registration.min_credit,
        max_credit=registration.max_credit,
    )
    return APIResponse(
        message="Semester registration is created successfully",
        data=registration_to_response(created),
    )


@router.get("", response_model=APIResponse[list[dict[str, Any]]])
def list_semester_registrations(
    request: Request, service: RegistrationServiceDep
) -> APIResponse[list[dict[str, Any]]]:
    """List semester registrations with their academic semester populated."""
    page = service.list_registrations(dict(request.query_params))
    return APIResponse(
        message="Semester registrations are retrieved successfully",
        data=page.data,
        meta=PaginationMeta(**page.meta),
    )


@router.get("/{registration_id}", response_model=APIResponse[SemesterRegistrationResponse])
def get_semester_registration(
    registration_id: str, service: RegistrationServiceDep
) -> APIResponse[SemesterRegistrationResponse]:
    """Get a semester registration by ID."""
    registration = service.get_registration(registration_id)
    return APIResponse(
        message="Semester registration is retrieved successfully",
        data=registration_to_response(registration),
    )


@router.patch("/{registration_id}", response_model=APIResponse[SemesterRegistrationResponse])
def update_semester_registration(
    registration_id: str,
    registration: SemesterRegistrationUpdate,
    service: RegistrationServiceDep,
) -> APIResponse[SemesterRegistrationResponse]:
    """Update a semester registration, enforcing the status lifecycle."""
    updated = service.update_registration(
        registration_id,
        status=registration.status,
        start_date=registration.start_date,
        end_date=registration.end_date,
        min_credit=registration.min_credit,
        max_credit=registration.max_credit,
    )
    return APIResponse(
        message="Semester registration is updated successfully",
        data=registration_to_response(updated),
    )
