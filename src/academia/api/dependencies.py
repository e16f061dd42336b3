"""FastAPI dependencies for dependency injection.

Services are built once by the application lifespan and kept on
``app.state``; these dependencies hand them to route handlers.
"""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends, Request

from academia.services import AcademicSemesterService, SemesterRegistrationService


def get_semester_service(request: Request) -> Generator[AcademicSemesterService, None, None]:
    """Dependency that provides the AcademicSemesterService instance."""
    service = getattr(request.app.state, "semester_service", None)
    if service is None:
        raise RuntimeError("AcademicSemesterService not initialized. Is the app lifespan running?")
    yield service


def get_registration_service(
    request: Request,
) -> Generator[SemesterRegistrationService, None, None]:
    """Dependency that provides the SemesterRegistrationService instance."""
    service = getattr(request.app.state, "registration_service", None)
    if service is None:
        raise RuntimeError(
            "SemesterRegistrationService not initialized. Is the app lifespan running?"
        )
    yield service


# Type aliases for dependency injection
SemesterServiceDep = Annotated[AcademicSemesterService, Depends(get_semester_service)]
RegistrationServiceDep = Annotated[SemesterRegistrationService, Depends(get_registration_service)]
