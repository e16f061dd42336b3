"""Error boundary - turns every failure into the standard error envelope."""

from __future__ import annotations

import traceback
from typing import TYPE_CHECKING

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from academia.api.models import ErrorResponse, ErrorSourceResponse
from academia.exceptions import AppError, ErrorKind, ErrorSource, ValidationError
from academia.logging import get_logger

if TYPE_CHECKING:
    from fastapi import FastAPI

    from academia.config import Settings

logger = get_logger("api.errors")


def validation_error_from_request(exc: RequestValidationError) -> ValidationError:
    """Convert FastAPI's body/query validation failure into a ValidationError."""
    sources = []
    for error in exc.errors():
        # Drop the leading "body"/"query" segment from the location
        location = [str(part) for part in error.get("loc", ())][1:]
        sources.append(ErrorSource(path=".".join(location), message=error.get("msg", "")))
    return ValidationError("Validation error", sources)


def build_error_response(
    status_code: int,
    message: str,
    sources: list[ErrorSource],
    exc: BaseException,
    settings: Settings,
) -> JSONResponse:
    """Render the error envelope. The stack is omitted in production."""
    stack = None if settings.is_production else "".join(traceback.format_exception(exc))
    body = ErrorResponse(
        message=message,
        error_sources=[ErrorSourceResponse(path=s.path, message=s.message) for s in sources],
        stack=stack,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


def app_error_response(exc: AppError, settings: Settings) -> JSONResponse:
    """Dispatch an application error on its kind."""
    match exc.kind:
        case ErrorKind.PERSISTENCE:
            logger.error("Persistence failure: %s", exc.message)
        case _:
            logger.warning("Rejected request (%s): %s", exc.kind, exc.message)
    return build_error_response(exc.status_code, exc.message, exc.error_sources, exc, settings)


def register_error_handlers(app: FastAPI, settings: Settings) -> None:
    """Install the error boundary on an application."""

    @app.exception_handler(AppError)
    async def app_error_handler(_request: Request, exc: AppError) -> JSONResponse:
        return app_error_response(exc, settings)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return app_error_response(validation_error_from_request(exc), settings)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        _request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            message = "API Not Found"
        else:
            message = str(exc.detail)
        return build_error_response(
            exc.status_code, message, [ErrorSource(path="", message=message)], exc, settings
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        message = str(exc) or "Something went wrong"
        return build_error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            message,
            [ErrorSource(path="", message=message)],
            exc,
            settings,
        )
