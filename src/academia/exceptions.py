"""Application error taxonomy.

Every error raised by the core carries an explicit kind and an HTTP-equivalent
status code so the API boundary can format it without probing types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ErrorKind(StrEnum):
    """Kinds of application errors."""

    VALIDATION = "validation"
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    PERSISTENCE = "persistence"


# HTTP-equivalent status code for each kind
STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.PERSISTENCE: 500,
}


@dataclass(frozen=True)
class ErrorSource:
    """A single field-level error detail."""

    path: str
    message: str


class AppError(Exception):
    """Base exception for application errors."""

    kind: ErrorKind = ErrorKind.PERSISTENCE

    def __init__(self, message: str, error_sources: list[ErrorSource] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error_sources = error_sources or [ErrorSource(path="", message=message)]

    @property
    def status_code(self) -> int:
        """HTTP-equivalent status code."""
        return STATUS_CODES[self.kind]


class ValidationError(AppError):
    """Input failed schema or field validation."""

    kind = ErrorKind.VALIDATION


class BadRequestError(AppError):
    """Request is well-formed but not acceptable in the current state."""

    kind = ErrorKind.BAD_REQUEST


class TransitionError(BadRequestError):
    """Requested status change is not an allowed edge."""


class NotFoundError(AppError):
    """Referenced entity does not exist."""

    kind = ErrorKind.NOT_FOUND


class ConflictError(AppError):
    """Uniqueness or singleton invariant would be violated."""

    kind = ErrorKind.CONFLICT


class PersistenceError(AppError):
    """Unexpected storage failure."""

    kind = ErrorKind.PERSISTENCE
