from __future__ import annotations

from fastapi import HTTPException, status

from tutormarket.core.errors import (
    DomainError,
    DuplicateEntityError,
    EnrollmentRequiredError,
    EntityNotFoundError,
    InvariantViolationError,
    RoleRequiredError,
    SchedulingConflictError,
)


_STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (EntityNotFoundError, status.HTTP_404_NOT_FOUND),
    (RoleRequiredError, status.HTTP_403_FORBIDDEN),
    (EnrollmentRequiredError, status.HTTP_403_FORBIDDEN),
    (DuplicateEntityError, status.HTTP_409_CONFLICT),
    (SchedulingConflictError, status.HTTP_409_CONFLICT),
    (InvariantViolationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
)


def as_http_exception(exc: DomainError) -> HTTPException:
    """Map a domain error onto the HTTP status the routers respond with."""

    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
