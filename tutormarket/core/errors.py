"""Domain errors raised by the service layer.

Routers translate these into HTTP responses; nothing in here knows about HTTP.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for failures the caller is expected to handle."""


class EntityNotFoundError(DomainError):
    def __init__(self, entity: str, identifier: object) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} {identifier} not found")


class DuplicateEntityError(DomainError):
    pass


class RoleRequiredError(DomainError):
    def __init__(self, user_id: int, role: str) -> None:
        self.user_id = user_id
        self.role = role
        super().__init__(f"User {user_id} does not hold the {role} role")


class EnrollmentRequiredError(DomainError):
    def __init__(self, student_id: int, target: str) -> None:
        self.student_id = student_id
        super().__init__(f"Student {student_id} is not enrolled in {target}")


class SchedulingConflictError(DomainError):
    """A meeting would overlap another one sharing its room or its tutor.

    Never retried: the caller has to pick a different slot.
    """


class RoomConflictError(SchedulingConflictError):
    def __init__(self, message: str = "The room is already booked for an overlapping time range") -> None:
        super().__init__(message)


class TutorConflictError(SchedulingConflictError):
    def __init__(self, message: str = "The tutor already has an overlapping meeting") -> None:
        super().__init__(message)


class InvariantViolationError(DomainError):
    """A meeting violates a single-row rule such as the same-day requirement."""


class InvalidMeetingTimeError(InvariantViolationError):
    def __init__(self, message: str = "Meeting end time must be after its start time") -> None:
        super().__init__(message)


class CrossDayMeetingError(InvariantViolationError):
    def __init__(self, message: str = "Meeting must start and end on the same day") -> None:
        super().__init__(message)


class MeetingDateLimitError(InvariantViolationError):
    def __init__(self, message: str = "Meeting cannot be scheduled more than one year ahead") -> None:
        super().__init__(message)


class BootstrapFailure(RuntimeError):
    """Storage-level meeting constraints could not be installed."""


__all__ = [
    "BootstrapFailure",
    "CrossDayMeetingError",
    "DomainError",
    "DuplicateEntityError",
    "EnrollmentRequiredError",
    "EntityNotFoundError",
    "InvalidMeetingTimeError",
    "InvariantViolationError",
    "MeetingDateLimitError",
    "RoleRequiredError",
    "RoomConflictError",
    "SchedulingConflictError",
    "TutorConflictError",
]
