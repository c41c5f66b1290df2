"""Storage-level enforcement of the meeting scheduling invariants.

Four rules guard the ``meeting`` table on PostgreSQL:

* ``no_overlapping_meetings``: no two meetings overlap in the same room of the
  same address.
* ``no_tutor_overlapping_meetings``: no tutor has two overlapping meetings.
* ``no_cross_day_meetings``: start and end fall on the same calendar day.
* ``meeting_date_limit``: the meeting date is at most one year ahead.

The two overlap rules are exclusion constraints over a generated ``tsrange``
column (closed-open), so concurrent bookings are arbitrated by the database
inside the writing transaction. :func:`apply_meeting_constraints` drops and
recreates everything on each start and is safe to run repeatedly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from tutormarket.core.errors import (
    BootstrapFailure,
    CrossDayMeetingError,
    DomainError,
    MeetingDateLimitError,
    RoomConflictError,
    TutorConflictError,
)


logger = logging.getLogger(__name__)

MEETING_TABLE = "meeting"
TIME_RANGE_COLUMN = "time_range"
ROOM_INDEX = "idx_meeting_room_gist"

ROOM_OVERLAP_CONSTRAINT = "no_overlapping_meetings"
TUTOR_OVERLAP_CONSTRAINT = "no_tutor_overlapping_meetings"
CROSS_DAY_CONSTRAINT = "no_cross_day_meetings"
DATE_LIMIT_CONSTRAINT = "meeting_date_limit"

MEETING_CONSTRAINTS = (
    ROOM_OVERLAP_CONSTRAINT,
    TUTOR_OVERLAP_CONSTRAINT,
    CROSS_DAY_CONSTRAINT,
    DATE_LIMIT_CONSTRAINT,
)

SUCCESS_MESSAGE = "Database constraints added successfully."

_CONSTRAINT_DEFINITIONS = {
    ROOM_OVERLAP_CONSTRAINT: f"EXCLUDE USING gist ({TIME_RANGE_COLUMN} WITH &&, room_number WITH =, address_id WITH =)",
    TUTOR_OVERLAP_CONSTRAINT: f"EXCLUDE USING gist ({TIME_RANGE_COLUMN} WITH &&, created_by WITH =)",
    CROSS_DAY_CONSTRAINT: "CHECK (meeting_start_time::date = meeting_end_time::date)",
    DATE_LIMIT_CONSTRAINT: "CHECK (meeting_date <= CURRENT_DATE + INTERVAL '1 year')",
}

_ERRORS_BY_CONSTRAINT: dict[str, type[DomainError]] = {
    ROOM_OVERLAP_CONSTRAINT: RoomConflictError,
    TUTOR_OVERLAP_CONSTRAINT: TutorConflictError,
    CROSS_DAY_CONSTRAINT: CrossDayMeetingError,
    DATE_LIMIT_CONSTRAINT: MeetingDateLimitError,
}


@dataclass(slots=True)
class ConstraintState:
    """Snapshot of the enforcement objects currently present on the meeting table."""

    time_range_expression: str | None = None
    time_range_nullable: bool | None = None
    room_index: bool = False
    constraints: dict[str, str] = field(default_factory=dict)

    @property
    def complete(self) -> bool:
        return (
            self.time_range_expression is not None
            and self.room_index
            and set(self.constraints) == set(MEETING_CONSTRAINTS)
        )


def meeting_constraint_statements() -> list[str]:
    """DDL run by the bootstrap, in order."""

    statements = ["CREATE EXTENSION IF NOT EXISTS btree_gist"]
    statements += [
        f"ALTER TABLE {MEETING_TABLE} DROP CONSTRAINT IF EXISTS {name}" for name in MEETING_CONSTRAINTS
    ]
    statements += [
        f"ALTER TABLE {MEETING_TABLE} DROP COLUMN IF EXISTS {TIME_RANGE_COLUMN}",
        (
            f"ALTER TABLE {MEETING_TABLE} ADD COLUMN {TIME_RANGE_COLUMN} tsrange NOT NULL "
            "GENERATED ALWAYS AS (tsrange(meeting_start_time, meeting_end_time)) STORED"
        ),
        f"CREATE INDEX IF NOT EXISTS {ROOM_INDEX} ON {MEETING_TABLE} USING gist (room_number, address_id)",
    ]
    statements += [
        f"ALTER TABLE {MEETING_TABLE} ADD CONSTRAINT {name} {definition}"
        for name, definition in _CONSTRAINT_DEFINITIONS.items()
    ]
    return statements


def supports_storage_enforcement(dialect_name: str) -> bool:
    return dialect_name == "postgresql"


def apply_meeting_constraints(engine: Engine, *, strict: bool = False) -> str:
    """Install the meeting constraints and return a human-readable outcome.

    Failures are logged and returned as the outcome string so the application
    keeps running without storage enforcement. With ``strict`` they raise
    :class:`BootstrapFailure` instead.
    """

    dialect_name = engine.dialect.name
    if not supports_storage_enforcement(dialect_name):
        message = (
            f"Storage-level meeting constraints are not available on {dialect_name}; "
            "application-level checks are active."
        )
        logger.warning(message)
        return message

    try:
        with engine.begin() as connection:
            for statement in meeting_constraint_statements():
                connection.execute(text(statement))
    except SQLAlchemyError as exc:
        reason = getattr(exc, "orig", None) or exc
        logger.error("Error adding database constraints: %s", reason)
        if strict:
            raise BootstrapFailure(f"Error adding database constraints: {reason}") from exc
        return f"Error adding database constraints: {reason}"

    logger.info(SUCCESS_MESSAGE)
    return SUCCESS_MESSAGE


def inspect_meeting_constraints(connection: Connection) -> ConstraintState:
    """Read back which enforcement objects exist (PostgreSQL only)."""

    state = ConstraintState()

    column = connection.execute(
        text(
            "SELECT generation_expression, is_nullable FROM information_schema.columns "
            "WHERE table_name = :table AND column_name = :column"
        ),
        {"table": MEETING_TABLE, "column": TIME_RANGE_COLUMN},
    ).first()
    if column is not None:
        state.time_range_expression = column.generation_expression
        state.time_range_nullable = column.is_nullable == "YES"

    state.room_index = (
        connection.execute(
            text("SELECT 1 FROM pg_indexes WHERE tablename = :table AND indexname = :index"),
            {"table": MEETING_TABLE, "index": ROOM_INDEX},
        ).first()
        is not None
    )

    rows = connection.execute(
        text(
            "SELECT conname, pg_get_constraintdef(oid) AS definition FROM pg_constraint "
            "WHERE conrelid = CAST(:table AS regclass)"
        ),
        {"table": MEETING_TABLE},
    )
    for row in rows:
        if row.conname in MEETING_CONSTRAINTS:
            state.constraints[row.conname] = row.definition
    return state


def violated_constraint(exc: IntegrityError) -> str | None:
    """Name of the meeting constraint behind ``exc``, if it is one of ours."""

    diag = getattr(exc.orig, "diag", None)
    name = getattr(diag, "constraint_name", None)
    if name in _ERRORS_BY_CONSTRAINT:
        return name

    message = str(exc.orig)
    for candidate in MEETING_CONSTRAINTS:
        if candidate in message:
            return candidate
    return None


def error_for_violation(exc: IntegrityError) -> DomainError | None:
    """Translate a storage constraint violation into the matching domain error."""

    name = violated_constraint(exc)
    if name is None:
        return None
    return _ERRORS_BY_CONSTRAINT[name]()


__all__ = [
    "CROSS_DAY_CONSTRAINT",
    "ConstraintState",
    "DATE_LIMIT_CONSTRAINT",
    "MEETING_CONSTRAINTS",
    "ROOM_INDEX",
    "ROOM_OVERLAP_CONSTRAINT",
    "SUCCESS_MESSAGE",
    "TUTOR_OVERLAP_CONSTRAINT",
    "apply_meeting_constraints",
    "error_for_violation",
    "inspect_meeting_constraints",
    "meeting_constraint_statements",
    "supports_storage_enforcement",
    "violated_constraint",
]
