from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import date, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tutormarket.core.errors import (
    DomainError,
    EntityNotFoundError,
    RoleRequiredError,
    RoomConflictError,
    TutorConflictError,
)
from tutormarket.db import models
from tutormarket.db.constraints import error_for_violation, supports_storage_enforcement
from tutormarket.repositories import addresses as addresses_repo
from tutormarket.repositories import courses as courses_repo
from tutormarket.repositories import meetings as meetings_repo
from tutormarket.repositories import users as users_repo
from tutormarket.scheduling.intervals import TimeSlot, ensure_row_invariants, ensure_valid_order


logger = logging.getLogger(__name__)


class MeetingService:
    """Schedules, reschedules and cancels meetings without ever persisting a conflict.

    On PostgreSQL the database constraints decide; a rejected write is mapped to
    the matching domain error. On other databases the four rules are checked
    here, inside the caller's transaction, before anything is flushed.
    """

    def __init__(self, clock: Callable[[], date] = date.today) -> None:
        self._today = clock

    def list_meetings(
        self,
        session: Session,
        *,
        tutor_id: int | None = None,
        address_id: int | None = None,
        room_number: int | None = None,
        day: date | None = None,
    ) -> list[models.Meeting]:
        return meetings_repo.list_meetings(
            session,
            tutor_id=tutor_id,
            address_id=address_id,
            room_number=room_number,
            day=day,
        )

    def get_meeting(self, session: Session, meeting_id: int) -> models.Meeting:
        meeting = meetings_repo.get_meeting(session, meeting_id)
        if meeting is None:
            raise EntityNotFoundError("Meeting", meeting_id)
        return meeting

    def schedule_meeting(
        self,
        session: Session,
        *,
        created_by: int,
        address_id: int,
        room_number: int,
        start_time: datetime,
        end_time: datetime,
        meeting_type: models.MeetingType = models.MeetingType.OFFLINE,
        course_id: int | None = None,
    ) -> models.Meeting:
        slot = TimeSlot(start=start_time, end=end_time)
        ensure_valid_order(slot)
        self._require_tutor(session, created_by)
        self._require_address(session, address_id)
        if course_id is not None and courses_repo.get_course(session, course_id) is None:
            raise EntityNotFoundError("Course", course_id)

        if self.uses_application_checks(session):
            self._check_slot(
                session,
                slot,
                room_number=room_number,
                address_id=address_id,
                created_by=created_by,
            )

        with self._storage_violations(session):
            meeting = meetings_repo.create_meeting(
                session,
                created_by=created_by,
                address_id=address_id,
                room_number=room_number,
                start_time=start_time,
                end_time=end_time,
                meeting_type=meeting_type,
                course_id=course_id,
            )
        logger.info(
            "Scheduled meeting %s: tutor %s, room %s at address %s, %s - %s",
            meeting.id,
            created_by,
            room_number,
            address_id,
            start_time,
            end_time,
        )
        return meeting

    def reschedule_meeting(
        self,
        session: Session,
        meeting_id: int,
        *,
        start_time: datetime,
        end_time: datetime,
        room_number: int | None = None,
        address_id: int | None = None,
    ) -> models.Meeting:
        meeting = self.get_meeting(session, meeting_id)
        slot = TimeSlot(start=start_time, end=end_time)
        ensure_valid_order(slot)

        target_room = meeting.room_number if room_number is None else room_number
        target_address = meeting.address_id if address_id is None else address_id
        if target_address != meeting.address_id:
            self._require_address(session, target_address)

        if self.uses_application_checks(session):
            self._check_slot(
                session,
                slot,
                room_number=target_room,
                address_id=target_address,
                created_by=meeting.created_by,
                exclude_id=meeting.id,
            )

        with self._storage_violations(session):
            meetings_repo.update_meeting_slot(
                session,
                meeting,
                start_time=start_time,
                end_time=end_time,
                room_number=target_room,
                address_id=target_address,
            )
        logger.info(
            "Rescheduled meeting %s to room %s at address %s, %s - %s",
            meeting.id,
            target_room,
            target_address,
            start_time,
            end_time,
        )
        return meeting

    def cancel_meeting(self, session: Session, meeting_id: int) -> None:
        self.get_meeting(session, meeting_id)
        meetings_repo.delete_meeting(session, meeting_id)
        session.flush()
        logger.info("Cancelled meeting %s", meeting_id)

    @staticmethod
    def uses_application_checks(session: Session) -> bool:
        return not supports_storage_enforcement(session.get_bind().dialect.name)

    def _check_slot(
        self,
        session: Session,
        slot: TimeSlot,
        *,
        room_number: int,
        address_id: int,
        created_by: int,
        exclude_id: int | None = None,
    ) -> None:
        try:
            ensure_row_invariants(slot, today=self._today())
        except DomainError as exc:
            logger.info("Rejected meeting write: %s", exc)
            raise

        overlapping = meetings_repo.find_overlapping(
            session,
            start=slot.start,
            end=slot.end,
            room_number=room_number,
            address_id=address_id,
            created_by=created_by,
            exclude_id=exclude_id,
        )
        if any(other.room_number == room_number and other.address_id == address_id for other in overlapping):
            raise self._rejected(RoomConflictError())
        if overlapping:
            raise self._rejected(TutorConflictError())

    @contextmanager
    def _storage_violations(self, session: Session) -> Iterator[None]:
        try:
            yield
        except IntegrityError as exc:
            error = error_for_violation(exc)
            if error is None:
                raise
            session.rollback()
            raise self._rejected(error) from exc

    @staticmethod
    def _rejected(error: DomainError) -> DomainError:
        logger.info("Rejected meeting write: %s", error)
        return error

    @staticmethod
    def _require_tutor(session: Session, user_id: int) -> models.User:
        user = users_repo.get_user(session, user_id)
        if user is None:
            raise EntityNotFoundError("User", user_id)
        if not user.has_role(models.RoleName.TUTOR):
            raise RoleRequiredError(user_id, models.RoleName.TUTOR.value)
        return user

    @staticmethod
    def _require_address(session: Session, address_id: int) -> models.Address:
        address = addresses_repo.get_address(session, address_id)
        if address is None:
            raise EntityNotFoundError("Address", address_id)
        return address
