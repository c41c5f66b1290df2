from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session

from tutormarket.db import models


def list_meetings(
    session: Session,
    *,
    tutor_id: int | None = None,
    address_id: int | None = None,
    room_number: int | None = None,
    day: date | None = None,
) -> list[models.Meeting]:
    statement = select(models.Meeting).order_by(models.Meeting.meeting_start_time, models.Meeting.id)
    if tutor_id is not None:
        statement = statement.where(models.Meeting.created_by == tutor_id)
    if address_id is not None:
        statement = statement.where(models.Meeting.address_id == address_id)
    if room_number is not None:
        statement = statement.where(models.Meeting.room_number == room_number)
    if day is not None:
        statement = statement.where(models.Meeting.meeting_date == day)
    return list(session.scalars(statement))


def get_meeting(session: Session, meeting_id: int) -> models.Meeting | None:
    return session.get(models.Meeting, meeting_id)


def find_overlapping(
    session: Session,
    *,
    start: datetime,
    end: datetime,
    room_number: int,
    address_id: int,
    created_by: int,
    exclude_id: int | None = None,
) -> list[models.Meeting]:
    """Meetings overlapping ``[start, end)`` in the same room or for the same tutor."""

    statement = select(models.Meeting).where(
        models.Meeting.meeting_start_time < end,
        models.Meeting.meeting_end_time > start,
        or_(
            and_(models.Meeting.room_number == room_number, models.Meeting.address_id == address_id),
            models.Meeting.created_by == created_by,
        ),
    )
    if exclude_id is not None:
        statement = statement.where(models.Meeting.id != exclude_id)
    return list(session.scalars(statement.order_by(models.Meeting.meeting_start_time)))


def create_meeting(
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
    meeting = models.Meeting(
        created_by=created_by,
        address_id=address_id,
        room_number=room_number,
        meeting_start_time=start_time,
        meeting_end_time=end_time,
        meeting_date=start_time.date(),
        duration=_duration_minutes(start_time, end_time),
        meeting_type=meeting_type,
        course_id=course_id,
    )
    session.add(meeting)
    session.flush()
    return meeting


def update_meeting_slot(
    session: Session,
    meeting: models.Meeting,
    *,
    start_time: datetime,
    end_time: datetime,
    room_number: int,
    address_id: int,
) -> models.Meeting:
    meeting.meeting_start_time = start_time
    meeting.meeting_end_time = end_time
    meeting.meeting_date = start_time.date()
    meeting.duration = _duration_minutes(start_time, end_time)
    meeting.room_number = room_number
    meeting.address_id = address_id
    session.add(meeting)
    session.flush()
    return meeting


def delete_meeting(session: Session, meeting_id: int) -> None:
    meeting = session.get(models.Meeting, meeting_id)
    if meeting is None:
        return
    session.delete(meeting)


def _duration_minutes(start_time: datetime, end_time: datetime) -> int:
    return int((end_time - start_time).total_seconds() // 60)
