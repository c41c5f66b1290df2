from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from tutormarket.api.v1.errors import as_http_exception
from tutormarket.core.errors import DomainError
from tutormarket.db.session import get_session
from tutormarket.schemas import MeetingCollection, MeetingCreate, MeetingRead, MeetingReschedule
from tutormarket.services.meetings import MeetingService

router = APIRouter()

_meeting_service = MeetingService()


@router.get("/", response_model=MeetingCollection)
def list_meetings(
    tutor_id: int | None = None,
    address_id: int | None = None,
    room_number: int | None = None,
    day: date | None = None,
    session: Session = Depends(get_session),
) -> MeetingCollection:
    items = _meeting_service.list_meetings(
        session,
        tutor_id=tutor_id,
        address_id=address_id,
        room_number=room_number,
        day=day,
    )
    return MeetingCollection(items=items)


@router.post("/", response_model=MeetingRead, status_code=status.HTTP_201_CREATED)
def create_meeting(payload: MeetingCreate, session: Session = Depends(get_session)) -> MeetingRead:
    try:
        meeting = _meeting_service.schedule_meeting(
            session,
            created_by=payload.created_by,
            address_id=payload.address_id,
            room_number=payload.room_number,
            start_time=payload.meeting_start_time,
            end_time=payload.meeting_end_time,
            meeting_type=payload.meeting_type,
            course_id=payload.course_id,
        )
    except DomainError as exc:
        raise as_http_exception(exc) from exc
    session.commit()
    session.refresh(meeting)
    return MeetingRead.model_validate(meeting, from_attributes=True)


@router.get("/{meeting_id}", response_model=MeetingRead)
def get_meeting(meeting_id: int, session: Session = Depends(get_session)) -> MeetingRead:
    try:
        meeting = _meeting_service.get_meeting(session, meeting_id)
    except DomainError as exc:
        raise as_http_exception(exc) from exc
    return MeetingRead.model_validate(meeting, from_attributes=True)


@router.patch("/{meeting_id}", response_model=MeetingRead)
def reschedule_meeting(
    meeting_id: int,
    payload: MeetingReschedule,
    session: Session = Depends(get_session),
) -> MeetingRead:
    try:
        meeting = _meeting_service.reschedule_meeting(
            session,
            meeting_id,
            start_time=payload.meeting_start_time,
            end_time=payload.meeting_end_time,
            room_number=payload.room_number,
            address_id=payload.address_id,
        )
    except DomainError as exc:
        raise as_http_exception(exc) from exc
    session.commit()
    session.refresh(meeting)
    return MeetingRead.model_validate(meeting, from_attributes=True)


@router.delete("/{meeting_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def cancel_meeting(meeting_id: int, session: Session = Depends(get_session)) -> Response:
    try:
        _meeting_service.cancel_meeting(session, meeting_id)
    except DomainError as exc:
        raise as_http_exception(exc) from exc
    session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
