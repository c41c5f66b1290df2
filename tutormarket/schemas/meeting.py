from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from tutormarket.db.models import MeetingType


def _wall_clock(value: datetime) -> datetime:
    # Meetings are stored in the local time of their address.
    return value.replace(tzinfo=None)


class MeetingSlot(BaseModel):
    meeting_start_time: datetime
    meeting_end_time: datetime

    @field_validator("meeting_start_time", "meeting_end_time")
    @classmethod
    def _drop_timezone(cls, value: datetime) -> datetime:
        return _wall_clock(value)

    @model_validator(mode="after")
    def _check_order(self):
        if self.meeting_end_time <= self.meeting_start_time:
            raise ValueError("meeting_end_time must be after meeting_start_time")
        return self


class MeetingCreate(MeetingSlot):
    created_by: int
    address_id: int
    room_number: int = Field(ge=0)
    meeting_type: MeetingType = MeetingType.OFFLINE
    course_id: int | None = None


class MeetingReschedule(MeetingSlot):
    room_number: int | None = Field(default=None, ge=0)
    address_id: int | None = None


class MeetingRead(BaseModel):
    id: int
    meeting_type: MeetingType
    meeting_date: date
    meeting_start_time: datetime
    meeting_end_time: datetime
    duration: int
    room_number: int
    address_id: int
    created_by: int
    course_id: int | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MeetingCollection(BaseModel):
    items: list[MeetingRead]
