from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from tutormarket.core.errors import CrossDayMeetingError, InvalidMeetingTimeError, MeetingDateLimitError


BOOKING_HORIZON_YEARS = 1


@dataclass(slots=True, frozen=True)
class TimeSlot:
    """Closed-open interval ``[start, end)``; back-to-back slots do not overlap."""

    start: datetime
    end: datetime

    @property
    def day(self) -> date:
        return self.start.date()

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)

    def is_empty(self) -> bool:
        return self.end <= self.start

    def is_same_day(self) -> bool:
        return self.start.date() == self.end.date()

    def overlaps(self, other: TimeSlot) -> bool:
        return self.start < other.end and other.start < self.end


def add_years(day: date, years: int) -> date:
    """Shift ``day`` by whole years; 29 February falls back to the 28th."""

    try:
        return day.replace(year=day.year + years)
    except ValueError:
        return day.replace(year=day.year + years, day=28)


def booking_horizon(today: date, years: int = BOOKING_HORIZON_YEARS) -> date:
    """Latest date a meeting may be scheduled on."""

    return add_years(today, years)


def ensure_valid_order(slot: TimeSlot) -> None:
    if slot.is_empty():
        raise InvalidMeetingTimeError()


def ensure_row_invariants(slot: TimeSlot, *, today: date) -> None:
    """Check the single-meeting rules: ordering, same day, booking horizon."""

    ensure_valid_order(slot)
    if not slot.is_same_day():
        raise CrossDayMeetingError()
    if slot.day > booking_horizon(today):
        raise MeetingDateLimitError()
