from __future__ import annotations

from datetime import date, datetime

import pytest

from tutormarket.core.errors import CrossDayMeetingError, InvalidMeetingTimeError, MeetingDateLimitError
from tutormarket.scheduling import TimeSlot, add_years, booking_horizon, ensure_row_invariants

TODAY = date(2026, 3, 2)


def _slot(day: date, start_hour: int, end_hour: int, end_day: date | None = None) -> TimeSlot:
    return TimeSlot(
        start=datetime(day.year, day.month, day.day, start_hour),
        end=datetime((end_day or day).year, (end_day or day).month, (end_day or day).day, end_hour),
    )


def test_overlapping_slots_are_detected() -> None:
    first = _slot(TODAY, 10, 11)
    second = TimeSlot(start=datetime(2026, 3, 2, 10, 30), end=datetime(2026, 3, 2, 11, 30))

    assert first.overlaps(second)
    assert second.overlaps(first)


def test_back_to_back_slots_do_not_overlap() -> None:
    assert not _slot(TODAY, 10, 11).overlaps(_slot(TODAY, 11, 12))


def test_contained_slot_overlaps() -> None:
    outer = _slot(TODAY, 9, 17)
    inner = TimeSlot(start=datetime(2026, 3, 2, 12, 15), end=datetime(2026, 3, 2, 12, 45))

    assert outer.overlaps(inner)
    assert inner.overlaps(outer)


def test_duration_minutes() -> None:
    slot = TimeSlot(start=datetime(2026, 3, 2, 10, 0), end=datetime(2026, 3, 2, 11, 30))
    assert slot.duration_minutes == 90


def test_add_years_handles_leap_day() -> None:
    assert add_years(date(2028, 2, 29), 1) == date(2029, 2, 28)
    assert add_years(date(2026, 10, 16), 1) == date(2027, 10, 16)


def test_booking_horizon_is_one_year() -> None:
    assert booking_horizon(TODAY) == date(2027, 3, 2)


def test_row_invariants_accept_regular_meeting() -> None:
    ensure_row_invariants(_slot(TODAY, 10, 11), today=TODAY)


def test_meeting_on_horizon_day_is_accepted() -> None:
    ensure_row_invariants(_slot(date(2027, 3, 2), 10, 11), today=TODAY)


def test_empty_or_inverted_slot_is_rejected() -> None:
    with pytest.raises(InvalidMeetingTimeError):
        ensure_row_invariants(_slot(TODAY, 11, 11), today=TODAY)
    with pytest.raises(InvalidMeetingTimeError):
        ensure_row_invariants(_slot(TODAY, 12, 11), today=TODAY)


def test_cross_midnight_meeting_is_rejected() -> None:
    slot = _slot(TODAY, 23, 1, end_day=date(2026, 3, 3))
    with pytest.raises(CrossDayMeetingError):
        ensure_row_invariants(slot, today=TODAY)


def test_meeting_beyond_horizon_is_rejected() -> None:
    with pytest.raises(MeetingDateLimitError):
        ensure_row_invariants(_slot(date(2027, 4, 6), 10, 11), today=TODAY)
