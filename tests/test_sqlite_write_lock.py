from __future__ import annotations

import threading
import time
from datetime import date, datetime, timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from tutormarket.core.errors import DomainError, RoomConflictError
from tutormarket.db import models
from tutormarket.db.session import SessionLocal
from tutormarket.repositories import addresses as addresses_repo
from tutormarket.services.meetings import MeetingService
from tutormarket.services.users import UserService

DAY = date.today() + timedelta(days=7)


def _at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute)


@pytest.fixture()
def directory(session_scope: Session) -> dict[str, int]:
    users = UserService()
    first = users.create_user(
        session_scope, first_name="Tina", last_name="One", email="t1@example.edu", roles=[models.RoleName.TUTOR]
    )
    second = users.create_user(
        session_scope, first_name="Tom", last_name="Two", email="t2@example.edu", roles=[models.RoleName.TUTOR]
    )
    address = addresses_repo.create_address(
        session_scope,
        campus_name="Main Campus",
        street="Albert-Einstein-Allee",
        house_number="55",
        postal_code="89081",
        city="Ulm",
    )
    session_scope.commit()
    return {"t1": first.id, "t2": second.id, "address": address.id}


def test_first_read_opens_a_write_transaction(directory) -> None:
    with SessionLocal() as session:
        session.get(models.User, directory["t1"])
        assert session.connection().connection.dbapi_connection.in_transaction


def test_interleaved_bookings_persist_only_one(directory) -> None:
    service = MeetingService()
    first = SessionLocal()
    second = SessionLocal()
    outcome: dict[str, DomainError | None] = {}

    def book_second() -> None:
        try:
            service.schedule_meeting(
                second,
                created_by=directory["t2"],
                address_id=directory["address"],
                room_number=101,
                start_time=_at(DAY, 10, 30),
                end_time=_at(DAY, 11, 30),
            )
            second.commit()
            outcome["second"] = None
        except DomainError as exc:
            second.rollback()
            outcome["second"] = exc

    try:
        # The overlap check has passed and the row is flushed, but not committed.
        service.schedule_meeting(
            first,
            created_by=directory["t1"],
            address_id=directory["address"],
            room_number=101,
            start_time=_at(DAY, 10),
            end_time=_at(DAY, 11),
        )
        worker = threading.Thread(target=book_second)
        worker.start()
        time.sleep(0.2)
        first.commit()
        worker.join(timeout=10)
    finally:
        first.close()
        second.close()

    assert isinstance(outcome["second"], RoomConflictError)
    with SessionLocal() as session:
        count = session.scalar(
            select(func.count(models.Meeting.id)).where(
                models.Meeting.room_number == 101, models.Meeting.address_id == directory["address"]
            )
        )
    assert count == 1
