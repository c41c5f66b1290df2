from __future__ import annotations

import argparse
from datetime import date, timedelta

from tutormarket.db.constraints import inspect_meeting_constraints, supports_storage_enforcement
from tutormarket.db.initializer import create_database_schema
from tutormarket.db.models import RoleName
from tutormarket.db.session import SessionLocal, engine
from tutormarket.repositories import addresses as addresses_repo
from tutormarket.services.courses import CourseService
from tutormarket.services.users import UserService


def init_db() -> None:
    print(create_database_schema())


def seed_demo() -> None:
    with SessionLocal() as session:
        tutor = UserService().create_user(
            session,
            first_name="Ada",
            last_name="Lovelace",
            email="ada.lovelace@example.edu",
            roles=[RoleName.TUTOR],
            description="Seeded demo tutor",
        )
        address = addresses_repo.create_address(
            session,
            campus_name="Main Campus",
            street="Prittwitzstrasse",
            house_number="10",
            postal_code="89075",
            city="Ulm",
        )
        course = CourseService().create_course(
            session,
            course_name="Discrete Mathematics",
            description_short="Sets, relations, graphs and proofs.",
            tutor_id=tutor.id,
            start_date=date.today(),
            end_date=date.today() + timedelta(days=90),
        )
        session.commit()
        print(f"Seeded tutor {tutor.id}, address {address.id} and course {course.id}.")


def show_constraints() -> None:
    if not supports_storage_enforcement(engine.dialect.name):
        print(f"No storage-level meeting constraints on {engine.dialect.name}.")
        return
    with engine.connect() as connection:
        state = inspect_meeting_constraints(connection)
    print(f"time_range: {state.time_range_expression or 'missing'}")
    print(f"{'present' if state.room_index else 'missing'}: room index")
    for name, definition in sorted(state.constraints.items()):
        print(f"{name}: {definition}")
    print("complete" if state.complete else "incomplete")


COMMANDS = {
    "init-db": init_db,
    "seed-demo": seed_demo,
    "constraints": show_constraints,
}


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="tutormarket", description="Database maintenance commands")
    parser.add_argument("command", choices=sorted(COMMANDS))
    args = parser.parse_args(argv)
    COMMANDS[args.command]()


if __name__ == "__main__":
    main()
