from __future__ import annotations

from datetime import date

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from tutormarket.db import models


def list_courses(
    session: Session,
    *,
    name: str | None = None,
    tutor_id: int | None = None,
    category: str | None = None,
) -> list[models.Course]:
    statement = select(models.Course).order_by(models.Course.course_name, models.Course.id)
    if name:
        statement = statement.where(models.Course.course_name.ilike(f"%{name.strip()}%"))
    if tutor_id is not None:
        statement = statement.where(models.Course.tutor_id == tutor_id)
    if category:
        statement = statement.join(models.Course.categories).where(
            func.lower(models.Category.category_name) == category.strip().lower()
        )
    return list(session.scalars(statement))


def list_enrolled_courses(session: Session, student_id: int) -> list[models.Course]:
    statement = (
        select(models.Course)
        .join(models.Course.students)
        .where(models.User.id == student_id)
        .order_by(models.Course.course_name, models.Course.id)
    )
    return list(session.scalars(statement))


def list_students(session: Session, course_id: int) -> list[models.User]:
    statement = (
        select(models.User)
        .join(models.User.enrolled_courses)
        .where(models.Course.id == course_id)
        .order_by(models.User.last_name, models.User.first_name)
    )
    return list(session.scalars(statement))


def is_enrolled(session: Session, *, student_id: int, course_id: int) -> bool:
    statement = select(models.student_courses.c.course_id).where(
        models.student_courses.c.student_id == student_id,
        models.student_courses.c.course_id == course_id,
    )
    return session.scalar(statement) is not None


def is_enrolled_with_tutor(session: Session, *, student_id: int, tutor_id: int) -> bool:
    statement = (
        select(models.Course.id)
        .join(models.student_courses, models.student_courses.c.course_id == models.Course.id)
        .where(models.student_courses.c.student_id == student_id, models.Course.tutor_id == tutor_id)
        .limit(1)
    )
    return session.scalar(statement) is not None


def count_courses(session: Session) -> int:
    return session.scalar(select(func.count(models.Course.id))) or 0


def get_course(session: Session, course_id: int) -> models.Course | None:
    return session.get(models.Course, course_id)


def get_by_name(session: Session, course_name: str) -> models.Course | None:
    statement = select(models.Course).where(func.lower(models.Course.course_name) == course_name.strip().lower())
    return session.scalars(statement).first()


def create_course(
    session: Session,
    *,
    course_name: str,
    description_short: str,
    tutor_id: int,
    description_long: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    categories: list[models.Category] | None = None,
) -> models.Course:
    course = models.Course(
        course_name=course_name,
        description_short=description_short,
        description_long=description_long,
        start_date=start_date,
        end_date=end_date,
        tutor_id=tutor_id,
        categories=list(categories or []),
    )
    session.add(course)
    session.flush()
    return course


def update_course(
    session: Session,
    course: models.Course,
    *,
    course_name: str,
    description_short: str,
    tutor_id: int,
    description_long: str | None,
    start_date: date | None,
    end_date: date | None,
    categories: list[models.Category],
) -> models.Course:
    course.course_name = course_name
    course.description_short = description_short
    course.description_long = description_long
    course.start_date = start_date
    course.end_date = end_date
    course.tutor_id = tutor_id
    course.categories = categories
    session.flush()
    return course


def add_student(session: Session, course: models.Course, student: models.User) -> None:
    course.students.append(student)
    session.flush()


def delete_course(session: Session, course_id: int) -> None:
    course = session.get(models.Course, course_id)
    if course is None:
        return
    session.delete(course)
