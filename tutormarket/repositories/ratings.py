from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from tutormarket.db import models


def get_course_rating(session: Session, *, student_id: int, course_id: int) -> models.CourseRating | None:
    statement = select(models.CourseRating).where(
        models.CourseRating.student_id == student_id,
        models.CourseRating.course_id == course_id,
    )
    return session.scalars(statement).first()


def list_course_ratings(session: Session, course_id: int) -> list[models.CourseRating]:
    statement = (
        select(models.CourseRating)
        .where(models.CourseRating.course_id == course_id)
        .order_by(models.CourseRating.id)
    )
    return list(session.scalars(statement))


def average_course_rating(session: Session, course_id: int) -> float:
    statement = select(func.avg(models.CourseRating.points)).where(models.CourseRating.course_id == course_id)
    return float(session.scalar(statement) or 0.0)


def get_tutor_rating(session: Session, *, student_id: int, tutor_id: int) -> models.TutorRating | None:
    statement = select(models.TutorRating).where(
        models.TutorRating.student_id == student_id,
        models.TutorRating.tutor_id == tutor_id,
    )
    return session.scalars(statement).first()


def list_tutor_ratings(session: Session, tutor_id: int) -> list[models.TutorRating]:
    statement = (
        select(models.TutorRating)
        .where(models.TutorRating.tutor_id == tutor_id)
        .order_by(models.TutorRating.id)
    )
    return list(session.scalars(statement))


def average_tutor_rating(session: Session, tutor_id: int) -> float:
    statement = select(func.avg(models.TutorRating.points)).where(models.TutorRating.tutor_id == tutor_id)
    return float(session.scalar(statement) or 0.0)


def save_rating(session: Session, rating: models.CourseRating | models.TutorRating) -> None:
    session.add(rating)
    session.flush()
