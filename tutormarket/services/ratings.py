from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from tutormarket.core.errors import EnrollmentRequiredError, EntityNotFoundError, RoleRequiredError
from tutormarket.db import models
from tutormarket.repositories import courses as courses_repo
from tutormarket.repositories import ratings as ratings_repo
from tutormarket.repositories import users as users_repo


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RatingOverview:
    average_rating: float
    ratings: list[models.CourseRating] | list[models.TutorRating]


class RatingService:
    """Course and tutor ratings given by enrolled students.

    A student rates a course only while enrolled in it, and a tutor only when
    enrolled in at least one of the tutor's courses. Rating the same target
    again replaces the earlier points and review.
    """

    def rate_course(
        self,
        session: Session,
        course_id: int,
        *,
        student_id: int,
        points: int,
        review: str | None = None,
    ) -> models.CourseRating:
        if courses_repo.get_course(session, course_id) is None:
            raise EntityNotFoundError("Course", course_id)
        self._require_user(session, student_id)
        if not courses_repo.is_enrolled(session, student_id=student_id, course_id=course_id):
            raise EnrollmentRequiredError(student_id, f"course {course_id}")

        rating = ratings_repo.get_course_rating(session, student_id=student_id, course_id=course_id)
        if rating is None:
            rating = models.CourseRating(student_id=student_id, course_id=course_id, points=points, review=review)
        else:
            rating.points = points
            rating.review = review
        ratings_repo.save_rating(session, rating)
        logger.info("Student %s rated course %s with %s points", student_id, course_id, points)
        return rating

    def rate_tutor(
        self,
        session: Session,
        tutor_id: int,
        *,
        student_id: int,
        points: int,
        review: str | None = None,
    ) -> models.TutorRating:
        tutor = self._require_user(session, tutor_id)
        if not tutor.has_role(models.RoleName.TUTOR):
            raise RoleRequiredError(tutor_id, models.RoleName.TUTOR.value)
        self._require_user(session, student_id)
        if not courses_repo.is_enrolled_with_tutor(session, student_id=student_id, tutor_id=tutor_id):
            raise EnrollmentRequiredError(student_id, f"any course of tutor {tutor_id}")

        rating = ratings_repo.get_tutor_rating(session, student_id=student_id, tutor_id=tutor_id)
        if rating is None:
            rating = models.TutorRating(student_id=student_id, tutor_id=tutor_id, points=points, review=review)
        else:
            rating.points = points
            rating.review = review
        ratings_repo.save_rating(session, rating)
        logger.info("Student %s rated tutor %s with %s points", student_id, tutor_id, points)
        return rating

    def course_ratings(self, session: Session, course_id: int) -> RatingOverview:
        if courses_repo.get_course(session, course_id) is None:
            raise EntityNotFoundError("Course", course_id)
        return RatingOverview(
            average_rating=ratings_repo.average_course_rating(session, course_id),
            ratings=ratings_repo.list_course_ratings(session, course_id),
        )

    def tutor_ratings(self, session: Session, tutor_id: int) -> RatingOverview:
        self._require_user(session, tutor_id)
        return RatingOverview(
            average_rating=ratings_repo.average_tutor_rating(session, tutor_id),
            ratings=ratings_repo.list_tutor_ratings(session, tutor_id),
        )

    @staticmethod
    def _require_user(session: Session, user_id: int) -> models.User:
        user = users_repo.get_user(session, user_id)
        if user is None:
            raise EntityNotFoundError("User", user_id)
        return user
