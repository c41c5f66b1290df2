from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.orm import Session

from tutormarket.core.errors import DuplicateEntityError, EntityNotFoundError, RoleRequiredError
from tutormarket.db import models
from tutormarket.repositories import categories as categories_repo
from tutormarket.repositories import courses as courses_repo
from tutormarket.repositories import users as users_repo


logger = logging.getLogger(__name__)


class CourseService:
    def create_course(
        self,
        session: Session,
        *,
        course_name: str,
        description_short: str,
        tutor_id: int,
        description_long: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        category_ids: list[int] | None = None,
    ) -> models.Course:
        self._require_user(session, tutor_id, models.RoleName.TUTOR)
        if courses_repo.get_by_name(session, course_name) is not None:
            raise DuplicateEntityError(f"Course {course_name} already exists")
        categories = self._resolve_categories(session, category_ids or [])

        course = courses_repo.create_course(
            session,
            course_name=course_name,
            description_short=description_short,
            description_long=description_long,
            start_date=start_date,
            end_date=end_date,
            tutor_id=tutor_id,
            categories=categories,
        )
        logger.info("Created course %s for tutor %s", course.id, tutor_id)
        return course

    def update_course(
        self,
        session: Session,
        course_id: int,
        *,
        course_name: str,
        description_short: str,
        tutor_id: int,
        description_long: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        category_ids: list[int] | None = None,
    ) -> models.Course:
        """Replace every editable field of a course, including its categories."""

        course = self.get_course(session, course_id)
        self._require_user(session, tutor_id, models.RoleName.TUTOR)
        namesake = courses_repo.get_by_name(session, course_name)
        if namesake is not None and namesake.id != course.id:
            raise DuplicateEntityError(f"Course {course_name} already exists")

        courses_repo.update_course(
            session,
            course,
            course_name=course_name,
            description_short=description_short,
            description_long=description_long,
            start_date=start_date,
            end_date=end_date,
            tutor_id=tutor_id,
            categories=self._resolve_categories(session, category_ids or []),
        )
        logger.info("Updated course %s", course_id)
        return course

    def get_course(self, session: Session, course_id: int) -> models.Course:
        course = courses_repo.get_course(session, course_id)
        if course is None:
            raise EntityNotFoundError("Course", course_id)
        return course

    def list_courses(
        self,
        session: Session,
        *,
        name: str | None = None,
        tutor_id: int | None = None,
        category: str | None = None,
    ) -> list[models.Course]:
        return courses_repo.list_courses(session, name=name, tutor_id=tutor_id, category=category)

    def count_courses(self, session: Session) -> int:
        return courses_repo.count_courses(session)

    def enroll_student(self, session: Session, course_id: int, student_id: int) -> models.Course:
        course = self.get_course(session, course_id)
        student = self._require_user(session, student_id, models.RoleName.STUDENT)
        if courses_repo.is_enrolled(session, student_id=student_id, course_id=course_id):
            raise DuplicateEntityError(f"Student {student_id} is already enrolled in course {course_id}")

        courses_repo.add_student(session, course, student)
        logger.info("Enrolled student %s in course %s", student_id, course_id)
        return course

    def list_students(self, session: Session, course_id: int) -> list[models.User]:
        self.get_course(session, course_id)
        return courses_repo.list_students(session, course_id)

    def list_enrolled_courses(self, session: Session, student_id: int) -> list[models.Course]:
        if users_repo.get_user(session, student_id) is None:
            raise EntityNotFoundError("User", student_id)
        return courses_repo.list_enrolled_courses(session, student_id)

    def delete_course(self, session: Session, course_id: int) -> None:
        """Remove a course; its meetings, ratings and enrollments go with it."""

        self.get_course(session, course_id)
        courses_repo.delete_course(session, course_id)
        session.flush()
        logger.info("Deleted course %s", course_id)

    @staticmethod
    def _require_user(session: Session, user_id: int, role: models.RoleName) -> models.User:
        user = users_repo.get_user(session, user_id)
        if user is None:
            raise EntityNotFoundError("User", user_id)
        if not user.has_role(role):
            raise RoleRequiredError(user_id, role.value)
        return user

    @staticmethod
    def _resolve_categories(session: Session, category_ids: list[int]) -> list[models.Category]:
        wanted = set(category_ids)
        found = categories_repo.get_categories(session, sorted(wanted))
        missing = wanted - {category.id for category in found}
        if missing:
            raise EntityNotFoundError("Category", ", ".join(str(item) for item in sorted(missing)))
        return found
