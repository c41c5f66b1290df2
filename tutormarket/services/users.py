from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tutormarket.core.errors import DuplicateEntityError, EntityNotFoundError
from tutormarket.db import models
from tutormarket.repositories import roles as roles_repo
from tutormarket.repositories import users as users_repo


logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _is_email_violation(exc: IntegrityError) -> bool:
    # A concurrent registration can pass the lookup and still lose on the unique index.
    return "email" in str(exc.orig)


class UserService:
    """Registration and lookup of students and tutors.

    Emails are stored lower-cased so the unique index on ``users.email``
    catches duplicates that differ only in case.
    """

    def create_user(
        self,
        session: Session,
        *,
        first_name: str,
        last_name: str,
        email: str,
        roles: list[models.RoleName],
        description: str | None = None,
    ) -> models.User:
        email = normalize_email(email)
        self._ensure_email_free(session, email)

        role_rows = roles_repo.get_roles(session, roles)
        missing = set(roles) - {role.name for role in role_rows}
        if missing:
            raise EntityNotFoundError("Role", ", ".join(sorted(role.value for role in missing)))

        try:
            user = users_repo.create_user(
                session,
                first_name=first_name,
                last_name=last_name,
                email=email,
                roles=role_rows,
                description=description,
            )
        except IntegrityError as exc:
            if not _is_email_violation(exc):
                raise
            session.rollback()
            raise self._duplicate(email) from exc
        logger.info("Registered user %s with roles %s", user.id, [role.value for role in roles])
        return user

    def update_user(
        self,
        session: Session,
        user_id: int,
        *,
        first_name: str,
        last_name: str,
        email: str,
        description: str | None = None,
    ) -> models.User:
        user = self.get_user(session, user_id)
        email = normalize_email(email)
        if email != user.email:
            self._ensure_email_free(session, email)

        try:
            users_repo.update_user(
                session,
                user,
                first_name=first_name,
                last_name=last_name,
                email=email,
                description=description,
            )
        except IntegrityError as exc:
            if not _is_email_violation(exc):
                raise
            session.rollback()
            raise self._duplicate(email) from exc
        logger.info("Updated user %s", user_id)
        return user

    def get_user(self, session: Session, user_id: int) -> models.User:
        user = users_repo.get_user(session, user_id)
        if user is None:
            raise EntityNotFoundError("User", user_id)
        return user

    def list_users(self, session: Session, role: models.RoleName | None = None) -> list[models.User]:
        return users_repo.list_users(session, role)

    def count_users(self, session: Session, role: models.RoleName) -> int:
        return users_repo.count_by_role(session, role)

    def search_tutors(self, session: Session, name: str) -> list[models.User]:
        if not name.strip():
            return []
        return users_repo.search_tutors(session, name)

    def delete_user(self, session: Session, user_id: int) -> None:
        """Remove a user together with the courses and meetings they own."""

        self.get_user(session, user_id)
        users_repo.delete_user(session, user_id)
        session.flush()
        logger.info("Deleted user %s", user_id)

    def _ensure_email_free(self, session: Session, email: str) -> None:
        if users_repo.get_by_email(session, email) is not None:
            raise self._duplicate(email)

    @staticmethod
    def _duplicate(email: str) -> DuplicateEntityError:
        logger.info("Rejected duplicate email %s", email)
        return DuplicateEntityError(f"A user with email {email} already exists")
