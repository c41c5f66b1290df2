from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from tutormarket.db import models


def list_users(session: Session, role: models.RoleName | None = None) -> list[models.User]:
    statement = select(models.User).order_by(models.User.last_name, models.User.first_name)
    if role is not None:
        statement = statement.join(models.User.roles).where(models.Role.name == role)
    return list(session.scalars(statement))


def get_user(session: Session, user_id: int) -> models.User | None:
    return session.get(models.User, user_id)


def get_by_email(session: Session, email: str) -> models.User | None:
    statement = select(models.User).where(func.lower(models.User.email) == email.lower())
    return session.scalars(statement).first()


def count_by_role(session: Session, role: models.RoleName) -> int:
    statement = (
        select(func.count(models.User.id)).join(models.User.roles).where(models.Role.name == role)
    )
    return session.scalar(statement) or 0


def search_tutors(session: Session, name: str) -> list[models.User]:
    """Tutors whose full name contains ``name``, case-insensitively."""

    full_name = models.User.first_name + " " + models.User.last_name
    statement = (
        select(models.User)
        .join(models.User.roles)
        .where(models.Role.name == models.RoleName.TUTOR)
        .where(full_name.ilike(f"%{name.strip()}%"))
        .order_by(models.User.last_name, models.User.first_name)
    )
    return list(session.scalars(statement))


def create_user(
    session: Session,
    *,
    first_name: str,
    last_name: str,
    email: str,
    roles: list[models.Role],
    description: str | None = None,
) -> models.User:
    user = models.User(
        first_name=first_name,
        last_name=last_name,
        email=email,
        description=description,
        roles=roles,
    )
    session.add(user)
    session.flush()
    return user


def delete_user(session: Session, user_id: int) -> None:
    user = session.get(models.User, user_id)
    if user is None:
        return
    session.delete(user)


def update_user(
    session: Session,
    user: models.User,
    *,
    first_name: str,
    last_name: str,
    email: str,
    description: str | None,
) -> models.User:
    user.first_name = first_name
    user.last_name = last_name
    user.email = email
    user.description = description
    session.flush()
    return user
