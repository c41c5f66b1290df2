from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from tutormarket.db import models


def list_categories(session: Session) -> list[models.Category]:
    statement = select(models.Category).order_by(models.Category.category_name)
    return list(session.scalars(statement))


def get_by_name(session: Session, category_name: str) -> models.Category | None:
    statement = select(models.Category).where(
        func.lower(models.Category.category_name) == category_name.strip().lower()
    )
    return session.scalars(statement).first()


def get_categories(session: Session, category_ids: list[int]) -> list[models.Category]:
    if not category_ids:
        return []
    statement = select(models.Category).where(models.Category.id.in_(category_ids))
    return list(session.scalars(statement))


def create_category(session: Session, category_name: str) -> models.Category:
    category = models.Category(category_name=category_name.strip())
    session.add(category)
    session.flush()
    return category
