from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from tutormarket.core.config import get_settings
from tutormarket.db import models
from tutormarket.db.base import Base
from tutormarket.db.constraints import apply_meeting_constraints
from tutormarket.db.session import engine as default_engine


logger = logging.getLogger(__name__)


def seed_roles(session: Session) -> list[models.RoleName]:
    """Insert any of the fixed roles that are missing; return the ones created."""

    existing = set(session.scalars(select(models.Role.name)))
    created: list[models.RoleName] = []
    for role_name in models.RoleName:
        if role_name in existing:
            continue
        session.add(models.Role(name=role_name))
        created.append(role_name)
    session.flush()
    return created


def create_database_schema(bind: Engine | None = None, *, strict: bool | None = None) -> str:
    """Create tables, seed roles and (re)install the meeting constraints.

    Returns the outcome of the constraint bootstrap.
    """

    target = bind if bind is not None else default_engine
    if strict is None:
        strict = get_settings().strict_constraint_bootstrap

    Base.metadata.create_all(bind=target)

    with Session(target) as session:
        created = seed_roles(session)
        session.commit()
    if created:
        logger.info("Seeded roles: %s", ", ".join(role.value for role in created))

    return apply_meeting_constraints(target, strict=strict)


__all__ = ["create_database_schema", "seed_roles"]
