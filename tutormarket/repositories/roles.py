from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from tutormarket.db import models


def get_roles(session: Session, names: Iterable[models.RoleName]) -> list[models.Role]:
    wanted = set(names)
    if not wanted:
        return []
    statement = select(models.Role).where(models.Role.name.in_(wanted)).order_by(models.Role.name)
    return list(session.scalars(statement))
