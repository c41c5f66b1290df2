from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from tutormarket.db import models


def list_addresses(session: Session) -> list[models.Address]:
    statement = select(models.Address).order_by(models.Address.campus_name, models.Address.id)
    return list(session.scalars(statement))


def get_address(session: Session, address_id: int) -> models.Address | None:
    return session.get(models.Address, address_id)


def create_address(
    session: Session,
    *,
    campus_name: str,
    street: str,
    house_number: str,
    postal_code: str,
    city: str,
) -> models.Address:
    address = models.Address(
        campus_name=campus_name,
        street=street,
        house_number=house_number,
        postal_code=postal_code,
        city=city,
    )
    session.add(address)
    session.flush()
    return address
