from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from tutormarket.db.session import get_session
from tutormarket.repositories import addresses as addresses_repo
from tutormarket.schemas import AddressCollection, AddressCreate, AddressRead

router = APIRouter()


@router.get("/", response_model=AddressCollection)
def list_addresses(session: Session = Depends(get_session)) -> AddressCollection:
    items = addresses_repo.list_addresses(session)
    return AddressCollection(items=items)


@router.post("/", response_model=AddressRead, status_code=status.HTTP_201_CREATED)
def create_address(payload: AddressCreate, session: Session = Depends(get_session)) -> AddressRead:
    address = addresses_repo.create_address(session, **payload.model_dump())
    session.commit()
    session.refresh(address)
    return AddressRead.model_validate(address, from_attributes=True)


@router.get("/{address_id}", response_model=AddressRead)
def get_address(address_id: int, session: Session = Depends(get_session)) -> AddressRead:
    address = addresses_repo.get_address(session, address_id)
    if address is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Address not found")
    return AddressRead.model_validate(address, from_attributes=True)
