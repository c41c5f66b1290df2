from __future__ import annotations

from pydantic import BaseModel, Field


class AddressBase(BaseModel):
    campus_name: str = Field(min_length=1, max_length=255)
    street: str = Field(min_length=1, max_length=255)
    house_number: str = Field(min_length=1, max_length=16)
    postal_code: str = Field(min_length=1, max_length=16)
    city: str = Field(min_length=1, max_length=100)


class AddressCreate(AddressBase):
    pass


class AddressRead(AddressBase):
    id: int

    class Config:
        from_attributes = True


class AddressCollection(BaseModel):
    items: list[AddressRead]
