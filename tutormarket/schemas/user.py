from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from tutormarket.db.models import RoleName


class UserBase(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    description: str | None = None


class UserCreate(UserBase):
    roles: list[RoleName] = Field(default_factory=lambda: [RoleName.STUDENT], min_length=1)


class UserUpdate(UserBase):
    pass


class UserRead(UserBase):
    id: int
    roles: list[RoleName]
    created_at: datetime

    class Config:
        from_attributes = True

    @field_validator("roles", mode="before")
    @classmethod
    def _role_names(cls, value):
        return [getattr(item, "name", item) for item in value]


class UserCollection(BaseModel):
    items: list[UserRead]


class UserCount(BaseModel):
    role: RoleName
    count: int
