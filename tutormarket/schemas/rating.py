from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class RatingCreate(BaseModel):
    student_id: int
    points: int = Field(ge=1, le=5)
    review: str | None = Field(default=None, max_length=2000)


class RatingRead(BaseModel):
    id: int
    student_id: int
    points: int
    review: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class RatingSummary(BaseModel):
    average_rating: float
    count: int
    items: list[RatingRead]
