from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator, model_validator


class CourseBase(BaseModel):
    course_name: str = Field(min_length=1, max_length=255)
    description_short: str = Field(min_length=1, max_length=500)
    description_long: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    tutor_id: int


class CourseWrite(CourseBase):
    category_ids: list[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_dates(self) -> "CourseWrite":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class CourseCreate(CourseWrite):
    pass


class CourseUpdate(CourseWrite):
    pass


class CourseRead(CourseBase):
    id: int
    categories: list[str] = Field(default_factory=list)
    created_at: datetime

    class Config:
        from_attributes = True

    @field_validator("categories", mode="before")
    @classmethod
    def _category_names(cls, value):
        return [getattr(item, "category_name", item) for item in value]


class CourseCollection(BaseModel):
    items: list[CourseRead]


class CourseCount(BaseModel):
    count: int


class EnrollmentCreate(BaseModel):
    student_id: int


class EnrollmentRead(BaseModel):
    course_id: int
    student_id: int
