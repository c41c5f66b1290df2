from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, String, Table, Text, UniqueConstraint, func
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class RoleName(str, Enum):
    ADMIN = "ADMIN"
    STUDENT = "STUDENT"
    TUTOR = "TUTOR"
    VERIFIER = "VERIFIER"


class MeetingType(str, Enum):
    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"
    HYBRID = "HYBRID"


user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", ForeignKey("roles.role_id", ondelete="CASCADE"), primary_key=True),
)

student_courses = Table(
    "student_courses",
    Base.metadata,
    Column("student_id", ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True),
    Column("course_id", ForeignKey("course.course_id", ondelete="CASCADE"), primary_key=True),
    Column("enrolled_at", DateTime, server_default=func.now(), nullable=False),
)

course_categories = Table(
    "course_categories",
    Base.metadata,
    Column("course_id", ForeignKey("course.course_id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", ForeignKey("category.category_id", ondelete="CASCADE"), primary_key=True),
)

RATING_POINTS_CHECK = "points BETWEEN 1 AND 5"


class Role(Base):
    """One of the fixed marketplace roles, seeded on startup."""

    __tablename__ = "roles"

    id: Mapped[int] = mapped_column("role_id", primary_key=True, autoincrement=True)
    name: Mapped[RoleName] = mapped_column(
        "role", SAEnum(RoleName, native_enum=False, length=16), unique=True, nullable=False
    )


class User(Base, TimestampMixin):
    """Student, tutor or staff member."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column("user_id", primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    roles: Mapped[list[Role]] = relationship(secondary=user_roles, lazy="selectin")
    courses: Mapped[list[Course]] = relationship(back_populates="tutor", cascade="all, delete-orphan")
    meetings: Mapped[list[Meeting]] = relationship(back_populates="creator", cascade="all, delete-orphan")
    enrolled_courses: Mapped[list[Course]] = relationship(secondary=student_courses, back_populates="students")
    tutor_ratings: Mapped[list[TutorRating]] = relationship(
        back_populates="tutor", foreign_keys="TutorRating.tutor_id", cascade="all, delete-orphan"
    )

    def has_role(self, role: RoleName) -> bool:
        return any(item.name == role for item in self.roles)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Address(Base):
    """Campus building where meetings take place; rooms are numbered per address."""

    __tablename__ = "address"

    id: Mapped[int] = mapped_column("address_id", primary_key=True, autoincrement=True)
    campus_name: Mapped[str] = mapped_column(String(255), nullable=False)
    street: Mapped[str] = mapped_column(String(255), nullable=False)
    house_number: Mapped[str] = mapped_column(String(16), nullable=False)
    postal_code: Mapped[str] = mapped_column(String(16), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)


class Course(Base, TimestampMixin):
    """Course offered by a tutor."""

    __tablename__ = "course"

    id: Mapped[int] = mapped_column("course_id", primary_key=True, autoincrement=True)
    course_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description_short: Mapped[str] = mapped_column(String(500), nullable=False)
    description_long: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    tutor_id: Mapped[int] = mapped_column(ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)

    tutor: Mapped[User] = relationship(back_populates="courses")
    meetings: Mapped[list[Meeting]] = relationship(back_populates="course", cascade="all, delete")
    categories: Mapped[list[Category]] = relationship(
        secondary=course_categories, back_populates="courses", lazy="selectin"
    )
    students: Mapped[list[User]] = relationship(secondary=student_courses, back_populates="enrolled_courses")
    ratings: Mapped[list[CourseRating]] = relationship(back_populates="course", cascade="all, delete-orphan")


class Category(Base):
    __tablename__ = "category"

    id: Mapped[int] = mapped_column("category_id", primary_key=True, autoincrement=True)
    category_name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    courses: Mapped[list[Course]] = relationship(secondary=course_categories, back_populates="categories")


class CourseRating(Base, TimestampMixin):
    """A student's 1-5 rating of a course they are enrolled in; one per student and course."""

    __tablename__ = "rating_course"
    __table_args__ = (
        UniqueConstraint("student_id", "course_id"),
        CheckConstraint(RATING_POINTS_CHECK, name="points_range"),
    )

    id: Mapped[int] = mapped_column("rating_id", primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    course_id: Mapped[int] = mapped_column(ForeignKey("course.course_id", ondelete="CASCADE"), nullable=False)
    points: Mapped[int] = mapped_column(nullable=False)
    review: Mapped[str | None] = mapped_column(Text, nullable=True)

    course: Mapped[Course] = relationship(back_populates="ratings")


class TutorRating(Base, TimestampMixin):
    """A student's 1-5 rating of a tutor whose course they attend; one per student and tutor."""

    __tablename__ = "rating_tutor"
    __table_args__ = (
        UniqueConstraint("student_id", "tutor_id"),
        CheckConstraint(RATING_POINTS_CHECK, name="points_range"),
    )

    id: Mapped[int] = mapped_column("rating_id", primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    tutor_id: Mapped[int] = mapped_column(ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    points: Mapped[int] = mapped_column(nullable=False)
    review: Mapped[str | None] = mapped_column(Text, nullable=True)

    tutor: Mapped[User] = relationship(back_populates="tutor_ratings", foreign_keys=[tutor_id])


class Meeting(Base, TimestampMixin):
    """Session booked by a tutor in a room of an address.

    On PostgreSQL the table also carries a generated ``time_range`` column that
    is managed by :mod:`tutormarket.db.constraints`, not by the ORM.
    """

    __tablename__ = "meeting"

    id: Mapped[int] = mapped_column("meeting_id", primary_key=True, autoincrement=True)
    meeting_type: Mapped[MeetingType] = mapped_column(
        SAEnum(MeetingType, native_enum=False, length=16), nullable=False, default=MeetingType.OFFLINE
    )
    meeting_date: Mapped[date] = mapped_column(Date, nullable=False)
    meeting_start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    meeting_end_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    duration: Mapped[int] = mapped_column(nullable=False)
    room_number: Mapped[int] = mapped_column(nullable=False)
    address_id: Mapped[int] = mapped_column(ForeignKey("address.address_id"), nullable=False)
    created_by: Mapped[int] = mapped_column(ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    course_id: Mapped[int | None] = mapped_column(ForeignKey("course.course_id", ondelete="CASCADE"), nullable=True)

    creator: Mapped[User] = relationship(back_populates="meetings")
    course: Mapped[Course | None] = relationship(back_populates="meetings")
    address: Mapped[Address] = relationship()
