from .address import AddressCollection, AddressCreate, AddressRead
from .category import CategoryCollection, CategoryCreate, CategoryRead
from .course import (
    CourseCollection,
    CourseCount,
    CourseCreate,
    CourseRead,
    CourseUpdate,
    EnrollmentCreate,
    EnrollmentRead,
)
from .meeting import MeetingCollection, MeetingCreate, MeetingRead, MeetingReschedule
from .rating import RatingCreate, RatingRead, RatingSummary
from .user import UserCollection, UserCount, UserCreate, UserRead, UserUpdate

__all__ = [
    "AddressCollection",
    "AddressCreate",
    "AddressRead",
    "CategoryCollection",
    "CategoryCreate",
    "CategoryRead",
    "CourseCollection",
    "CourseCount",
    "CourseCreate",
    "CourseRead",
    "CourseUpdate",
    "EnrollmentCreate",
    "EnrollmentRead",
    "MeetingCollection",
    "MeetingCreate",
    "MeetingRead",
    "MeetingReschedule",
    "RatingCreate",
    "RatingRead",
    "RatingSummary",
    "UserCollection",
    "UserCount",
    "UserCreate",
    "UserRead",
    "UserUpdate",
]
