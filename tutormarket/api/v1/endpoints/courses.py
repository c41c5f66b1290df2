from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from tutormarket.api.v1.errors import as_http_exception
from tutormarket.core.errors import DomainError
from tutormarket.db.session import get_session
from tutormarket.schemas import (
    CourseCollection,
    CourseCount,
    CourseCreate,
    CourseRead,
    CourseUpdate,
    EnrollmentCreate,
    EnrollmentRead,
    RatingCreate,
    RatingRead,
    RatingSummary,
    UserCollection,
)
from tutormarket.services.courses import CourseService
from tutormarket.services.ratings import RatingService

router = APIRouter()

_course_service = CourseService()
_rating_service = RatingService()


@router.get("/", response_model=CourseCollection)
def list_courses(
    name: str | None = None,
    tutor_id: int | None = None,
    category: str | None = None,
    session: Session = Depends(get_session),
) -> CourseCollection:
    items = _course_service.list_courses(session, name=name, tutor_id=tutor_id, category=category)
    return CourseCollection(items=items)


@router.post("/", response_model=CourseRead, status_code=status.HTTP_201_CREATED)
def create_course(payload: CourseCreate, session: Session = Depends(get_session)) -> CourseRead:
    try:
        course = _course_service.create_course(session, **payload.model_dump())
    except DomainError as exc:
        raise as_http_exception(exc) from exc
    session.commit()
    session.refresh(course)
    return CourseRead.model_validate(course, from_attributes=True)


@router.get("/count", response_model=CourseCount)
def count_courses(session: Session = Depends(get_session)) -> CourseCount:
    return CourseCount(count=_course_service.count_courses(session))


@router.get("/{course_id}", response_model=CourseRead)
def get_course(course_id: int, session: Session = Depends(get_session)) -> CourseRead:
    try:
        course = _course_service.get_course(session, course_id)
    except DomainError as exc:
        raise as_http_exception(exc) from exc
    return CourseRead.model_validate(course, from_attributes=True)


@router.put("/{course_id}", response_model=CourseRead)
def update_course(course_id: int, payload: CourseUpdate, session: Session = Depends(get_session)) -> CourseRead:
    try:
        course = _course_service.update_course(session, course_id, **payload.model_dump())
    except DomainError as exc:
        raise as_http_exception(exc) from exc
    session.commit()
    session.refresh(course)
    return CourseRead.model_validate(course, from_attributes=True)


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_course(course_id: int, session: Session = Depends(get_session)) -> Response:
    try:
        _course_service.delete_course(session, course_id)
    except DomainError as exc:
        raise as_http_exception(exc) from exc
    session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{course_id}/students", response_model=UserCollection)
def list_students(course_id: int, session: Session = Depends(get_session)) -> UserCollection:
    try:
        items = _course_service.list_students(session, course_id)
    except DomainError as exc:
        raise as_http_exception(exc) from exc
    return UserCollection(items=items)


@router.post("/{course_id}/enrollments", response_model=EnrollmentRead, status_code=status.HTTP_201_CREATED)
def enroll_student(
    course_id: int, payload: EnrollmentCreate, session: Session = Depends(get_session)
) -> EnrollmentRead:
    try:
        _course_service.enroll_student(session, course_id, payload.student_id)
    except DomainError as exc:
        raise as_http_exception(exc) from exc
    session.commit()
    return EnrollmentRead(course_id=course_id, student_id=payload.student_id)


@router.get("/{course_id}/ratings", response_model=RatingSummary)
def list_course_ratings(course_id: int, session: Session = Depends(get_session)) -> RatingSummary:
    try:
        overview = _rating_service.course_ratings(session, course_id)
    except DomainError as exc:
        raise as_http_exception(exc) from exc
    return RatingSummary(
        average_rating=overview.average_rating,
        count=len(overview.ratings),
        items=overview.ratings,
    )


@router.post("/{course_id}/ratings", response_model=RatingRead, status_code=status.HTTP_201_CREATED)
def rate_course(course_id: int, payload: RatingCreate, session: Session = Depends(get_session)) -> RatingRead:
    try:
        rating = _rating_service.rate_course(session, course_id, **payload.model_dump())
    except DomainError as exc:
        raise as_http_exception(exc) from exc
    session.commit()
    session.refresh(rating)
    return RatingRead.model_validate(rating, from_attributes=True)
