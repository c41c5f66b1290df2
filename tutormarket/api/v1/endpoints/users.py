from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from tutormarket.api.v1.errors import as_http_exception
from tutormarket.core.errors import DomainError
from tutormarket.db.models import RoleName
from tutormarket.db.session import get_session
from tutormarket.schemas import (
    CourseCollection,
    RatingCreate,
    RatingRead,
    RatingSummary,
    UserCollection,
    UserCount,
    UserCreate,
    UserRead,
    UserUpdate,
)
from tutormarket.services.courses import CourseService
from tutormarket.services.ratings import RatingService
from tutormarket.services.users import UserService

router = APIRouter()

_user_service = UserService()
_course_service = CourseService()
_rating_service = RatingService()


@router.get("/", response_model=UserCollection)
def list_users(role: RoleName | None = None, session: Session = Depends(get_session)) -> UserCollection:
    items = _user_service.list_users(session, role)
    return UserCollection(items=items)


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, session: Session = Depends(get_session)) -> UserRead:
    try:
        user = _user_service.create_user(
            session,
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
            roles=payload.roles,
            description=payload.description,
        )
    except DomainError as exc:
        raise as_http_exception(exc) from exc
    session.commit()
    session.refresh(user)
    return UserRead.model_validate(user, from_attributes=True)


@router.get("/count", response_model=UserCount)
def count_users(role: RoleName, session: Session = Depends(get_session)) -> UserCount:
    return UserCount(role=role, count=_user_service.count_users(session, role))


@router.get("/tutors/search", response_model=UserCollection)
def search_tutors(name: str, session: Session = Depends(get_session)) -> UserCollection:
    items = _user_service.search_tutors(session, name)
    return UserCollection(items=items)


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, session: Session = Depends(get_session)) -> UserRead:
    try:
        user = _user_service.get_user(session, user_id)
    except DomainError as exc:
        raise as_http_exception(exc) from exc
    return UserRead.model_validate(user, from_attributes=True)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_user(user_id: int, session: Session = Depends(get_session)) -> Response:
    try:
        _user_service.delete_user(session, user_id)
    except DomainError as exc:
        raise as_http_exception(exc) from exc
    session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{user_id}", response_model=UserRead)
def update_user(user_id: int, payload: UserUpdate, session: Session = Depends(get_session)) -> UserRead:
    try:
        user = _user_service.update_user(session, user_id, **payload.model_dump())
    except DomainError as exc:
        raise as_http_exception(exc) from exc
    session.commit()
    session.refresh(user)
    return UserRead.model_validate(user, from_attributes=True)


@router.get("/{user_id}/courses", response_model=CourseCollection)
def list_enrolled_courses(user_id: int, session: Session = Depends(get_session)) -> CourseCollection:
    try:
        items = _course_service.list_enrolled_courses(session, user_id)
    except DomainError as exc:
        raise as_http_exception(exc) from exc
    return CourseCollection(items=items)


@router.get("/{user_id}/ratings", response_model=RatingSummary)
def list_tutor_ratings(user_id: int, session: Session = Depends(get_session)) -> RatingSummary:
    try:
        overview = _rating_service.tutor_ratings(session, user_id)
    except DomainError as exc:
        raise as_http_exception(exc) from exc
    return RatingSummary(
        average_rating=overview.average_rating,
        count=len(overview.ratings),
        items=overview.ratings,
    )


@router.post("/{user_id}/ratings", response_model=RatingRead, status_code=status.HTTP_201_CREATED)
def rate_tutor(user_id: int, payload: RatingCreate, session: Session = Depends(get_session)) -> RatingRead:
    try:
        rating = _rating_service.rate_tutor(session, user_id, **payload.model_dump())
    except DomainError as exc:
        raise as_http_exception(exc) from exc
    session.commit()
    session.refresh(rating)
    return RatingRead.model_validate(rating, from_attributes=True)
