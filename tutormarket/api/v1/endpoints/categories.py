from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tutormarket.api.v1.errors import as_http_exception
from tutormarket.core.errors import DomainError
from tutormarket.db.session import get_session
from tutormarket.schemas import CategoryCollection, CategoryCreate, CategoryRead
from tutormarket.services.categories import CategoryService

router = APIRouter()

_category_service = CategoryService()


@router.get("/", response_model=CategoryCollection)
def list_categories(session: Session = Depends(get_session)) -> CategoryCollection:
    return CategoryCollection(items=_category_service.list_categories(session))


@router.post("/", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryCreate, session: Session = Depends(get_session)) -> CategoryRead:
    try:
        category = _category_service.create_category(session, payload.category_name)
    except DomainError as exc:
        raise as_http_exception(exc) from exc
    session.commit()
    return CategoryRead.model_validate(category, from_attributes=True)
