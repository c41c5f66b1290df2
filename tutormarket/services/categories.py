from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from tutormarket.core.errors import DuplicateEntityError
from tutormarket.db import models
from tutormarket.repositories import categories as categories_repo


logger = logging.getLogger(__name__)


class CategoryService:
    def create_category(self, session: Session, category_name: str) -> models.Category:
        if categories_repo.get_by_name(session, category_name) is not None:
            raise DuplicateEntityError(f"Category {category_name} already exists")
        category = categories_repo.create_category(session, category_name)
        logger.info("Created category %s (%s)", category.id, category.category_name)
        return category

    def list_categories(self, session: Session) -> list[models.Category]:
        return categories_repo.list_categories(session)
