# catalog_api/services/category.py
from __future__ import annotations

import logging
from typing import List, Tuple

from sqlalchemy.orm import Session

from catalog_api.core.errors import NotFoundError
from catalog_api.crud import category as crud
from catalog_api.models.category import Category
from catalog_api.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from catalog_api.schemas.common import PaginationMeta
from catalog_api.services.listing import ListParams, build_category_query, paginate

logger = logging.getLogger(__name__)


def _get_or_404(db: Session, category_id: str) -> Category:
    obj = crud.get(db, category_id)
    if obj is None:
        raise NotFoundError("Category")
    return obj


def create_category(db: Session, payload: CategoryCreate) -> CategoryRead:
    obj = crud.create(db, payload.model_dump())
    logger.info("Category created id=%s name=%r", obj.id, obj.name)
    return CategoryRead.model_validate(obj)


def list_categories(db: Session, params: ListParams) -> Tuple[List[CategoryRead], PaginationMeta]:
    query = build_category_query(params)
    items, total = crud.list_categories(db, query)
    return [CategoryRead.model_validate(c) for c in items], paginate(total, query.page, query.limit)


def get_category(db: Session, category_id: str) -> CategoryRead:
    return CategoryRead.model_validate(_get_or_404(db, category_id))


def update_category(db: Session, category_id: str, payload: CategoryUpdate) -> CategoryRead:
    obj = _get_or_404(db, category_id)
    obj = crud.update(db, obj, payload.model_dump(exclude_unset=True))
    return CategoryRead.model_validate(obj)


def delete_category(db: Session, category_id: str) -> None:
    obj = _get_or_404(db, category_id)
    crud.delete(db, obj)
    logger.info("Category deleted id=%s", category_id)
