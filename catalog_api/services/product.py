# catalog_api/services/product.py
"""
Orchestrarea operațiilor pe produse: referința la categorie, unicitatea (name, category)
la nivel de aplicație, generarea codului, persistarea și atașarea `pricing`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from catalog_api.core.errors import NotFoundError, ValidationError
from catalog_api.crud import category as category_crud
from catalog_api.crud import product as crud
from catalog_api.models.category import Category
from catalog_api.models.product import Product
from catalog_api.schemas.category import CategorySummary
from catalog_api.schemas.common import PaginationMeta
from catalog_api.schemas.product import ProductCreate, ProductFilters, ProductRead, ProductSort, ProductUpdate
from catalog_api.services.listing import ListParams, build_product_query, paginate
from catalog_api.services.pricing import calculate_pricing
from catalog_api.services.product_code import generate_product_code

logger = logging.getLogger(__name__)

DUPLICATE_NAME_MESSAGE = "Product with this name already exists in this category"


@dataclass
class ProductListing:
    items: List[ProductRead]
    pagination: PaginationMeta
    filters: ProductFilters
    sort: ProductSort


def to_read(obj: Product, *, with_category: bool = True) -> ProductRead:
    """Serializează produsul cu `pricing` calculat; opțional și categoria curentă ("populate")."""
    category = None
    if with_category and obj.category is not None:
        category = CategorySummary.model_validate(obj.category)
    return ProductRead(
        id=obj.id,
        name=obj.name,
        description=obj.description,
        price=obj.price,
        discount=obj.discount,
        image=obj.image,
        status=obj.status,
        product_code=obj.product_code,
        category_id=obj.category_id,
        category_name=obj.category_name,
        category=category,
        created_at=obj.created_at,
        updated_at=obj.updated_at,
        pricing=calculate_pricing(obj.price, obj.discount),
    )


def _get_or_404(db: Session, product_id: str) -> Product:
    obj = crud.get(db, product_id)
    if obj is None:
        raise NotFoundError("Product")
    return obj


def _require_category(db: Session, category_id: str) -> Category:
    category = category_crud.get(db, category_id)
    if category is None:
        raise NotFoundError("Category")
    return category


def create_product(
    db: Session,
    payload: ProductCreate,
    *,
    code_factory: Callable[[str], str] = generate_product_code,
) -> ProductRead:
    category = _require_category(db, payload.category_id)

    # verificare app-level (fără index pe pereche) → VALIDATION_ERROR, nu 409
    if crud.find_by_name_in_category(db, payload.name, payload.category_id) is not None:
        raise ValidationError(
            DUPLICATE_NAME_MESSAGE,
            details=[{"field": "name", "message": DUPLICATE_NAME_MESSAGE}],
        )

    data = payload.model_dump()
    data["product_code"] = code_factory(payload.name)
    data["category_name"] = category.name
    obj = crud.create(db, data)
    logger.info("Product created id=%s code=%s category=%s", obj.id, obj.product_code, obj.category_id)
    return to_read(obj, with_category=False)


def list_products(db: Session, params: ListParams) -> ProductListing:
    query = build_product_query(params)
    items, total = crud.list_products(db, query)
    return ProductListing(
        items=[to_read(p) for p in items],
        pagination=paginate(total, query.page, query.limit),
        filters=ProductFilters(search=params.search, category=params.category, status=params.status),
        sort=ProductSort(sort_by=query.sort_by, sort_order=query.sort_order),
    )


def get_product(db: Session, product_id: str) -> ProductRead:
    return to_read(_get_or_404(db, product_id))


def update_product(db: Session, product_id: str, payload: ProductUpdate) -> ProductRead:
    obj = _get_or_404(db, product_id)

    category: Optional[Category] = None
    if payload.category_id:
        category = _require_category(db, payload.category_id)

    obj = crud.update(db, obj, payload.model_dump(exclude_unset=True), category=category)
    return to_read(obj)


def delete_product(db: Session, product_id: str) -> None:
    obj = _get_or_404(db, product_id)
    crud.delete(db, obj)
    logger.info("Product deleted id=%s", product_id)
