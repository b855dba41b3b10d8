# catalog_api/services/listing.py
"""
Construcția interogărilor de listare: filtru + sortare + fereastră de paginare.

Builder-ele sunt pure (nu ating store-ul); execuția e în `catalog_api.crud`.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from sqlalchemy import ColumnElement, func, or_

from catalog_api.models.category import Category
from catalog_api.models.product import Product
from catalog_api.schemas.common import PaginationMeta

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
DEFAULT_SORT_BY = "createdAt"
DEFAULT_SORT_ORDER = "desc"

OrderDir = Literal["asc", "desc"]


@dataclass(frozen=True)
class ListParams:
    """Parametrii de listare deja validați/coerciți de stratul de schemă."""
    page: Optional[int] = None
    limit: Optional[int] = None
    search: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None


@dataclass
class ListingQuery:
    conditions: List[ColumnElement[bool]] = field(default_factory=list)
    order_by: List[Any] = field(default_factory=list)
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    sort_by: str = DEFAULT_SORT_BY
    sort_order: OrderDir = DEFAULT_SORT_ORDER

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_condition(columns: List[Any], term: str) -> ColumnElement[bool]:
    """Substring case-insensitive, OR între coloane (nu condiții AND independente)."""
    pattern = f"%{_escape_like(term.lower())}%"
    return or_(*(func.lower(col).like(pattern, escape="\\") for col in columns))


def _window(params: ListParams) -> tuple[int, int]:
    return params.page or DEFAULT_PAGE, params.limit or DEFAULT_LIMIT


_PRODUCT_SORT_COLUMNS: Dict[str, Any] = {
    "name": Product.name,
    "price": Product.price,
    "createdAt": Product.created_at,
    "updatedAt": Product.updated_at,
}


def build_product_query(params: ListParams) -> ListingQuery:
    conditions: List[ColumnElement[bool]] = []
    if params.search:
        conditions.append(search_condition([Product.name, Product.description], params.search))
    if params.category:
        conditions.append(Product.category_id == params.category.lower())
    if params.status:
        conditions.append(Product.status == params.status)

    sort_by = params.sort_by or DEFAULT_SORT_BY
    sort_order: OrderDir = "asc" if params.sort_order == "asc" else "desc"
    col = _PRODUCT_SORT_COLUMNS.get(sort_by, Product.created_at)
    # tiebreaker pe id (aceeași direcție) pentru pagini stabile
    order_by = [col.asc(), Product.id.asc()] if sort_order == "asc" else [col.desc(), Product.id.desc()]

    page, limit = _window(params)
    return ListingQuery(
        conditions=conditions,
        order_by=order_by,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )


def build_category_query(params: ListParams) -> ListingQuery:
    """Categorii: doar `search`, sortare fixă (cele mai noi primele)."""
    conditions: List[ColumnElement[bool]] = []
    if params.search:
        conditions.append(search_condition([Category.name, Category.description], params.search))
    page, limit = _window(params)
    return ListingQuery(
        conditions=conditions,
        order_by=[Category.created_at.desc(), Category.id.desc()],
        page=page,
        limit=limit,
    )


def paginate(total_items: int, page: int, limit: int) -> PaginationMeta:
    total_pages = math.ceil(total_items / limit) if limit else 0
    return PaginationMeta(
        current_page=page,
        total_pages=total_pages,
        total_items=total_items,
        limit=limit,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
    )
