# catalog_api/routers/product.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from catalog_api.core.error_handler import ErrorContextRoute
from catalog_api.database import get_db
from catalog_api.schemas.common import ApiResponse, CamelModel, LimitInt, ObjectIdStr, PageInt, PaginationMeta
from catalog_api.schemas.product import (
    ProductCreate,
    ProductFilters,
    ProductRead,
    ProductSort,
    ProductStatus,
    ProductUpdate,
    SortField,
    SortOrder,
)
from catalog_api.services import product as service
from catalog_api.services.listing import ListParams

router = APIRouter(prefix="/product", tags=["products"], route_class=ErrorContextRoute)


class ProductPage(CamelModel):
    """Răspuns paginat: listă + meta + filtrele și sortarea aplicate."""
    success: bool = True
    message: str
    data: List[ProductRead]
    pagination: PaginationMeta
    filters: ProductFilters
    sort: ProductSort


@router.post(
    "",
    response_model=ApiResponse[ProductRead],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product",
)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    data = service.create_product(db, payload)
    return ApiResponse[ProductRead](message="Product created successfully", data=data)


@router.get(
    "",
    response_model=ProductPage,
    response_model_exclude_none=True,
    summary="List products with search, filtering, pagination & sorting",
)
def list_products(
    response: Response,
    page: Optional[PageInt] = Query(default=None, description="Pagina (>= 1), implicit 1"),
    limit: Optional[LimitInt] = Query(default=None, description="Elemente pe pagină (>= 1), implicit 10"),
    search: Optional[str] = Query(default=None, description="Substring case-insensitive în name sau description"),
    category: Optional[ObjectIdStr] = Query(default=None, description="Filtru exact pe categoryId"),
    status_: Optional[ProductStatus] = Query(default=None, alias="status"),
    sort_by: Optional[SortField] = Query(default=None, alias="sortBy", description="Implicit createdAt"),
    sort_order: Optional[SortOrder] = Query(default=None, alias="sortOrder", description="Implicit desc"),
    db: Session = Depends(get_db),
):
    """
    Returnează produse paginate cu filtre opționale + sortare.
    - `search`: substring case-insensitive în `name` SAU `description`
    - `category`: produsele unei categorii
    - `status`: `In Stock` | `Stock Out`
    - `sortBy`: `name|price|createdAt|updatedAt`, `sortOrder`: `asc|desc`
    """
    params = ListParams(
        page=page,
        limit=limit,
        search=search,
        category=category,
        status=status_,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    listing = service.list_products(db, params)
    # Header util pentru UI-uri/tabele
    response.headers["X-Total-Count"] = str(listing.pagination.total_items)
    return ProductPage(
        message="Products retrieved successfully",
        data=listing.items,
        pagination=listing.pagination,
        filters=listing.filters,
        sort=listing.sort,
    )


@router.get(
    "/{id}",
    response_model=ApiResponse[ProductRead],
    response_model_exclude_none=True,
    summary="Get a product by id",
)
def get_product(id: ObjectIdStr, db: Session = Depends(get_db)):
    data = service.get_product(db, id)
    return ApiResponse[ProductRead](message="Product retrieved successfully", data=data)


@router.put(
    "/{id}",
    response_model=ApiResponse[ProductRead],
    response_model_exclude_none=True,
    summary="Update a product (partial)",
)
def update_product(id: ObjectIdStr, payload: ProductUpdate, db: Session = Depends(get_db)):
    data = service.update_product(db, id, payload)
    return ApiResponse[ProductRead](message="Product updated successfully", data=data)


@router.delete(
    "/{id}",
    response_model=ApiResponse[ProductRead],
    response_model_exclude_none=True,
    summary="Delete a product",
)
def delete_product(id: ObjectIdStr, db: Session = Depends(get_db)):
    service.delete_product(db, id)
    return ApiResponse[ProductRead](message="Product deleted successfully")
