# catalog_api/routers/category.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from catalog_api.core.error_handler import ErrorContextRoute
from catalog_api.database import get_db
from catalog_api.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from catalog_api.schemas.common import ApiResponse, LimitInt, ObjectIdStr, PagedResponse, PageInt
from catalog_api.services import category as service
from catalog_api.services.listing import ListParams

router = APIRouter(prefix="/category", tags=["categories"], route_class=ErrorContextRoute)


@router.post(
    "",
    response_model=ApiResponse[CategoryRead],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create category",
)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    data = service.create_category(db, payload)
    return ApiResponse[CategoryRead](message="Category created successfully", data=data)


@router.get(
    "",
    response_model=PagedResponse[CategoryRead],
    response_model_exclude_none=True,
    summary="List categories (search/paginate, newest first)",
)
def list_categories(
    response: Response,
    page: Optional[PageInt] = Query(default=None, description="Pagina (>= 1), implicit 1"),
    limit: Optional[LimitInt] = Query(default=None, description="Elemente pe pagină (>= 1), implicit 10"),
    search: Optional[str] = Query(default=None, description="Substring case-insensitive în name sau description"),
    db: Session = Depends(get_db),
):
    items, pagination = service.list_categories(db, ListParams(page=page, limit=limit, search=search))
    # antet util pentru UI-uri/tabele
    response.headers["X-Total-Count"] = str(pagination.total_items)
    return PagedResponse[CategoryRead](
        message="Categories retrieved successfully",
        data=items,
        pagination=pagination,
    )


@router.get(
    "/{id}",
    response_model=ApiResponse[CategoryRead],
    response_model_exclude_none=True,
    summary="Get category by id",
)
def get_category(id: ObjectIdStr, db: Session = Depends(get_db)):
    data = service.get_category(db, id)
    return ApiResponse[CategoryRead](message="Category retrieved successfully", data=data)


@router.put(
    "/{id}",
    response_model=ApiResponse[CategoryRead],
    response_model_exclude_none=True,
    summary="Update category (partial)",
)
def update_category(id: ObjectIdStr, payload: CategoryUpdate, db: Session = Depends(get_db)):
    data = service.update_category(db, id, payload)
    return ApiResponse[CategoryRead](message="Category updated successfully", data=data)


@router.delete(
    "/{id}",
    response_model=ApiResponse[CategoryRead],
    response_model_exclude_none=True,
    summary="Delete category",
    description="Nu verifică produsele care referă categoria; acestea rămân neschimbate.",
)
def delete_category(id: ObjectIdStr, db: Session = Depends(get_db)):
    service.delete_category(db, id)
    return ApiResponse[CategoryRead](message="Category deleted successfully")


# ---------- Gărzi pentru id lipsă (răspuns ad hoc, în afara error handler-ului) ----------

def _missing_id() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Category ID is required"},
    )


@router.put("", include_in_schema=False)
def update_category_without_id():
    return _missing_id()


@router.delete("", include_in_schema=False)
def delete_category_without_id():
    return _missing_id()
