# catalog_api/schemas/product.py
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic_core import PydanticCustomError

from catalog_api.schemas.category import CategorySummary
from catalog_api.schemas.common import CamelModel, ObjectIdStr, UrlStr, iso_utc, strip_name

ProductStatus = Literal["In Stock", "Stock Out"]
SortField = Literal["name", "price", "createdAt", "updatedAt"]
SortOrder = Literal["asc", "desc"]

# strict: JSON-ul trebuie să conțină numere, nu string-uri numerice; 1e400 → inf e respins
Price = Annotated[float, Field(ge=0, strict=True, allow_inf_nan=False)]
Discount = Annotated[float, Field(ge=0, le=100, strict=True, allow_inf_nan=False)]
ProductName = Annotated[str, Field(min_length=1, max_length=100)]
ProductDescription = Annotated[str, Field(min_length=1, max_length=500)]


def _name_strip_nonempty(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = strip_name(v)
    if not v:
        raise PydanticCustomError("string_too_short", "Product name is required")
    return v


class ProductCreate(BaseModel):
    """Payload pentru creare produs."""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "name": "Wireless Headphones",
                    "description": "Over-ear, 30h battery, USB-C",
                    "price": 129.9,
                    "discount": 10,
                    "image": "https://cdn.example.com/img/headphones.png",
                    "status": "In Stock",
                    "categoryId": "66b1f0c2a4e5d6f7a8b9c0d1",
                }
            ]
        },
    )

    name: ProductName
    description: ProductDescription
    price: Price
    discount: Discount = 0
    image: UrlStr
    status: ProductStatus = "In Stock"
    category_id: ObjectIdStr = Field(alias="categoryId")

    @field_validator("name")
    @classmethod
    def _name_normalize(cls, v: Optional[str]) -> Optional[str]:
        return _name_strip_nonempty(v)


class ProductUpdate(BaseModel):
    """Payload pentru update; toate câmpurile sunt opționale (patch parțial)."""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[ProductName] = None
    description: Optional[ProductDescription] = None
    price: Optional[Price] = None
    discount: Optional[Discount] = None
    image: Optional[UrlStr] = None
    status: Optional[ProductStatus] = None
    category_id: Optional[ObjectIdStr] = Field(default=None, alias="categoryId")

    @field_validator("name")
    @classmethod
    def _name_normalize(cls, v: Optional[str]) -> Optional[str]:
        return _name_strip_nonempty(v)


class Pricing(CamelModel):
    original_price: float
    discount_percentage: float
    discount_amount: float
    final_price: float
    savings: float
    has_discount: bool


class ProductRead(CamelModel):
    """Răspuns pentru produs: câmpurile stocate + `pricing` calculat la citire."""
    id: str
    name: str
    description: str
    price: float
    discount: float
    image: str
    status: str
    product_code: str
    category_id: str
    category_name: Optional[str] = None
    category: Optional[CategorySummary] = None
    created_at: datetime
    updated_at: datetime
    pricing: Pricing

    @field_serializer("created_at", "updated_at")
    def _ts(self, v: datetime) -> str:
        return iso_utc(v)


class ProductFilters(BaseModel):
    search: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None


class ProductSort(CamelModel):
    sort_by: SortField
    sort_order: SortOrder
