# catalog_api/schemas/category.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic_core import PydanticCustomError

from catalog_api.schemas.common import CamelModel, iso_utc, strip_name


class CategoryCreate(BaseModel):
    """Payload pentru creare categorie."""
    name: str = Field(min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, max_length=200)

    @field_validator("name")
    @classmethod
    def _name_normalize(cls, v: str) -> str:
        v = strip_name(v)
        if not v:
            raise PydanticCustomError("string_too_short", "Category name is required")
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "name": "Electronics",
                    "description": "Gadgets, audio and accessories.",
                }
            ]
        },
    )


class CategoryUpdate(BaseModel):
    """Payload pentru update; toate câmpurile sunt opționale (patch parțial)."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, max_length=200)

    @field_validator("name")
    @classmethod
    def _name_normalize(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = strip_name(v)
        if not v:
            raise PydanticCustomError("string_too_short", "Category name is required")
        return v


class CategorySummary(CamelModel):
    """Categoria "populată" în răspunsurile de produs."""
    id: str
    name: str
    description: Optional[str] = None


class CategoryRead(CamelModel):
    """Răspuns pentru categorie."""
    id: str
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def _ts(self, v: datetime) -> str:
        return iso_utc(v)
