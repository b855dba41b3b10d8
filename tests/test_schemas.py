# tests/test_schemas.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import TypeAdapter, ValidationError

from catalog_api.schemas.category import CategoryCreate, CategoryUpdate
from catalog_api.schemas.common import LimitInt, ObjectIdStr, PageInt, iso_utc
from catalog_api.schemas.product import ProductCreate, ProductUpdate

CAT_ID = "66b1f0c2a4e5d6f7a8b9c0d1"


def _errors(exc: ValidationError) -> dict:
    return {".".join(map(str, e["loc"])): e for e in exc.errors()}


def test_category_name_stripped():
    assert CategoryCreate(name="  Pet   Food ").name == "Pet   Food"


def test_product_numbers_must_be_finite():
    base = {"name": "Lamp", "description": "LED", "image": "http://x.io/a.png", "categoryId": CAT_ID}
    with pytest.raises(ValidationError) as ei:
        ProductCreate.model_validate({**base, "price": float("inf"), "discount": float("nan")})
    assert set(_errors(ei.value)) == {"price", "discount"}
    with pytest.raises(ValidationError):
        ProductUpdate.model_validate({"price": float("inf")})


def test_category_name_blank_rejected():
    with pytest.raises(ValidationError) as ei:
        CategoryCreate(name="   ")
    assert _errors(ei.value)["name"]["msg"] == "Category name is required"


def test_category_update_tracks_present_fields():
    patch = CategoryUpdate(description="x").model_dump(exclude_unset=True)
    assert patch == {"description": "x"}


def test_product_create_defaults_and_alias():
    p = ProductCreate.model_validate(
        {"name": " Desk Lamp ", "description": "LED", "price": 10, "image": "http://x.io/a.png", "categoryId": CAT_ID.upper()}
    )
    assert p.name == "Desk Lamp"
    assert p.discount == 0
    assert p.status == "In Stock"
    assert p.category_id == CAT_ID
    # URL-ul rămâne neschimbat (fără normalizare)
    assert p.image == "http://x.io/a.png"


def test_product_create_collects_all_errors():
    with pytest.raises(ValidationError) as ei:
        ProductCreate.model_validate({"price": "12", "discount": -1, "status": "Gone", "image": "nope"})
    errs = _errors(ei.value)
    assert {"name", "description", "price", "discount", "status", "image", "categoryId"} <= set(errs)
    assert errs["image"]["msg"] == "Image must be a valid URL"
    assert errs["categoryId"]["type"] == "missing"


def test_product_update_is_partial():
    patch = ProductUpdate.model_validate({"price": 5.5, "categoryId": CAT_ID}).model_dump(exclude_unset=True)
    assert patch == {"price": 5.5, "category_id": CAT_ID}


def test_object_id_type():
    ta = TypeAdapter(ObjectIdStr)
    assert ta.validate_python(CAT_ID.upper()) == CAT_ID
    with pytest.raises(ValidationError) as ei:
        ta.validate_python("abc")
    assert ei.value.errors()[0]["msg"] == "Invalid ObjectId format"


@pytest.mark.parametrize("raw,expected", [("1", 1), ("42", 42), (7, 7)])
def test_page_accepts_digits(raw, expected):
    assert TypeAdapter(PageInt).validate_python(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "0", "-3", "1.5", "", " 2"])
def test_page_rejects_non_positive_or_non_digits(raw):
    with pytest.raises(ValidationError):
        TypeAdapter(PageInt).validate_python(raw)


def test_limit_message():
    with pytest.raises(ValidationError) as ei:
        TypeAdapter(LimitInt).validate_python("ten")
    assert ei.value.errors()[0]["msg"] == "Limit must be a positive number"


def test_iso_utc():
    assert iso_utc(datetime(2024, 5, 1, 12, 30, 0, 123456)) == "2024-05-01T12:30:00.123Z"
    aware = datetime(2024, 5, 1, 15, 30, tzinfo=timezone(timedelta(hours=3)))
    assert iso_utc(aware) == "2024-05-01T12:30:00.000Z"
