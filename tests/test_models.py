# tests/test_models.py
from __future__ import annotations

from typing import Iterator

import pytest
from sqlalchemy.orm import Session

from catalog_api.core.errors import DuplicateKeyError, StoreCastError, StoreValidationError
from catalog_api.crud import category as category_crud
from catalog_api.crud import product as product_crud
from catalog_api.database import build_engine, build_session_factory, create_all
from catalog_api.models.category import Category
from catalog_api.models.product import Product
from tests.conftest import make_settings


@pytest.fixture()
def db() -> Iterator[Session]:
    engine = build_engine(make_settings())
    create_all(engine)
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


def _product(category: Category, **overrides) -> Product:
    values = dict(
        name="Desk Lamp",
        description="LED",
        price=10.0,
        image="https://x.io/lamp.png",
        product_code="abc1234-0a0",
        category_id=category.id,
        category_name=category.name,
    )
    values.update(overrides)
    return Product(**values)


def test_ids_and_timestamps_are_assigned(db: Session):
    cat = category_crud.create(db, {"name": "Lighting"})
    assert len(cat.id) == 24
    assert cat.created_at is not None and cat.updated_at is not None


def test_malformed_id_is_cast_error():
    with pytest.raises(StoreCastError) as ei:
        Product(category_id="nope")
    assert ei.value.field == "categoryId"


def test_store_validators_run_before_flush(db: Session):
    cat = category_crud.create(db, {"name": "Lighting"})
    db.add(_product(cat, price=-1, discount=150, image="ftp://x", status="Lost"))
    with pytest.raises(StoreValidationError) as ei:
        db.flush()
    fields = {v["field"] for v in ei.value.violations}
    assert fields == {"price", "discount", "image", "status"}
    db.rollback()


def test_non_finite_numbers_rejected_before_flush(db: Session):
    cat = category_crud.create(db, {"name": "Lighting"})
    db.add(_product(cat, price=float("inf"), discount=float("nan")))
    with pytest.raises(StoreValidationError) as ei:
        db.flush()
    assert {v["field"] for v in ei.value.violations} == {"price", "discount"}
    db.rollback()


def test_required_fields_use_wire_names(db: Session):
    cat = category_crud.create(db, {"name": "Lighting"})
    db.add(_product(cat, product_code=None))
    with pytest.raises(StoreValidationError) as ei:
        db.flush()
    assert ei.value.violations[0]["field"] == "productCode"
    db.rollback()


def test_product_code_unique_index(db: Session):
    cat = category_crud.create(db, {"name": "Lighting"})
    product_crud.create(db, {"name": "A", "description": "a", "price": 1, "image": "https://x.io/a",
                             "product_code": "dup-code", "category_id": cat.id, "category_name": cat.name})
    with pytest.raises(DuplicateKeyError) as ei:
        product_crud.create(db, {"name": "B", "description": "b", "price": 1, "image": "https://x.io/b",
                                 "product_code": "dup-code", "category_id": cat.id, "category_name": cat.name})
    assert (ei.value.field, ei.value.value) == ("productCode", "dup-code")


def test_same_name_in_category_is_not_a_store_constraint(db: Session):
    cat = category_crud.create(db, {"name": "Lighting"})
    db.add_all([_product(cat, product_code="c1"), _product(cat, product_code="c2")])
    db.commit()
    assert product_crud.find_by_name_in_category(db, "Desk Lamp", cat.id) is not None


def test_category_relationship_is_view_only(db: Session):
    cat = category_crud.create(db, {"name": "Lighting"})
    prod = _product(cat)
    db.add(prod)
    db.commit()
    assert prod.category.name == "Lighting"

    category_crud.delete(db, cat)
    db.expire_all()
    assert prod.category is None
    assert prod.category_name == "Lighting"
