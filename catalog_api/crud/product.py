# catalog_api/crud/product.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from catalog_api.crud.base import commit, fetch_page
from catalog_api.models.base import utcnow
from catalog_api.models.category import Category
from catalog_api.models.product import Product
from catalog_api.services.listing import ListingQuery

# allow-list pentru patch; `product_code`, `id` și timestamps nu pot fi suprascrise din request
PATCHABLE_FIELDS = ("name", "description", "price", "discount", "image", "status")
_CREATE_FIELDS = PATCHABLE_FIELDS + ("product_code", "category_id", "category_name")


def list_products(db: Session, query: ListingQuery) -> Tuple[List[Product], int]:
    """Listează produse + total; categoria e încărcată eager (selectinload) pentru răspuns."""
    return fetch_page(db, Product, query, selectinload(Product.category))


def get(db: Session, product_id: str) -> Optional[Product]:
    """Returnează produsul după ID (sau None)."""
    return db.get(Product, product_id)


def find_by_name_in_category(db: Session, name: str, category_id: str) -> Optional[Product]:
    """Verificare app-level pentru unicitatea (name, category); nu există index pe această pereche."""
    q = select(Product).where(Product.name == name, Product.category_id == category_id).limit(1)
    return db.execute(q).scalars().first()


def create(db: Session, data: Dict[str, Any]) -> Product:
    """Creează produs; product_code duplicat → DuplicateKeyError (index unic)."""
    # None → lăsăm default-urile coloanelor (discount=0, status="In Stock")
    obj = Product(**{k: v for k, v in data.items() if k in _CREATE_FIELDS and v is not None})
    db.add(obj)
    commit(db, obj)
    return obj


def update(db: Session, obj: Product, patch: Dict[str, Any], *, category: Optional[Category] = None) -> Product:
    """
    Aplică câmp cu câmp valorile **prezente** în patch (și permise).
    Dacă se schimbă categoria, resincronizează și `category_name`.
    Validatorii de câmp ai modelului rulează din nou la flush.
    """
    for field in PATCHABLE_FIELDS:
        if field in patch:
            setattr(obj, field, patch[field])
    if category is not None:
        obj.category_id = category.id
        obj.category_name = category.name
    obj.updated_at = utcnow()
    commit(db, obj)
    return obj


def delete(db: Session, obj: Product) -> None:
    """Șterge un produs existent."""
    db.delete(obj)
    db.commit()
