# catalog_api/crud/category.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from catalog_api.crud.base import commit, fetch_page
from catalog_api.models.base import utcnow
from catalog_api.models.category import Category
from catalog_api.services.listing import ListingQuery

# câmpuri care pot fi modificate prin update (allow-list)
PATCHABLE_FIELDS = ("name", "description")


# -------------------------- Reads / listing --------------------------

def list_categories(db: Session, query: ListingQuery) -> Tuple[List[Category], int]:
    return fetch_page(db, Category, query)


def get(db: Session, category_id: str) -> Optional[Category]:
    return db.get(Category, category_id)


# -------------------------- Mutations --------------------------

def create(db: Session, data: Dict[str, Any]) -> Category:
    """Unicitatea numelui e impusă de store (uq_categories_name) → DuplicateKeyError."""
    obj = Category(name=data.get("name"), description=data.get("description"))
    db.add(obj)
    commit(db, obj)
    return obj


def update(db: Session, obj: Category, patch: Dict[str, Any]) -> Category:
    """Aplică doar câmpurile prezente în patch și permise; `updated_at` e reîmprospătat mereu."""
    for field in PATCHABLE_FIELDS:
        if field in patch:
            setattr(obj, field, patch[field])
    obj.updated_at = utcnow()
    commit(db, obj)
    return obj


def delete(db: Session, obj: Category) -> None:
    # fără gardă pentru produsele care referă categoria
    db.delete(obj)
    db.commit()
