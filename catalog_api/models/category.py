# catalog_api/models/category.py
from __future__ import annotations

from typing import Any, Dict, List

from sqlalchemy import Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from catalog_api.database import Base
from catalog_api.models.base import DocumentMixin


class Category(DocumentMixin, Base):
    """
    Tabelul 'categories'.
    - Unicitate pe `name` impusă de store (UNIQUE, case-sensitive) → conflict la insert/update.
    - Ștergerea nu e blocată de produsele care o referă (referință non-owning).
    """
    __tablename__ = "categories"
    __table_args__ = (
        UniqueConstraint("name", name="uq_categories_name"),
        Index("ix_categories_created_at", "created_at"),
    )
    __wire_names__ = {"created_at": "createdAt", "updated_at": "updatedAt"}

    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(String, nullable=True)

    def collect_violations(self) -> List[Dict[str, Any]]:
        if not self.name:
            return [self._violation("name", "Path `name` is required.")]
        return []

    def __repr__(self) -> str:  # pragma: no cover
        name_preview = (self.name[:32] + "…") if self.name and len(self.name) > 33 else self.name
        return f"<Category id={self.id!r} name={name_preview!r}>"
