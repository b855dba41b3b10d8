# catalog_api/models/product.py
from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Optional

from sqlalchemy import CHAR, CheckConstraint, Float, Index, String, UniqueConstraint, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from catalog_api.database import Base
from catalog_api.models.base import DocumentMixin
from catalog_api.models.category import Category

PRODUCT_STATUSES = ("In Stock", "Stock Out")
DEFAULT_STATUS = "In Stock"

IMAGE_URL_RE = re.compile(r"^https?://.+$")


class Product(DocumentMixin, Base):
    """
    Tabelul 'products'.

    Note:
    - `product_code` este UNIC la nivel de store (generat la creare, imuabil).
    - NU există unicitate pe (name, category_id): regula e aplicată în serviciu, înainte de insert.
    - `category_id` e referință non-owning: fără FOREIGN KEY, deci ștergerea categoriei nu e blocată
      și nu se propagă; `category_name` e o copie denormalizată la momentul scrierii.
    - `price` >= 0 și `discount` în [0, 100] și ca CHECK la nivel DB.
    """
    __tablename__ = "products"
    __table_args__ = (
        UniqueConstraint("product_code", name="uq_products_product_code"),
        Index("ix_products_category_id", "category_id"),
        Index("ix_products_status", "status"),
        Index("ix_products_created_at", "created_at"),
        # căutări case-insensitive pe lower(name)
        Index("ix_products_name_lower", func.lower(text("name"))),
        CheckConstraint("price >= 0", name="price_nonnegative"),
        CheckConstraint("discount >= 0 AND discount <= 100", name="discount_range"),
    )
    __wire_names__ = {
        "product_code": "productCode",
        "category_id": "categoryId",
        "category_name": "categoryName",
        "created_at": "createdAt",
        "updated_at": "updatedAt",
    }

    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(String, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    discount: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    image: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=DEFAULT_STATUS)
    product_code: Mapped[str] = mapped_column(String(64), nullable=False)
    category_id: Mapped[str] = mapped_column(CHAR(24), nullable=False)
    category_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    # "populate": categoria curentă (None dacă a fost ștearsă între timp)
    category: Mapped[Optional[Category]] = relationship(
        Category,
        primaryjoin=lambda: Category.id == Product.category_id,
        foreign_keys=lambda: [Product.category_id],
        viewonly=True,
        lazy="select",
    )

    @validates("category_id")
    def _validate_category_id(self, key: str, value: Any) -> Any:
        return self._cast_object_id(key, value)

    def collect_violations(self) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        for attr in ("name", "description", "image", "product_code", "category_id"):
            if getattr(self, attr, None) in (None, ""):
                out.append(self._violation(attr, f"Path `{self.wire_name(attr)}` is required."))

        if self.price is None:
            out.append(self._violation("price", "Path `price` is required."))
        elif not math.isfinite(self.price):
            out.append(self._violation("price", f"Path `price` ({self.price}) is not a finite number."))
        elif self.price < 0:
            out.append(self._violation("price", f"Path `price` ({self.price}) is less than minimum allowed value (0)."))

        if self.discount is not None:
            if not math.isfinite(self.discount):
                out.append(self._violation("discount", f"Path `discount` ({self.discount}) is not a finite number."))
            elif self.discount < 0:
                out.append(self._violation("discount", f"Path `discount` ({self.discount}) is less than minimum allowed value (0)."))
            elif self.discount > 100:
                out.append(self._violation("discount", f"Path `discount` ({self.discount}) is more than maximum allowed value (100)."))

        if self.image and not IMAGE_URL_RE.match(self.image):
            out.append(self._violation("image", "Path `image` is invalid."))

        if self.status is not None and self.status not in PRODUCT_STATUSES:
            out.append(self._violation("status", f"`{self.status}` is not a valid enum value for path `status`."))
        return out

    def __repr__(self) -> str:
        # scurtează numele în repr pentru loguri mai curate
        name_preview = (self.name[:32] + "…") if self.name and len(self.name) > 33 else self.name
        return f"<Product id={self.id!r} name={name_preview!r} code={self.product_code!r}>"
