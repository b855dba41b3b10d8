"""Create categories and products tables.

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-16 10:00:00.000000
"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# --- Alembic identifiers ---
revision: str = "3f1c2a9d7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

T_CAT = "categories"
T_PROD = "products"


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    # 1) categories (name unic la nivel de store)
    op.create_table(
        T_CAT,
        sa.Column("id", sa.CHAR(24), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("name", name="uq_categories_name"),
    )
    op.create_index("ix_categories_created_at", T_CAT, ["created_at"])

    # 2) products: category_id fără FK (referință non-owning)
    op.create_table(
        T_PROD,
        sa.Column("id", sa.CHAR(24), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("discount", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("image", sa.String(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="In Stock"),
        sa.Column("product_code", sa.String(64), nullable=False),
        sa.Column("category_id", sa.CHAR(24), nullable=False),
        sa.Column("category_name", sa.String(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("product_code", name="uq_products_product_code"),
        sa.CheckConstraint("price >= 0", name="ck_products_price_nonnegative"),
        sa.CheckConstraint("discount >= 0 AND discount <= 100", name="ck_products_discount_range"),
    )
    op.create_index("ix_products_category_id", T_PROD, ["category_id"])
    op.create_index("ix_products_status", T_PROD, ["status"])
    op.create_index("ix_products_created_at", T_PROD, ["created_at"])
    op.create_index("ix_products_name_lower", T_PROD, [sa.text("lower(name)")])


def downgrade() -> None:
    op.drop_index("ix_products_name_lower", table_name=T_PROD)
    op.drop_index("ix_products_created_at", table_name=T_PROD)
    op.drop_index("ix_products_status", table_name=T_PROD)
    op.drop_index("ix_products_category_id", table_name=T_PROD)
    op.drop_table(T_PROD)
    op.drop_index("ix_categories_created_at", table_name=T_CAT)
    op.drop_table(T_CAT)
