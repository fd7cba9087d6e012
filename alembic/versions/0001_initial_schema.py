"""Initial schema — categories, sub_categories, items

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TAX_FIELDS_CHECK = (
    "(tax_applicability AND tax IS NOT NULL AND tax_type IS NOT NULL) "
    "OR (NOT tax_applicability AND tax IS NULL AND tax_type IS NULL)"
)
TAX_RANGE_CHECK = "tax IS NULL OR tax >= 0"


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def _tax_columns() -> list[sa.Column]:
    return [
        sa.Column(
            "tax_applicability", sa.Boolean, nullable=False, server_default=sa.false()
        ),
        sa.Column("tax", sa.Numeric(12, 4), nullable=True),
        sa.Column("tax_type", sa.String(16), nullable=True, comment="percentage | fixed"),
    ]


def upgrade() -> None:
    # ── categories ────────────────────────────────────────────────────────────
    op.create_table(
        "categories",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("image", sa.String(1024), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        *_tax_columns(),
        *_timestamps(),
        sa.UniqueConstraint("name", name="uq_categories_name"),
        sa.CheckConstraint(TAX_FIELDS_CHECK, name="ck_categories_tax_fields"),
        sa.CheckConstraint(TAX_RANGE_CHECK, name="ck_categories_tax_range"),
    )
    op.create_index("ix_categories_created_at", "categories", ["created_at"])

    # ── sub_categories ────────────────────────────────────────────────────────
    op.create_table(
        "sub_categories",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column(
            "category_id",
            sa.Uuid,
            sa.ForeignKey(
                "categories.id",
                ondelete="RESTRICT",
                name="fk_sub_categories_category_id_categories",
            ),
            nullable=False,
        ),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("image", sa.String(1024), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        *_tax_columns(),
        *_timestamps(),
        sa.UniqueConstraint(
            "category_id", "name", name="uq_sub_categories_category_name"
        ),
        sa.CheckConstraint(TAX_FIELDS_CHECK, name="ck_sub_categories_tax_fields"),
        sa.CheckConstraint(TAX_RANGE_CHECK, name="ck_sub_categories_tax_range"),
    )
    op.create_index(
        "ix_sub_categories_category_id", "sub_categories", ["category_id"]
    )
    op.create_index("ix_sub_categories_created_at", "sub_categories", ["created_at"])

    # ── items ─────────────────────────────────────────────────────────────────
    op.create_table(
        "items",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column(
            "category_id",
            sa.Uuid,
            sa.ForeignKey(
                "categories.id",
                ondelete="RESTRICT",
                name="fk_items_category_id_categories",
            ),
            nullable=True,
        ),
        sa.Column(
            "sub_category_id",
            sa.Uuid,
            sa.ForeignKey(
                "sub_categories.id",
                ondelete="RESTRICT",
                name="fk_items_sub_category_id_sub_categories",
            ),
            nullable=True,
        ),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("image", sa.String(1024), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        *_tax_columns(),
        sa.Column("base_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("discount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        *_timestamps(),
        # Two disjoint name scopes: NULL owner columns never collide
        sa.UniqueConstraint("category_id", "name", name="uq_items_category_name"),
        sa.UniqueConstraint(
            "sub_category_id", "name", name="uq_items_sub_category_name"
        ),
        sa.CheckConstraint(
            "(category_id IS NULL) <> (sub_category_id IS NULL)",
            name="ck_items_single_owner",
        ),
        sa.CheckConstraint(
            "base_amount >= 0 AND discount >= 0 AND discount <= base_amount",
            name="ck_items_amounts",
        ),
        sa.CheckConstraint(TAX_FIELDS_CHECK, name="ck_items_tax_fields"),
        sa.CheckConstraint(TAX_RANGE_CHECK, name="ck_items_tax_range"),
    )
    op.create_index("ix_items_category_id", "items", ["category_id"])
    op.create_index("ix_items_sub_category_id", "items", ["sub_category_id"])
    op.create_index("ix_items_created_at", "items", ["created_at"])


def downgrade() -> None:
    op.drop_table("items")
    op.drop_table("sub_categories")
    op.drop_table("categories")
