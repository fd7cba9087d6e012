"""
Catalog entities: Category → SubCategory → Item.

Tax columns on every level follow the same rule: when tax_applicability is
false, tax and tax_type are NULL; when true, both are set. A SubCategory's
tax columns are copied from its Category at creation time and are
independent afterwards — nothing here links them live.

An Item hangs off exactly one owner: a Category directly or a SubCategory.
"""

import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


# ── Enums (stored as strings for readability + migration safety) ────────────


class TaxType:
    PERCENTAGE = "percentage"
    FIXED = "fixed"

    ALL = (PERCENTAGE, FIXED)


class RecordKind:
    CATEGORY = "category"
    SUB_CATEGORY = "sub_category"
    ITEM = "item"


# Shared CHECK expressions: tax fields present iff applicable
_TAX_FIELDS_CHECK = (
    "(tax_applicability AND tax IS NOT NULL AND tax_type IS NOT NULL) "
    "OR (NOT tax_applicability AND tax IS NULL AND tax_type IS NULL)"
)
_TAX_RANGE_CHECK = "tax IS NULL OR tax >= 0"


class TaxFieldsMixin:
    tax_applicability: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )
    # Percentage (0–100) or a fixed amount, depending on tax_type
    tax: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 4), nullable=True)
    tax_type: Mapped[Optional[str]] = mapped_column(
        String(16), nullable=True, comment="percentage | fixed"
    )


# ── Models ──────────────────────────────────────────────────────────────────


class Category(Base, UUIDPrimaryKeyMixin, TimestampMixin, TaxFieldsMixin):
    """Top-level menu section, e.g. 'Main Course'."""

    __tablename__ = "categories"
    __table_args__ = (
        CheckConstraint(_TAX_FIELDS_CHECK, name="tax_fields"),
        CheckConstraint(_TAX_RANGE_CHECK, name="tax_range"),
    )

    name: Mapped[str] = mapped_column(String(256), nullable=False, unique=True)
    image: Mapped[str] = mapped_column(String(1024), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    # Relationships — no delete cascades; deletion is not supported
    sub_categories: Mapped[list["SubCategory"]] = relationship(
        "SubCategory", back_populates="category"
    )
    items: Mapped[list["Item"]] = relationship("Item", back_populates="category")

    def __repr__(self) -> str:
        return f"<Category name={self.name!r}>"


class SubCategory(Base, UUIDPrimaryKeyMixin, TimestampMixin, TaxFieldsMixin):
    """A section under a Category, e.g. 'Pasta' under 'Main Course'."""

    __tablename__ = "sub_categories"
    __table_args__ = (
        UniqueConstraint("category_id", "name", name="uq_sub_categories_category_name"),
        CheckConstraint(_TAX_FIELDS_CHECK, name="tax_fields"),
        CheckConstraint(_TAX_RANGE_CHECK, name="tax_range"),
    )

    # Immutable after creation
    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    image: Mapped[str] = mapped_column(String(1024), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    # Relationships
    category: Mapped["Category"] = relationship(
        "Category", back_populates="sub_categories"
    )
    items: Mapped[list["Item"]] = relationship("Item", back_populates="sub_category")

    def __repr__(self) -> str:
        return f"<SubCategory name={self.name!r} category_id={self.category_id}>"


class Item(Base, UUIDPrimaryKeyMixin, TimestampMixin, TaxFieldsMixin):
    """
    A sellable menu item.

    total_amount is derived: round2(base_amount - discount). It is written by
    the catalog handlers on every create/update and never taken from a request.
    """

    __tablename__ = "items"
    __table_args__ = (
        # NULL owner columns never collide, so these are two disjoint scopes
        UniqueConstraint("category_id", "name", name="uq_items_category_name"),
        UniqueConstraint("sub_category_id", "name", name="uq_items_sub_category_name"),
        CheckConstraint(
            "(category_id IS NULL) <> (sub_category_id IS NULL)", name="single_owner"
        ),
        CheckConstraint(
            "base_amount >= 0 AND discount >= 0 AND discount <= base_amount",
            name="amounts",
        ),
        CheckConstraint(_TAX_FIELDS_CHECK, name="tax_fields"),
        CheckConstraint(_TAX_RANGE_CHECK, name="tax_range"),
    )

    # Exactly one of these is set
    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    sub_category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("sub_categories.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    image: Mapped[str] = mapped_column(String(1024), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    # Money columns (DECIMAL for financial precision — never float)
    base_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    discount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0"), server_default="0"
    )
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    # Relationships
    category: Mapped[Optional["Category"]] = relationship(
        "Category", back_populates="items"
    )
    sub_category: Mapped[Optional["SubCategory"]] = relationship(
        "SubCategory", back_populates="items"
    )

    def __repr__(self) -> str:
        return f"<Item name={self.name!r} total_amount={self.total_amount}>"
