"""
Category, SubCategory and Item schemas — request and response shapes for the API.

Request bodies only check shape (types, non-empty names). Tax and amount
rules live in app.services.pricing and run against the merged record, so
they are not duplicated here.
"""

import uuid
from decimal import Decimal
from typing import Optional

from pydantic import Field

from app.schemas.common import Money, ParentSummary, PatchSchema, TimestampedSchema
from app.services.pricing.patch import AmountPatch, OwnerPatch, TaxPatch

_TEXT_FIELDS = ("name", "image", "description")


# ── Shared request pieces ────────────────────────────────────────────────────


class _TaxInput(PatchSchema):
    tax_applicability: Optional[bool] = None
    tax: Optional[Decimal] = None
    tax_type: Optional[str] = None

    def tax_patch(self) -> TaxPatch:
        return TaxPatch(**self.patch_values("tax_applicability", "tax", "tax_type"))

    def text_changes(self) -> dict:
        """name / image / description as sent (explicit nulls included)."""
        return {
            name: getattr(self, name)
            for name in _TEXT_FIELDS
            if name in self.model_fields_set
        }


class _RecordCreate(_TaxInput):
    name: str = Field(..., min_length=1, max_length=256)
    image: str = Field(..., min_length=1, max_length=1024)
    description: str = Field(..., min_length=1)


class _RecordUpdate(_TaxInput):
    name: Optional[str] = Field(default=None, min_length=1, max_length=256)
    image: Optional[str] = Field(default=None, min_length=1, max_length=1024)
    description: Optional[str] = Field(default=None, min_length=1)


class _ItemFields(PatchSchema):
    base_amount: Optional[Decimal] = None
    discount: Optional[Decimal] = None
    category_id: Optional[str] = None
    sub_category_id: Optional[str] = None

    def amount_patch(self) -> AmountPatch:
        return AmountPatch(**self.patch_values("base_amount", "discount"))

    def owner_patch(self) -> OwnerPatch:
        return OwnerPatch(**self.patch_values("category_id", "sub_category_id"))


# ── Category ─────────────────────────────────────────────────────────────────


class CategoryCreate(_RecordCreate):
    """taxApplicability defaults to false when omitted."""


class CategoryUpdate(_RecordUpdate):
    pass


class CategoryResponse(TimestampedSchema):
    name: str
    image: str
    description: str
    tax_applicability: bool
    tax: Optional[Money] = None
    tax_type: Optional[str] = None


# ── SubCategory ──────────────────────────────────────────────────────────────


class SubCategoryCreate(_RecordCreate):
    """
    Omitted tax fields are inherited from the parent Category.
    The parent comes from the URL (POST /api/subcategories/{categoryId}).
    """


class SubCategoryUpdate(_RecordUpdate):
    """categoryId is immutable and ignored if sent."""


class SubCategoryResponse(CategoryResponse):
    category_id: uuid.UUID
    category: Optional[ParentSummary] = None


# ── Item ─────────────────────────────────────────────────────────────────────


class ItemCreate(_RecordCreate, _ItemFields):
    """
    Exactly one of categoryId / subCategoryId.
    totalAmount is derived; a value sent by the caller is ignored.
    taxApplicability is required, and checked by the tax rules so a
    missing value gets the same message as an explicit null.
    """

    base_amount: Decimal


class ItemUpdate(_RecordUpdate, _ItemFields):
    pass


class ItemResponse(CategoryResponse):
    base_amount: Money
    discount: Money
    total_amount: Money
    category_id: Optional[uuid.UUID] = None
    sub_category_id: Optional[uuid.UUID] = None
    category: Optional[ParentSummary] = None
    sub_category: Optional[ParentSummary] = None
