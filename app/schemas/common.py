"""Shared schema primitives."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from app.services.pricing.patch import UNSET

T = TypeVar("T")

# Decimal in Python, plain JSON number on the wire
Money = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


class BaseSchema(BaseModel):
    """Snake_case attributes, camelCase on the wire (taxApplicability, baseAmount, ...)."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class PatchSchema(BaseSchema):
    """
    Request body whose fields may be absent, explicitly null, or set.
    Unknown keys (including derived ones such as totalAmount) are ignored.
    """

    def patch_values(self, *names: str) -> dict[str, Any]:
        return {
            name: getattr(self, name) if name in self.model_fields_set else UNSET
            for name in names
        }


class IDSchema(BaseSchema):
    id: uuid.UUID


class TimestampedSchema(IDSchema):
    created_at: datetime
    updated_at: datetime


class ParentSummary(IDSchema):
    """Compact view of an owning Category or SubCategory."""

    name: str
    description: str


class DataResponse(BaseSchema, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: T


class ListResponse(BaseSchema, Generic[T]):
    success: bool = True
    count: int
    data: list[T]
    # Context echoed by the scoped list/search endpoints
    category: Optional[str] = None
    subcategory: Optional[str] = None
    search_term: Optional[str] = None


class ErrorResponse(BaseSchema):
    success: bool = False
    message: str
