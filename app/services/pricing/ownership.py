"""
Item ownership — an Item belongs to exactly one Category or SubCategory.

`resolve_owner` is the single place that decides the owner of an Item on
create and on update. It needs one collaborator call: the store's
`find_by_id(kind, id)`, used to confirm the named owner exists.
"""

import uuid
from dataclasses import dataclass
from typing import Any, Optional

from app.errors import NotFoundError, ValidationError
from app.models.catalog import RecordKind
from app.services.pricing.patch import OwnerPatch, value_or

BOTH_OWNERS = "Item cannot belong to both category and subcategory simultaneously"
MISSING_OWNER = "Either category ID or subcategory ID must be provided"

_NOT_FOUND = {
    RecordKind.CATEGORY: "Category not found",
    RecordKind.SUB_CATEGORY: "Subcategory not found",
}


@dataclass(frozen=True)
class Owner:
    kind: str  # RecordKind.CATEGORY | RecordKind.SUB_CATEGORY
    id: uuid.UUID

    @classmethod
    def of(cls, item: Any) -> "Owner":
        if item.category_id is not None:
            return cls(RecordKind.CATEGORY, item.category_id)
        return cls(RecordKind.SUB_CATEGORY, item.sub_category_id)

    @property
    def column(self) -> str:
        return "category_id" if self.kind == RecordKind.CATEGORY else "sub_category_id"

    @property
    def scope_key(self) -> dict[str, uuid.UUID]:
        """Uniqueness scope for item names under this owner."""
        return {self.column: self.id}

    def as_columns(self) -> dict[str, Optional[uuid.UUID]]:
        # Setting one owner column always clears the other
        return {
            "category_id": self.id if self.kind == RecordKind.CATEGORY else None,
            "sub_category_id": self.id if self.kind == RecordKind.SUB_CATEGORY else None,
        }


def resolve_owner(store, patch: OwnerPatch, current: Optional[Owner] = None) -> Owner:
    """
    Decide the owner named by `patch`.

    On create `current` is None and one of the two ids must be given. On
    update an omitted id means "no change"; an explicit null only matters if
    it clears the current owner without naming a new one.

    Raises ValidationError when both ids are given or the item would be left
    without an owner, NotFoundError when the named owner does not exist.
    """
    category_id = value_or(patch.category_id, None)
    sub_category_id = value_or(patch.sub_category_id, None)

    if category_id is not None and sub_category_id is not None:
        raise ValidationError(BOTH_OWNERS, field="categoryId")

    if category_id is not None:
        return _existing_owner(store, RecordKind.CATEGORY, category_id)
    if sub_category_id is not None:
        return _existing_owner(store, RecordKind.SUB_CATEGORY, sub_category_id)

    if current is not None and current.column not in patch.provided():
        return current

    raise ValidationError(MISSING_OWNER, field="categoryId")


def _existing_owner(store, kind: str, owner_id: Any) -> Owner:
    record = store.find_by_id(kind, owner_id)
    if record is None:
        raise NotFoundError(_NOT_FOUND[kind])
    return Owner(kind, record.id)
