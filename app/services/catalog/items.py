"""
Item record handler.

Every write goes through the same three engine steps against the merged
candidate, before anything is persisted:

  1. owner   — exactly one of Category / SubCategory, and it must exist
  2. tax     — the item's own triple (no inheritance)
  3. amounts — totalAmount re-derived from baseAmount and discount

If any step fails the stored item is left as it was.
"""

import logging

from app.errors import ConflictError, NotFoundError, ValidationError
from app.models.catalog import Item, RecordKind
from app.schemas.catalog import ItemCreate, ItemUpdate
from app.services.catalog.categories import require_text
from app.services.catalog.repository import DUPLICATE_MESSAGES, CatalogRepository
from app.services.pricing.amounts import AmountState, merge_amounts, resolve_amounts
from app.services.pricing.ownership import Owner, resolve_owner
from app.services.pricing.tax import TaxState, merge_tax, resolve_item_tax

logger = logging.getLogger(__name__)

KIND = RecordKind.ITEM


class ItemHandler:
    def __init__(self, repo: CatalogRepository):
        self.repo = repo

    def get(self, item_id) -> Item:
        item = self.repo.find_by_id(KIND, item_id)
        if item is None:
            raise NotFoundError("Item not found")
        return item

    def list_all(self) -> list[Item]:
        return self.repo.find_all(KIND)

    def list_for_category(self, category_id):
        """Items attached directly to a Category. Returns (category, items)."""
        category = self.repo.find_by_id(RecordKind.CATEGORY, category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return category, self.repo.find_all(KIND, category_id=category.id)

    def list_for_sub_category(self, sub_category_id):
        """Returns (sub_category, items)."""
        sub_category = self.repo.find_by_id(RecordKind.SUB_CATEGORY, sub_category_id)
        if sub_category is None:
            raise NotFoundError("Subcategory not found")
        return sub_category, self.repo.find_all(KIND, sub_category_id=sub_category.id)

    def search(self, name) -> list[Item]:
        if not name or not name.strip():
            raise ValidationError("Item name is required for search", field="name")
        return self.repo.search_by_name(KIND, name.strip())

    def create(self, payload: ItemCreate) -> Item:
        owner = resolve_owner(self.repo, payload.owner_patch())
        tax = resolve_item_tax(payload.tax_patch())
        amounts = resolve_amounts(payload.amount_patch())
        self._ensure_name_free(owner, payload.name)

        item = self.repo.insert(
            KIND,
            {
                "name": payload.name,
                "image": payload.image,
                "description": payload.description,
                **owner.as_columns(),
                **tax.as_columns(),
                **amounts.as_columns(),
            },
        )
        logger.info(
            "Created item %s (%r) under %s %s total=%s",
            item.id, item.name, owner.kind, owner.id, item.total_amount,
        )
        return item

    def update(self, item_id, payload: ItemUpdate) -> Item:
        item = self.get(item_id)
        current_owner = Owner.of(item)

        changes = require_text(payload.text_changes())

        owner_patch = payload.owner_patch()
        owner = current_owner
        if not owner_patch.is_empty():
            owner = resolve_owner(self.repo, owner_patch, current=current_owner)
            changes.update(owner.as_columns())

        tax_patch = payload.tax_patch()
        if not tax_patch.is_empty():
            changes.update(merge_tax(TaxState.of(item), tax_patch).as_columns())

        amount_patch = payload.amount_patch()
        if not amount_patch.is_empty():
            changes.update(merge_amounts(AmountState.of(item), amount_patch).as_columns())

        name = changes.get("name", item.name)
        if name != item.name or owner != current_owner:
            self._ensure_name_free(owner, name, exclude_id=item.id)

        if not changes:
            return item

        updated = self.repo.update_by_id(KIND, item.id, changes)
        if updated is None:
            raise NotFoundError("Item not found")
        logger.info("Updated item %s: %s", item.id, sorted(changes))
        return updated

    def _ensure_name_free(self, owner: Owner, name: str, exclude_id=None) -> None:
        if self.repo.exists_by_unique_key(
            KIND, owner.scope_key, name, exclude_id=exclude_id
        ):
            raise ConflictError(DUPLICATE_MESSAGES[KIND])
