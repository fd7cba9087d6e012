"""
Category record handler.

Create:  resolve tax (default: not applicable) → check name is free → insert
Update:  merge requested changes onto the stored record → validate → write

A Category's tax change is never pushed down to its existing SubCategories
or Items; they copied the values when they were created.
"""

import logging

from app.errors import ConflictError, NotFoundError, ValidationError
from app.models.catalog import Category, RecordKind
from app.schemas.catalog import CategoryCreate, CategoryUpdate
from app.services.catalog.repository import DUPLICATE_MESSAGES, CatalogRepository
from app.services.pricing.tax import TaxState, merge_tax, resolve_category_tax

logger = logging.getLogger(__name__)

KIND = RecordKind.CATEGORY


def require_text(changes: dict) -> dict:
    """Reject explicit nulls on name / image / description."""
    for field, value in changes.items():
        if value is None:
            raise ValidationError(f"{field.capitalize()} cannot be empty", field=field)
    return changes


class CategoryHandler:
    def __init__(self, repo: CatalogRepository):
        self.repo = repo

    def get(self, category_id) -> Category:
        category = self.repo.find_by_id(KIND, category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return category

    def list_all(self) -> list[Category]:
        return self.repo.find_all(KIND)

    def search(self, name) -> Category:
        """First category whose name contains `name`, case-insensitively."""
        if not name or not name.strip():
            raise ValidationError("Category name is required", field="name")
        matches = self.repo.search_by_name(KIND, name.strip())
        if not matches:
            raise NotFoundError("Category not found")
        return matches[0]

    def create(self, payload: CategoryCreate) -> Category:
        tax = resolve_category_tax(payload.tax_patch())
        self._ensure_name_free(payload.name)

        category = self.repo.insert(
            KIND,
            {
                "name": payload.name,
                "image": payload.image,
                "description": payload.description,
                **tax.as_columns(),
            },
        )
        logger.info(
            "Created category %s (%r) tax_applicability=%s",
            category.id, category.name, category.tax_applicability,
        )
        return category

    def update(self, category_id, payload: CategoryUpdate) -> Category:
        category = self.get(category_id)

        changes = require_text(payload.text_changes())
        tax_patch = payload.tax_patch()
        if not tax_patch.is_empty():
            changes.update(merge_tax(TaxState.of(category), tax_patch).as_columns())

        if "name" in changes and changes["name"] != category.name:
            self._ensure_name_free(changes["name"], exclude_id=category.id)

        if not changes:
            return category

        updated = self.repo.update_by_id(KIND, category.id, changes)
        if updated is None:
            raise NotFoundError("Category not found")
        logger.info("Updated category %s: %s", category.id, sorted(changes))
        return updated

    def _ensure_name_free(self, name: str, exclude_id=None) -> None:
        if self.repo.exists_by_unique_key(KIND, {}, name, exclude_id=exclude_id):
            raise ConflictError(DUPLICATE_MESSAGES[KIND])
