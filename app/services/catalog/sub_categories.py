"""
SubCategory record handler.

A SubCategory is created under an existing Category and inherits each tax
field it does not set from that Category at that moment. After creation its
tax fields are its own: later Category updates do not reach it, and its
categoryId never changes.
"""

import logging

from app.errors import ConflictError, NotFoundError, ValidationError
from app.models.catalog import RecordKind, SubCategory
from app.schemas.catalog import SubCategoryCreate, SubCategoryUpdate
from app.services.catalog.categories import require_text
from app.services.catalog.repository import DUPLICATE_MESSAGES, CatalogRepository
from app.services.pricing.tax import TaxState, merge_tax, resolve_sub_category_tax

logger = logging.getLogger(__name__)

KIND = RecordKind.SUB_CATEGORY


class SubCategoryHandler:
    def __init__(self, repo: CatalogRepository):
        self.repo = repo

    def get(self, sub_category_id) -> SubCategory:
        sub_category = self.repo.find_by_id(KIND, sub_category_id)
        if sub_category is None:
            raise NotFoundError("Subcategory not found")
        return sub_category

    def list_all(self) -> list[SubCategory]:
        return self.repo.find_all(KIND)

    def list_for_category(self, category_id):
        """Returns (category, sub_categories)."""
        category = self.repo.find_by_id(RecordKind.CATEGORY, category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return category, self.repo.find_all(KIND, category_id=category.id)

    def search(self, name) -> SubCategory:
        if not name or not name.strip():
            raise ValidationError("Subcategory name is required", field="name")
        matches = self.repo.search_by_name(KIND, name.strip())
        if not matches:
            raise NotFoundError("Subcategory not found")
        return matches[0]

    def create(self, category_id, payload: SubCategoryCreate) -> SubCategory:
        parent = self.repo.find_by_id(RecordKind.CATEGORY, category_id)
        if parent is None:
            raise NotFoundError("Parent category not found")

        tax = resolve_sub_category_tax(payload.tax_patch(), TaxState.of(parent))
        self._ensure_name_free(parent.id, payload.name)

        sub_category = self.repo.insert(
            KIND,
            {
                "category_id": parent.id,
                "name": payload.name,
                "image": payload.image,
                "description": payload.description,
                **tax.as_columns(),
            },
        )
        logger.info(
            "Created sub-category %s (%r) under category %s",
            sub_category.id, sub_category.name, parent.id,
        )
        return sub_category

    def update(self, sub_category_id, payload: SubCategoryUpdate) -> SubCategory:
        sub_category = self.get(sub_category_id)

        changes = require_text(payload.text_changes())
        tax_patch = payload.tax_patch()
        if not tax_patch.is_empty():
            changes.update(merge_tax(TaxState.of(sub_category), tax_patch).as_columns())

        if "name" in changes and changes["name"] != sub_category.name:
            self._ensure_name_free(
                sub_category.category_id, changes["name"], exclude_id=sub_category.id
            )

        if not changes:
            return sub_category

        updated = self.repo.update_by_id(KIND, sub_category.id, changes)
        if updated is None:
            raise NotFoundError("Subcategory not found")
        logger.info("Updated sub-category %s: %s", sub_category.id, sorted(changes))
        return updated

    def _ensure_name_free(self, category_id, name: str, exclude_id=None) -> None:
        if self.repo.exists_by_unique_key(
            KIND, {"category_id": category_id}, name, exclude_id=exclude_id
        ):
            raise ConflictError(DUPLICATE_MESSAGES[KIND])
