"""
Record persistence for the catalog.

The handlers and the pricing engine only talk to the database through this
class. Every write commits immediately: a create or update is a single-row
write, and there is no multi-record transaction to coordinate.
"""

import logging
import uuid
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.errors import ConflictError, ValidationError
from app.models.catalog import Category, Item, RecordKind, SubCategory

logger = logging.getLogger(__name__)

MODELS = {
    RecordKind.CATEGORY: Category,
    RecordKind.SUB_CATEGORY: SubCategory,
    RecordKind.ITEM: Item,
}

DUPLICATE_MESSAGES = {
    RecordKind.CATEGORY: "Category with this name already exists",
    RecordKind.SUB_CATEGORY: "Subcategory with this name already exists in this category",
    RecordKind.ITEM: "Item with this name already exists in this category/subcategory",
}

# Owner summaries embedded in list responses
OWNER_LOADERS = {
    RecordKind.CATEGORY: (),
    RecordKind.SUB_CATEGORY: (selectinload(SubCategory.category),),
    RecordKind.ITEM: (selectinload(Item.category), selectinload(Item.sub_category)),
}


def parse_id(value: Any) -> Optional[uuid.UUID]:
    """Malformed ids resolve to None, so they surface as 'not found'."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


class CatalogRepository:
    """
    Usage:
        repo = CatalogRepository(db)
        category = repo.find_by_id(RecordKind.CATEGORY, category_id)
    """

    def __init__(self, db: Session):
        self.db = db

    # ── Reads ─────────────────────────────────────────────────────────────────

    def find_by_id(self, kind: str, record_id: Any):
        ident = parse_id(record_id)
        if ident is None:
            return None
        return self.db.get(MODELS[kind], ident)

    def find_all(self, kind: str, **filters: Any) -> list:
        model = MODELS[kind]
        stmt = (
            select(model)
            .options(*OWNER_LOADERS[kind])
            .filter_by(**filters)
            .order_by(model.created_at.desc())
        )
        return list(self.db.scalars(stmt))

    def search_by_name(self, kind: str, term: str) -> list:
        """Case-insensitive substring match on name, newest first."""
        model = MODELS[kind]
        stmt = (
            select(model)
            .options(*OWNER_LOADERS[kind])
            .where(model.name.icontains(term, autoescape=True))
            .order_by(model.created_at.desc())
        )
        return list(self.db.scalars(stmt))

    def exists_by_unique_key(
        self,
        kind: str,
        scope_key: dict[str, Any],
        name: str,
        exclude_id: Optional[uuid.UUID] = None,
    ) -> bool:
        """
        True if a record named `name` already exists within `scope_key`
        (e.g. {"category_id": ...}); an empty scope means globally unique.
        """
        model = MODELS[kind]
        stmt = select(model.id).filter_by(name=name, **scope_key)
        if exclude_id is not None:
            stmt = stmt.where(model.id != exclude_id)
        return self.db.scalars(stmt.limit(1)).first() is not None

    # ── Writes ────────────────────────────────────────────────────────────────

    def insert(self, kind: str, fields: dict[str, Any]):
        record = MODELS[kind](**fields)
        self.db.add(record)
        self._commit(kind)
        self.db.refresh(record)
        return record

    def update_by_id(self, kind: str, record_id: Any, fields: dict[str, Any]):
        record = self.find_by_id(kind, record_id)
        if record is None:
            return None
        for column, value in fields.items():
            setattr(record, column, value)
        self._commit(kind)
        self.db.refresh(record)
        return record

    def _commit(self, kind: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            # Unique constraints are the backstop for the handlers' pre-checks
            self.db.rollback()
            logger.warning("Write rejected by database for %s: %s", kind, exc.orig)
            raise ConflictError(DUPLICATE_MESSAGES[kind]) from exc
        except DataError as exc:
            # Values outside the column range (numeric precision, string length)
            self.db.rollback()
            logger.warning("Value rejected by database for %s: %s", kind, exc.orig)
            raise ValidationError("Value out of range for a stored field") from exc
