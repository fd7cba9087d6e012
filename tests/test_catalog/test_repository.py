"""
CatalogRepository tests — owner loading for list endpoints and mapping of
database write errors onto the catalog error taxonomy.
"""

from decimal import Decimal

import pytest
from sqlalchemy import event
from sqlalchemy.exc import DataError, IntegrityError

from app.errors import ConflictError, ValidationError
from app.models.catalog import Item, RecordKind, SubCategory
from app.services.catalog.repository import CatalogRepository


@pytest.fixture
def statements(db):
    """Collects SQL statements emitted on the test connection."""
    seen = []

    def record(conn, cursor, statement, parameters, context, executemany):
        seen.append(statement)

    engine = db.get_bind()
    event.listen(engine, "before_cursor_execute", record)
    yield seen
    event.remove(engine, "before_cursor_execute", record)


def _add_items(db, sub_category, taxed_category, count=3):
    for n in range(count):
        if n % 2:
            owner = {"sub_category_id": sub_category.id}
        else:
            owner = {"category_id": taxed_category.id}
        db.add(
            Item(
                name=f"Dish {n}",
                image="https://example.com/dish.jpg",
                description="Daily special",
                tax_applicability=False,
                base_amount=Decimal("10.00"),
                discount=Decimal("0.00"),
                total_amount=Decimal("10.00"),
                **owner,
            )
        )
    db.commit()
    db.expunge_all()


class TestOwnerLoading:
    def test_item_owners_loaded_with_the_list(self, db, statements, sub_category, taxed_category):
        _add_items(db, sub_category, taxed_category, count=4)
        repo = CatalogRepository(db)

        items = repo.find_all(RecordKind.ITEM)
        loaded = len(statements)
        owners = [(i.category or i.sub_category).name for i in items]

        assert len(items) == 4
        assert set(owners) == {"Main Course", "Pasta"}
        assert len(statements) == loaded

    def test_search_loads_owners(self, db, statements, sub_category, taxed_category):
        _add_items(db, sub_category, taxed_category)
        repo = CatalogRepository(db)

        items = repo.search_by_name(RecordKind.ITEM, "dish")
        loaded = len(statements)
        owners = [i.category or i.sub_category for i in items]

        assert len(items) == 3
        assert all(owner is not None for owner in owners)
        assert len(statements) == loaded

    def test_sub_category_parent_loaded_with_the_list(self, db, statements, taxed_category):
        for name in ("Pasta", "Risotto", "Grill"):
            db.add(
                SubCategory(
                    category_id=taxed_category.id,
                    name=name,
                    image="https://example.com/sub.jpg",
                    description=name,
                    tax_applicability=False,
                )
            )
        db.commit()
        db.expunge_all()

        subs = CatalogRepository(db).find_all(RecordKind.SUB_CATEGORY)
        loaded = len(statements)
        assert {s.category.name for s in subs} == {"Main Course"}
        assert len(statements) == loaded


class TestWriteErrors:
    def _failing_commit(self, db, monkeypatch, exc):
        def commit():
            raise exc

        monkeypatch.setattr(db, "commit", commit)

    def test_out_of_range_value_is_validation_error(self, db, monkeypatch, taxed_category):
        repo = CatalogRepository(db)
        self._failing_commit(
            db, monkeypatch, DataError("UPDATE categories", {}, Exception("numeric field overflow"))
        )
        with pytest.raises(ValidationError):
            repo.update_by_id(RecordKind.CATEGORY, taxed_category.id, {"tax": Decimal("1e9")})

    def test_unique_violation_is_conflict(self, db, monkeypatch, taxed_category):
        repo = CatalogRepository(db)
        self._failing_commit(
            db, monkeypatch, IntegrityError("UPDATE categories", {}, Exception("duplicate key"))
        )
        with pytest.raises(ConflictError, match="Category with this name already exists"):
            repo.update_by_id(RecordKind.CATEGORY, taxed_category.id, {"name": "Beverages"})
