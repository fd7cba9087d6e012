"""
Demo seed script — create a small menu (categories, sub-categories, items)
for end-to-end testing of the catalog API.

Records go through the same handlers as the API, so tax inheritance and
totalAmount derivation apply exactly as they would over HTTP.

Usage:
    python scripts/seed_demo.py

Idempotent — safe to re-run; skips records that already exist.
"""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.database import SessionLocal
from app.models.catalog import RecordKind
from app.schemas.catalog import CategoryCreate, ItemCreate, SubCategoryCreate
from app.services.catalog.categories import CategoryHandler
from app.services.catalog.items import ItemHandler
from app.services.catalog.repository import CatalogRepository
from app.services.catalog.sub_categories import SubCategoryHandler

# ── Demo data constants ────────────────────────────────────────────────────────

CATEGORIES = [
    {
        "name": "Main Course",
        "image": "https://example.com/main-course.jpg",
        "description": "Hearty main dishes for your meal",
        "taxApplicability": True,
        "tax": 15,
        "taxType": "percentage",
    },
    {
        "name": "Beverages",
        "image": "https://example.com/beverages.jpg",
        "description": "Soft drinks, juices and coffee",
        "taxApplicability": False,
    },
]

# category name → sub-category payloads (tax fields omitted are inherited)
SUB_CATEGORIES = {
    "Main Course": [
        {
            "name": "Pasta",
            "image": "https://example.com/pasta.jpg",
            "description": "Fresh pasta dishes",
        },
        {
            "name": "Grill",
            "image": "https://example.com/grill.jpg",
            "description": "Char-grilled meat and fish",
            "tax": 18,
        },
    ],
    "Beverages": [
        {
            "name": "Coffee",
            "image": "https://example.com/coffee.jpg",
            "description": "Espresso based drinks",
        },
    ],
}

# (owner kind, owner name, item payload)
ITEMS = [
    (
        RecordKind.SUB_CATEGORY,
        "Pasta",
        {
            "name": "Spaghetti Carbonara",
            "image": "https://example.com/carbonara.jpg",
            "description": "Creamy pasta with bacon and parmesan cheese",
            "taxApplicability": True,
            "tax": 12,
            "taxType": "percentage",
            "baseAmount": 18.99,
            "discount": 2.00,
        },
    ),
    (
        RecordKind.SUB_CATEGORY,
        "Grill",
        {
            "name": "Ribeye Steak",
            "image": "https://example.com/ribeye.jpg",
            "description": "300g ribeye with pepper sauce",
            "taxApplicability": True,
            "tax": 2.5,
            "taxType": "fixed",
            "baseAmount": 32.00,
        },
    ),
    (
        RecordKind.CATEGORY,
        "Beverages",
        {
            "name": "Fresh Orange Juice",
            "image": "https://example.com/orange-juice.jpg",
            "description": "Squeezed to order",
            "taxApplicability": False,
            "baseAmount": 4.50,
            "discount": 0.50,
        },
    ),
]


def main() -> None:
    print("\n=== Menu Catalog — Demo Seed ===\n")

    db = SessionLocal()
    try:
        repo = CatalogRepository(db)
        categories = CategoryHandler(repo)
        sub_categories = SubCategoryHandler(repo)
        items = ItemHandler(repo)

        by_name = {}

        # ── Categories ────────────────────────────────────────────────────────
        for payload in CATEGORIES:
            name = payload["name"]
            existing = repo.find_all(RecordKind.CATEGORY, name=name)
            if existing:
                by_name[name] = existing[0]
                print(f"✓ Category '{name}' already exists — skipping.")
                continue
            category = categories.create(CategoryCreate.model_validate(payload))
            by_name[name] = category
            print(f"✓ Category '{name}' created (id={category.id})")

        # ── Sub-categories ────────────────────────────────────────────────────
        for category_name, payloads in SUB_CATEGORIES.items():
            category = by_name[category_name]
            for payload in payloads:
                name = payload["name"]
                existing = repo.find_all(
                    RecordKind.SUB_CATEGORY, category_id=category.id, name=name
                )
                if existing:
                    by_name[name] = existing[0]
                    print(f"  ✓ Subcategory '{name}' already exists — skipping.")
                    continue
                sub = sub_categories.create(
                    category.id, SubCategoryCreate.model_validate(payload)
                )
                by_name[name] = sub
                print(
                    f"  ✓ Subcategory '{name}' created under '{category_name}' "
                    f"(tax={sub.tax} {sub.tax_type or 'n/a'})"
                )

        # ── Items ─────────────────────────────────────────────────────────────
        for kind, owner_name, payload in ITEMS:
            owner = by_name[owner_name]
            column = "category_id" if kind == RecordKind.CATEGORY else "sub_category_id"
            if repo.exists_by_unique_key(
                RecordKind.ITEM, {column: owner.id}, payload["name"]
            ):
                print(f"  ✓ Item '{payload['name']}' already exists — skipping.")
                continue
            owner_key = "categoryId" if kind == RecordKind.CATEGORY else "subCategoryId"
            item = items.create(
                ItemCreate.model_validate({**payload, owner_key: str(owner.id)})
            )
            print(f"  ✓ Item '{item.name}' created (total={item.total_amount})")

        print("\n✅ Demo seed complete.\n")
        print("Next steps:")
        print("  1. Browse the menu   → GET /api/categories")
        print("  2. Pasta dishes      → GET /api/items/search?name=spaghetti")
        print("  3. Try a discount    → PUT /api/items/{id}  {\"discount\": 3.00}\n")

    except Exception as e:
        db.rollback()
        print(f"\nERROR: {e}")
        import traceback

        traceback.print_exc()
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
