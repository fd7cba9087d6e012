"""
Test fixtures and shared setup.

Each DB-backed test gets a fresh in-memory SQLite schema, created before the
test and dropped after it, so handlers can commit freely. Pricing engine
tests need none of this and run without a database.
"""

import os
import uuid
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# ── Override settings BEFORE importing app modules ────────────────────────────
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from app.main import app
from app.database import get_db
from app.models.base import Base
from app.models import *  # noqa — ensures all models registered
from app.models.catalog import Category, Item, SubCategory, TaxType


# ── Test engine ───────────────────────────────────────────────────────────────
# One shared connection: TestClient runs sync routes on a worker thread
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)


@pytest.fixture
def db() -> Session:
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """
    FastAPI test client with DB dependency overridden to use the test session.
    """

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ── Data builder fixtures ──────────────────────────────────────────────────────


@pytest.fixture
def taxed_category(db: Session) -> Category:
    category = Category(
        name="Main Course",
        image="https://example.com/main-course.jpg",
        description="Hearty main dishes",
        tax_applicability=True,
        tax=Decimal("15"),
        tax_type=TaxType.PERCENTAGE,
    )
    db.add(category)
    db.commit()
    return category


@pytest.fixture
def untaxed_category(db: Session) -> Category:
    category = Category(
        name="Beverages",
        image="https://example.com/beverages.jpg",
        description="Soft drinks and juices",
        tax_applicability=False,
    )
    db.add(category)
    db.commit()
    return category


@pytest.fixture
def sub_category(db: Session, taxed_category: Category) -> SubCategory:
    sub = SubCategory(
        category_id=taxed_category.id,
        name="Pasta",
        image="https://example.com/pasta.jpg",
        description="Fresh pasta dishes",
        tax_applicability=True,
        tax=Decimal("15"),
        tax_type=TaxType.PERCENTAGE,
    )
    db.add(sub)
    db.commit()
    return sub


@pytest.fixture
def item(db: Session, sub_category: SubCategory) -> Item:
    """Spaghetti Carbonara: 18.99 - 2.00 = 16.99."""
    carbonara = Item(
        sub_category_id=sub_category.id,
        name="Spaghetti Carbonara",
        image="https://example.com/carbonara.jpg",
        description="Creamy pasta with bacon",
        tax_applicability=True,
        tax=Decimal("12"),
        tax_type=TaxType.PERCENTAGE,
        base_amount=Decimal("18.99"),
        discount=Decimal("2.00"),
        total_amount=Decimal("16.99"),
    )
    db.add(carbonara)
    db.commit()
    return carbonara


@pytest.fixture
def missing_id() -> str:
    return str(uuid.uuid4())
