"""Pytest fixtures for testing"""

import os

# Point the app at a throwaway database before settings are imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from decimal import Decimal
from typing import Generator, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from savings_allocator.api.main import create_app
from savings_allocator.domain.catalog import Catalog
from savings_allocator.domain.models import AccountTier, RateOffer
from savings_allocator.infrastructure.database.models import Base
from savings_allocator.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_tier(
    tier_id: str,
    new_rate: str,
    new_cap: Optional[int],
    existing_rate: Optional[str] = None,
    existing_cap: Optional[int] = None,
    code: Optional[str] = None,
) -> AccountTier:
    """Build a tier; existing-customer offer mirrors the new one unless given"""
    if existing_rate is None:
        existing_rate, existing_cap = new_rate, new_cap
    return AccountTier(
        tier_id=tier_id,
        code=code or tier_id,
        name=f"Bank {tier_id}",
        new_customer=RateOffer(
            rate_percent=Decimal(new_rate),
            cap_amount=None if new_cap is None else Decimal(new_cap),
        ),
        existing_customer=RateOffer(
            rate_percent=Decimal(existing_rate),
            cap_amount=None if existing_cap is None else Decimal(existing_cap),
        ),
    )


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def small_catalog() -> Catalog:
    """
    Four banks, five tiers:
    - "A": 5% new / 2% existing, caps 100k / 300k
    - "B" has two tiers sharing one code
    - "C": unlimited cap
    - "D": same rate as "A" to exercise the catalog-order tie-break
    """
    return Catalog(
        [
            make_tier("A", "5.0", 100_000, "2.0", 300_000),
            make_tier("B-1", "8.0", 50_000, "1.5", 200_000, code="B"),
            make_tier("B-2", "1.5", 800_000, "1.5", 800_000, code="B"),
            make_tier("C", "1.3", None, "1.8", 200_000),
            make_tier("D", "5.0", 100_000, "1.0", 100_000),
        ]
    )


@pytest.fixture
def client(db: Session, small_catalog: Catalog) -> TestClient:
    """Create FastAPI test client with test database and the small catalog"""
    app = create_app(account_catalog=small_catalog, create_tables=False)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)
