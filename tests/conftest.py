"""Pytest fixtures for testing"""

import random
import pytest
from datetime import datetime
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from fraudwatch.api.main import create_app
from fraudwatch.api.dependencies import get_velocity_signal
from fraudwatch.infrastructure.database.models import Base
from fraudwatch.infrastructure.database.session import build_engine, get_db, init_db
from fraudwatch.infrastructure.feed.live_engine import LiveTransactionEngine
from fraudwatch.domain.models import Transaction

# Velocity draw that fires neither velocity rule
QUIET_VELOCITY = 0.5

# Wednesday afternoon
WEEKDAY_AFTERNOON = datetime(2024, 5, 15, 14, 0)


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    init_db(engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def live_engine() -> LiveTransactionEngine:
    """Small, seeded live feed"""
    return LiveTransactionEngine(rng=random.Random(42), initial_size=10)


@pytest.fixture
def client(db: Session, live_engine: LiveTransactionEngine) -> TestClient:
    """Create FastAPI test client with test database and a pinned velocity signal"""
    app = create_app(live_engine=live_engine)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_velocity_signal] = lambda: QUIET_VELOCITY
    return TestClient(app)


@pytest.fixture
def make_transaction() -> Callable[..., Transaction]:
    """Factory for transactions that trip no rule unless overridden"""

    def _make(**overrides) -> Transaction:
        fields = dict(
            transaction_id="TXN-1",
            amount_cents=4_250,  # $42.50
            merchant_name="Starbucks",
            merchant_category="Restaurant",
            location="Chicago, IL",
            card_number="****-****-****-4321",
            timestamp=WEEKDAY_AFTERNOON,
        )
        fields.update(overrides)
        return Transaction(**fields)

    return _make
