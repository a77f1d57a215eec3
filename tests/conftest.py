"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from typing import Generator
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from household_gateway.api.main import create_app
from household_gateway.api.dependencies import get_notification_client
from household_gateway.infrastructure.clients.notifier import NotificationClient
from household_gateway.infrastructure.database.models import Base, Household, HouseholdMember
from household_gateway.infrastructure.database.session import build_engine, get_db
from household_gateway.domain.models import HouseholdConfig, HouseholdMember as Member, OverspendPolicy


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

HOUSEHOLD_ID = "hh_rivera"


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
def household(db: Session) -> Household:
    """Household with no overspend settings, so every default applies"""
    household = Household(
        id=HOUSEHOLD_ID,
        name="Rivera Household",
        members=[
            HouseholdMember(user_id="olivia", name="Olivia", role="owner", income_percentage=50),
            HouseholdMember(user_id="carlos", name="Carlos", role="co-owner", income_percentage=50),
            HouseholdMember(user_id="morgan", name="Morgan", role="manager"),
            HouseholdMember(user_id="maria", name="Maria", role="member", income_percentage=50),
            HouseholdMember(user_id="avis", name="Avis", role="member"),
            HouseholdMember(user_id="theo", name="Theo", role="viewer", income_percentage=25),
        ],
    )
    db.add(household)
    db.commit()
    return household


@pytest.fixture
def household_config() -> HouseholdConfig:
    """Pure domain configuration mirroring the seeded household"""
    return HouseholdConfig(
        household_id=HOUSEHOLD_ID,
        members=[
            Member(user_id="olivia", name="Olivia", role="owner", income_percentage=50),
            Member(user_id="carlos", name="Carlos", role="co-owner", income_percentage=50),
            Member(user_id="morgan", name="Morgan", role="manager"),
            Member(user_id="maria", name="Maria", role="member", income_percentage=50),
            Member(user_id="avis", name="Avis", role="member"),
            Member(user_id="theo", name="Theo", role="viewer", income_percentage=25),
        ],
        policy=OverspendPolicy(),
    )


@pytest.fixture
def notifier() -> MagicMock:
    """Notification client that records deliveries instead of calling the webhook"""
    client = MagicMock(spec=NotificationClient)
    client.send_notifications = AsyncMock(return_value=None)
    return client


@pytest.fixture
def client(db: Session, notifier: MagicMock) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_client] = lambda: notifier
    return TestClient(app)
