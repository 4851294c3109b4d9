"""
Test fixtures for Tripboard backend tests.
"""
import os
from datetime import datetime

# Must be set before app modules read settings
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-at-least-32-bytes")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from app.api.deps import get_geocoding_client
from app.database import Base, enable_sqlite_foreign_keys, get_db
from app.errors import GeocodeError
from app.main import app
from app.models.account import Account
from app.models.location import Location
from app.models.trip import Trip
from app.services.geocoding import GeocodeResult
from app.services.passwords import hash_password
from app.services.sessions import issue_token


# Create test database engine (SQLite in-memory, one connection shared by
# the test and the request handlers)
TEST_DATABASE_URL = "sqlite:///:memory:"

test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(test_engine)

TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


class FakeGeocoder:
    """Stands in for GeocodingClient; resolves addresses from a dict."""

    def __init__(self, places=None):
        self.places = places or {}
        self.calls = []

    async def geocode(self, address):
        self.calls.append(address)
        if address not in self.places:
            raise GeocodeError(f"No location found for '{address}'")
        lat, lng = self.places[address]
        return GeocodeResult(lat=lat, lng=lng, display_name=address)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Creates all tables before the test and drops them after.
    """
    Base.metadata.create_all(bind=test_engine)

    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def geocoder():
    return FakeGeocoder({
        "Shibuya, Tokyo": (35.66, 139.70),
        "Asakusa, Tokyo": (35.71, 139.80),
        "Kyoto Station": (34.98, 135.76),
    })


@pytest.fixture(scope="function")
def override_get_db(db_session):
    """
    Override the get_db dependency to use the test database session.
    """
    def _override_get_db():
        try:
            yield db_session
        finally:
            pass

    return _override_get_db


@pytest.fixture(scope="function")
async def client(override_get_db, geocoder):
    """
    Create an async test client with the database and geocoder overridden.
    """
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_geocoding_client] = lambda: geocoder

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Clear overrides after test
    app.dependency_overrides.clear()


@pytest.fixture
def account(db_session):
    acct = Account(
        name="Test Traveler",
        email="traveler@example.com",
        password_hash=hash_password("s3cret-pass", rounds=4),
    )
    db_session.add(acct)
    db_session.commit()
    return acct


@pytest.fixture
def auth_headers(account):
    token, _ = issue_token(account.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_trip(db_session, account):
    """Factory persisting a trip with ``stops`` locations in order 0..stops-1."""
    def _make_trip(name="Japan", start="2025-04-01", end="2025-04-10", stops=0, owner=None):
        trip = Trip(
            account_id=(owner or account).id,
            name=name,
            destination="Tokyo",
            start_date=datetime.fromisoformat(start),
            end_date=datetime.fromisoformat(end),
        )
        db_session.add(trip)
        db_session.flush()
        for i in range(stops):
            db_session.add(Location(
                trip_id=trip.id,
                lat=35.0 + i,
                lng=139.0 + i,
                title=f"Stop {i}",
                order=i,
            ))
        db_session.commit()
        return trip

    return _make_trip
