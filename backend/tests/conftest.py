"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool
from redis.exceptions import ConnectionError as RedisConnectionError

from backend.app.main import app
from backend.app.db.session import get_db, Base
from backend.app.core.exceptions import AuthenticationError
from backend.app.core.identity import get_identity_provider
from backend.app.core.jwt import create_access_token
from backend.app.services.ai_client import AIClientError, get_ai_client
import backend.app.core.redis_client as redis_client_module
import backend.app.main as main_module

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}

    async def ping(self):
        return True

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self.store[key] = value
        return True

    async def exists(self, key):
        return 1 if key in self.store else 0

    async def delete(self, key):
        return 1 if self.store.pop(key, None) is not None else 0

    async def aclose(self):
        self.store = {}


class UnavailableRedis:
    """Redis stand-in whose every call fails like a dropped connection."""

    async def _fail(self, *args, **kwargs):
        raise RedisConnectionError("Connection refused")

    ping = get = setex = exists = delete = _fail


class FakeIdentityProvider:
    """Identity provider that knows a fixed set of ID tokens."""

    def __init__(self):
        self.claims_by_token = {}

    def register(self, id_token, **claims):
        self.claims_by_token[id_token] = claims
        return id_token

    async def verify_id_token(self, id_token):
        if id_token not in self.claims_by_token:
            raise AuthenticationError("Invalid ID token")
        return self.claims_by_token[id_token]


class FakeAIClient:
    """Chat client returning queued replies, or raising when told to."""

    def __init__(self):
        self.replies = []
        self.error = None
        self.prompts = []

    async def complete(self, system, prompt, max_tokens=20, temperature=0.4):
        self.prompts.append(prompt)
        if self.error:
            raise AIClientError(self.error)
        return self.replies.pop(0)


@pytest.fixture
async def db_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def redis_fake():
    return MockRedis()


@pytest.fixture
def redis_down(monkeypatch):
    """Make every Redis call fail for the rest of the test."""
    monkeypatch.setattr(redis_client_module, "redis_client", UnavailableRedis())


@pytest.fixture
def identity_provider():
    return FakeIdentityProvider()


@pytest.fixture
def ai_client():
    return FakeAIClient()


@pytest.fixture(autouse=True)
def apply_overrides(db_engine, redis_fake, identity_provider, ai_client, monkeypatch):
    """Route the app's database, Redis, identity and AI dependencies to test doubles."""
    TestingSessionLocal = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    async def override_get_identity_provider():
        return identity_provider

    async def override_get_ai_client():
        return ai_client

    # Patch the global redis client used by token revocation and health checks
    monkeypatch.setattr(redis_client_module, "redis_client", redis_fake)
    monkeypatch.setattr(main_module, "engine", db_engine)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_provider] = override_get_identity_provider
    app.dependency_overrides[get_ai_client] = override_get_ai_client
    yield

    app.dependency_overrides = {}


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session(db_engine):
    TestingSessionLocal = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def make_token():
    """Build a service token directly, skipping the ID token exchange."""
    def _make(email, roles, rider_id=None, driver_id=None):
        return create_access_token(data={
            "sub": email,
            "roles": roles,
            "rider_id": rider_id,
            "driver_id": driver_id,
        })
    return _make


@pytest.fixture
def rider_payload():
    return {
        "FirstName": "Jane",
        "LastName": "Rider",
        "DateOfBirth": "1992-04-11",
        "PhoneNumber": "555-0101",
        "Email": "jane@example.com",
        "StreetAddress": "1 Elm St",
        "City": "Portland",
        "State": "OR",
        "ZipCode": "97201"
    }


@pytest.fixture
def driver_payload():
    return {
        "FirstName": "Sam",
        "LastName": "Driver",
        "DateOfBirth": "1988-09-30",
        "PhoneNumber": "555-0202",
        "Email": "sam@example.com",
        "LicenseNumber": "OR-1234567",
        "InsuranceID": 77,
        "BankID": 12,
        "VehicleID": 5,
        "VehicleColor": "Silver",
        "VehicleMake": "Honda",
        "VehicleModel": "Civic",
        "VehicleLicensePlate": "ABC 123",
        "Status": None
    }


@pytest.fixture
def trip_payload():
    return {
        "PickUpLocation": "1 Elm St",
        "DropOffLocation": "PDX Airport",
        "EstimatedTime": 22,
        "Fare": 31.5,
        "Tip": 0,
        "RiderID": "jane@example.com",
        "DriverID": None
    }
