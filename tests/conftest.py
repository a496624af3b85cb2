import os

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

# In-memory DB, no hosted auth and no demo rows for tests
os.environ["DATABASE_PATH"] = ":memory:"
os.environ["DATABASE_URL"] = ""
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["AUTH_URL"] = ""
os.environ["AUTH_ANON_KEY"] = ""
os.environ["PAYMENT_WEBHOOK_SECRET"] = ""

from jeevraksha.database import close_db, init_db, insert_row, utc_now
from jeevraksha.dependencies import get_current_user, get_optional_user
from jeevraksha.main import app
from jeevraksha.models.common import Role
from jeevraksha.models.profile import AuthUser
from jeevraksha.services.auth_client import HostedAuthClient, get_auth_client


@pytest_asyncio.fixture
async def db():
    """Provide a fresh in-memory database for each test."""
    import jeevraksha.database as db_mod

    if db_mod._db is not None:
        try:
            await db_mod._db.close()
        except Exception:
            pass
    db_mod._db = None

    # Override module-level config directly (avoids fragile importlib.reload)
    db_mod.DATABASE_PATH = ":memory:"
    db_mod.DATABASE_URL = ""
    db_mod.SEED_DEMO_DATA = False

    await init_db()
    database = await db_mod.get_db()
    yield database
    await close_db()


@pytest.fixture
def client(db):
    """Provide a synchronous TestClient for HTTP and WebSocket tests."""
    return TestClient(app)


@pytest_asyncio.fixture
async def async_client(db):
    """Provide an async httpx client for async HTTP tests."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def login_as():
    """Act as a signed-in user with the given role for the rest of the test.

    Usage: ``user = login_as(Role.ADMIN)``.
    """

    def _login(role: Role = Role.CITIZEN, user_id: str | None = None) -> AuthUser:
        user = AuthUser(
            id=user_id or f"user-{role.value}",
            email=f"{role.value}@example.org",
            role=role,
            token="test-token",
        )
        app.dependency_overrides[get_current_user] = lambda: user
        app.dependency_overrides[get_optional_user] = lambda: user
        return user

    yield _login
    app.dependency_overrides.pop(get_current_user, None)
    app.dependency_overrides.pop(get_optional_user, None)


@pytest.fixture
def mock_auth():
    """Route the hosted-auth client through an httpx.MockTransport.

    ``mock_auth(handler)`` installs a handler and returns the client.
    """

    def _install(handler) -> HostedAuthClient:
        auth_client = HostedAuthClient(
            "http://auth.test/auth/v1",
            "anon-key",
            transport=httpx.MockTransport(handler),
        )
        app.dependency_overrides[get_auth_client] = lambda: auth_client
        return auth_client

    yield _install
    app.dependency_overrides.pop(get_auth_client, None)


async def make_ngo(db, **overrides) -> dict:
    """Insert an NGO row directly, verified and located in central Delhi by default."""
    values = {
        "name": "Delhi Animal Rescue Trust",
        "phone": "+91-11-4000-1111",
        "city": "New Delhi",
        "state": "Delhi",
        "latitude": 28.6280,
        "longitude": 77.2189,
        "is_verified": True,
        "status": "active",
        "created_at": utc_now(),
    }
    values.update(overrides)
    return await insert_row(db, "ngos", values)


async def make_volunteer(db, **overrides) -> dict:
    values = {
        "name": "Asha Verma",
        "city": "New Delhi",
        "is_active": True,
        "is_verified": False,
        "total_rescues": 0,
        "created_at": utc_now(),
    }
    values.update(overrides)
    return await insert_row(db, "volunteers", values)


async def make_report(db, **overrides) -> dict:
    values = {
        "animal_type": "dog",
        "condition": "injured leg",
        "location": "Connaught Place",
        "urgency_level": "medium",
        "status": "pending",
        "created_at": utc_now(),
    }
    values.update(overrides)
    return await insert_row(db, "reports", values)
