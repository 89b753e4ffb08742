"""Service test fixtures — async DB, bearer tokens and a FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness probe hits the test engine
    - Token verifier and identity-provider client are overridden; no network
    - Each test starts with an empty DashboardCache

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features are not exercised here)
    - StaticPool: every session shares the one in-memory connection
"""

import time
from typing import Any

import jwt
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool

from campus_portal.api.deps import get_identity_client, get_token_verifier
from campus_portal.core.dashboard_cache import DashboardCache
from campus_portal.core.domain_types import Role
from campus_portal.core.errors import ConflictError, UnauthorizedError
from campus_portal.db.base import Base
from campus_portal.infrastructure.database import get_db, DatabaseSessionManager
from campus_portal.infrastructure.identity_provider import TokenVerifier
from campus_portal.models.user import User
import campus_portal.infrastructure.database as db_module
from campus_portal.main import app

TEST_SECRET = "route-test-secret"
TEST_AUDIENCE = "authenticated"


def make_token(
    sub: str,
    email: str,
    *,
    name: str | None = None,
    expires_in: int = 3600,
    secret: str = TEST_SECRET,
    **claims: Any,
) -> str:
    payload: dict[str, Any] = {
        "sub": sub,
        "email": email,
        "aud": TEST_AUDIENCE,
        "exp": int(time.time()) + expires_in,
        "user_metadata": {"name": name} if name else {},
    }
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


def bearer(sub: str, email: str, **kwargs: Any) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(sub, email, **kwargs)}"}


class FakeIdentityClient:
    """Stands in for IdentityProviderClient; records every call."""

    def __init__(self):
        self.calls: list[tuple[str, dict]] = []
        self.registered: set[str] = set()
        self.sign_up_session = False

    async def sign_up(self, email, password, metadata=None, redirect_to=None):
        self.calls.append(("sign_up", {"email": email, "metadata": metadata}))
        if email in self.registered:
            raise ConflictError("User already registered", "EMAIL_TAKEN")
        self.registered.add(email)
        user = {"id": f"idp-{email}", "email": email, "user_metadata": metadata or {}}
        if self.sign_up_session:
            return {
                "access_token": "issued-token", "refresh_token": "refresh",
                "token_type": "bearer", "expires_in": 3600, "user": user,
            }
        return user

    async def sign_in_with_password(self, email, password):
        self.calls.append(("sign_in", {"email": email}))
        if password != "correct-password":
            raise UnauthorizedError("Invalid login credentials")
        return {
            "access_token": "issued-token", "refresh_token": "refresh",
            "token_type": "bearer", "expires_in": 3600,
            "user": {"id": f"idp-{email}", "email": email},
        }

    async def sign_out(self, access_token):
        self.calls.append(("sign_out", {"token": access_token}))

    async def update_user_metadata(self, access_token, data):
        self.calls.append(("update_user_metadata", {"data": data}))
        return {"id": "idp-user", "user_metadata": data}

    async def aclose(self):
        pass


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def identity_client():
    return FakeIdentityClient()


@pytest.fixture
async def client(test_engine, test_session_factory, identity_client):
    """FastAPI test client with DB, token verifier and IdP overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    verifier = TokenVerifier(
        secret=TEST_SECRET, algorithms=["HS256"], audience=TEST_AUDIENCE,
    )
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_token_verifier] = lambda: verifier
    app.dependency_overrides[get_identity_client] = lambda: identity_client
    app.state.dashboard_cache = DashboardCache(60)

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def seed_user(test_session_factory):
    """Insert a directory record directly; returns the User."""
    async def _seed(sub: str, email: str, role: Role = Role.USER, name: str = "Seeded"):
        async with test_session_factory() as session:
            user = User(id=sub, email=email, name=name, role=role.value)
            session.add(user)
            await session.commit()
            return user
    return _seed


@pytest.fixture
def user_headers():
    return bearer("user-1", "user1@campus.edu", name="Ursula")


@pytest.fixture
def other_headers():
    return bearer("user-2", "user2@campus.edu", name="Otto")


@pytest.fixture
async def admin_headers(seed_user):
    await seed_user("admin-1", "admin@campus.edu", Role.ADMIN, name="Ada")
    return bearer("admin-1", "admin@campus.edu")


@pytest.fixture
def event_payload():
    return {
        "title": "Spring Hackathon",
        "description": "48 hours of building",
        "date": "2026-11-20T18:00:00Z",
        "location": "Library Hall",
        "category": "tech",
    }


@pytest.fixture
def create_event(client, event_payload):
    """POST an event as the given caller; returns the response JSON."""
    async def _create(headers, **overrides):
        res = await client.post(
            "/api/events", json={**event_payload, **overrides}, headers=headers,
        )
        assert res.status_code == 201, res.text
        return res.json()
    return _create


@pytest.fixture
def approved_event(client, create_event, user_headers, admin_headers):
    """An event created by user-1 and approved by admin-1."""
    async def _approved(**overrides):
        event = await create_event(user_headers, **overrides)
        res = await client.post(
            f"/api/events/{event['id']}/approve", headers=admin_headers,
        )
        assert res.status_code == 200, res.text
        return res.json()
    return _approved


@pytest.fixture
def headers_for():
    """Build Authorization headers for an arbitrary subject."""
    return bearer
