"""Pytest fixtures for the NEPSE portfolio backend test suite.

Provides:
- Async in-memory SQLite test database with full schema
- FastAPI async test client (httpx.AsyncClient + ASGITransport) with a fresh
  cache, a stub quote source and a token verifier on ``app.state``
- Users with signed tokens, and a seeded portfolio factory
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

# ---------------------------------------------------------------------------
# Test database engine & session factory (in-memory SQLite)
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_JWT_SECRET = "test-secret-0123456789abcdefghijkl"

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
)

TestSessionFactory = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ---------------------------------------------------------------------------
# Stubs
# ---------------------------------------------------------------------------


class StubQuoteSource:
    """Quote source returning a fixed payload and counting upstream calls.

    Set ``error`` to an exception instance to simulate an outage.
    """

    def __init__(self, payload: Any = None):
        self.payload = payload if payload is not None else []
        self.error: Exception | None = None
        self.calls = 0

    async def fetch_live_data(self) -> Any:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.payload


def sign_token(
    user_id: int,
    email: str,
    name: str,
    secret: str = TEST_JWT_SECRET,
    lifetime: timedelta = timedelta(days=7),
) -> str:
    """Sign a token the way the login service does: HS256 over {id, email, name, exp}."""
    payload = {
        "id": user_id,
        "email": email,
        "name": name,
        "exp": datetime.now(timezone.utc) + lifetime,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


class FakeClock:
    """Manually advanced monotonic clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an isolated async database session backed by in-memory SQLite.

    Creates all tables before the test and drops them afterwards so every test
    starts with a clean schema.
    """
    from database import Base  # noqa: E402  -- deferred to avoid circular imports

    # Import all model modules so Base.metadata knows about every table.
    import models  # noqa: F401

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionFactory() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


# ---------------------------------------------------------------------------
# App fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def quote_source() -> StubQuoteSource:
    """Upstream stub shared by the app's market data service."""
    return StubQuoteSource(
        [
            {"symbol": "NABIL", "lastTradedPrice": 550.0, "securityName": "Nabil Bank"},
            {"symbol": "NIMB", "lastTradedPrice": 200.0, "securityName": "Nepal Investment Mega Bank"},
        ]
    )


@pytest.fixture()
def make_token():
    """Token signer for tests that need custom claims, secrets or lifetimes."""
    return sign_token


@pytest.fixture()
def verifier():
    from services.auth import JWTAuthVerifier

    return JWTAuthVerifier(TEST_JWT_SECRET)


@pytest.fixture()
async def client(
    db_session: AsyncSession,
    quote_source: StubQuoteSource,
    verifier,
) -> AsyncGenerator[AsyncClient, None]:
    """Provide an ``httpx.AsyncClient`` wired to the FastAPI app.

    The ``get_db`` dependency (from both ``database`` and ``api.deps``) is
    overridden so every request handler receives the test session. The
    lifespan does not run under ``ASGITransport``, so the state it would
    create is installed here.
    """
    from main import app  # noqa: E402
    from database import get_db as database_get_db  # noqa: E402
    from api.deps import get_db as deps_get_db  # noqa: E402
    from services.cache import TTLCache  # noqa: E402
    from services.market_data import MarketDataService  # noqa: E402

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[database_get_db] = _override_get_db
    app.dependency_overrides[deps_get_db] = _override_get_db

    cache = TTLCache()
    app.state.cache = cache
    app.state.market_data = MarketDataService(quote_source, cache, ttl_seconds=30)
    app.state.auth_verifier = verifier

    transport = ASGITransport(app=app)  # type: ignore[arg-type]
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture()
def app_cache(client: AsyncClient):
    """The cache instance installed on the app for this test."""
    from main import app

    return app.state.cache


# ---------------------------------------------------------------------------
# Users and auth
# ---------------------------------------------------------------------------


async def _create_user(db: AsyncSession, name: str, email: str):
    from models.user import User

    user = User(name=name, email=email, password_hash="not-a-real-hash")
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture()
async def user(db_session: AsyncSession):
    return await _create_user(db_session, "Sita Sharma", "sita@example.com")


@pytest.fixture()
async def other_user(db_session: AsyncSession):
    return await _create_user(db_session, "Ram Thapa", "ram@example.com")


def _bearer(account) -> dict[str, str]:
    token = sign_token(account.id, account.email, account.name)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def auth_headers(user) -> dict[str, str]:
    return _bearer(user)


@pytest.fixture()
def other_headers(other_user) -> dict[str, str]:
    return _bearer(other_user)


# ---------------------------------------------------------------------------
# Sample data fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
async def portfolio(db_session: AsyncSession, user):
    """Insert and return an empty live portfolio owned by ``user``."""
    from models.portfolio import Portfolio

    row = Portfolio(
        user_id=user.id,
        name="Long Term",
        initial_balance=100_000.0,
        current_balance=100_000.0,
    )
    db_session.add(row)
    await db_session.commit()
    await db_session.refresh(row)
    return row
