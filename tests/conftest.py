"""Root conftest: test infrastructure for all backend tests.

Provides:
- Safety guard: require PROFILES_TESTS_ENABLED=1 for hosted-database tests
- Transaction-rollback db_session fixture for DB integration tests
- Caller fixtures (AuthenticatedUser) for the API and the domain layer
- API clients with dependency overrides and a mocked session
- Autouse mock for the Supabase admin client
"""

from __future__ import annotations

import os
import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event, pool
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

from app.api.deps.auth import AuthenticatedUser
from app.config.settings import settings

# ─────────────────────────────────────────────────────────────────────────────
# Safety Guard
# ─────────────────────────────────────────────────────────────────────────────


def pytest_configure(config: pytest.Config) -> None:
    """Safety check: require explicit opt-in for hosted-database tests.

    Unit and API tests (mocked sessions) run without this flag. Integration
    tests that touch a Supabase database require PROFILES_TESTS_ENABLED=1.
    """
    config.addinivalue_line("markers", "integration: DB integration tests (transaction rollback)")

    if any("integration" in str(arg) for arg in config.invocation_params.args):
        db_url = settings.database_url_direct
        if "supabase" in db_url and not os.getenv("PROFILES_TESTS_ENABLED"):
            pytest.exit(
                "SAFETY: Set PROFILES_TESTS_ENABLED=1 to confirm running tests "
                "against a hosted database.",
                returncode=1,
            )


# ─────────────────────────────────────────────────────────────────────────────
# Transaction-Rollback Engine (uses DIRECT connection, not pooler)
# ─────────────────────────────────────────────────────────────────────────────

# PgBouncer transaction pooling (port 6543) breaks SAVEPOINTs because it
# may multiplex connections across transactions. Use direct (port 5432).
# NullPool: every test runs on its own event loop, so connections are not reused.
TEST_ENGINE = create_async_engine(
    settings.database_url_direct,
    echo=False,
    poolclass=pool.NullPool,
    connect_args={
        "command_timeout": 30,
    },
)


@pytest.fixture
async def db_session():
    """Database session wrapped in a transaction that is ALWAYS rolled back.

    Uses SAVEPOINT so tests can call commit() internally without
    actually committing; the outer transaction absorbs it.

    The session starts as the connection's login role (the table owner),
    which bypasses RLS. Tests switch to a caller with app.core.rls helpers.
    """
    async with TEST_ENGINE.connect() as conn:
        trans = await conn.begin()
        session = AsyncSession(bind=conn, expire_on_commit=False)
        await conn.begin_nested()

        @event.listens_for(session.sync_session, "after_transaction_end")
        def restart_savepoint(session_sync, transaction):
            """Restart SAVEPOINT after each nested transaction ends."""
            if transaction.nested and not transaction._parent.nested:
                session_sync.begin_nested()

        try:
            yield session
        finally:
            await session.close()
            await trans.rollback()


# ─────────────────────────────────────────────────────────────────────────────
# Callers
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def test_user() -> AuthenticatedUser:
    """The signed-in caller for API tests."""
    return AuthenticatedUser(
        id=uuid.uuid4(),
        email=f"__test_{uuid.uuid4().hex[:8]}@example.com",
        full_name="Test User",
    )


@pytest.fixture
def second_user() -> AuthenticatedUser:
    """A different signed-in caller, for cross-user visibility tests."""
    return AuthenticatedUser(
        id=uuid.uuid4(),
        email=f"__test_second_{uuid.uuid4().hex[:8]}@example.com",
        full_name="Second User",
    )


# ─────────────────────────────────────────────────────────────────────────────
# API Clients (mocked session)
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def mock_db() -> AsyncMock:
    """Stand-in AsyncSession for API tests. Domain operations are patched per test."""
    db = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
async def api_client(mock_db: AsyncMock, test_user: AuthenticatedUser):
    """HTTP client that bypasses JWT auth and uses the mocked session.

    Overrides: get_current_user, get_db, get_db_with_rls
    """
    from app.api.deps.auth import get_current_user, get_db_with_rls
    from app.core.database import get_db
    from app.main import app

    app.dependency_overrides[get_current_user] = lambda: test_user

    async def override_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_db_with_rls] = override_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def unauth_client(mock_db: AsyncMock):
    """HTTP client with no Authorization header. Only the session is mocked."""
    from app.core.database import get_db
    from app.main import app

    async def override_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# ─────────────────────────────────────────────────────────────────────────────
# External Service Mocks
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def mock_external_services():
    """SAFETY: Never reach the real Supabase Auth admin API from tests."""
    with patch("app.services.supabase.get_supabase_admin_client") as mock_client_factory:
        client = MagicMock()
        client.auth.admin.create_user.return_value = MagicMock(user=MagicMock(id=str(uuid.uuid4())))
        client.auth.admin.delete_user.return_value = None
        mock_client_factory.return_value = client

        yield {"supabase": client}
