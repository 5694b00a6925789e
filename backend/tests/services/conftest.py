"""Service test fixtures — async DB, seeded accounts and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - db_manager patched so execution scopes open sessions on the test DB
    - Seeded rows are committed before the client is used

Design Decisions:
    - SQLite in-memory with StaticPool: every session of one test sees the
      same database (ADR: PostgreSQL-specific features not exercised here)
    - db_manager patched, not get_db overridden: the dispatcher opens its own
      scope per call through database.get_db_manager()
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

import app.models  # noqa: F401
from app.core.identity import AccessIdentity
from app.db.base import Base
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.security import get_token_service, hash_password
from app.models.user import User
import app.infrastructure.database as db_module
from app.main import app
from tests.services.accounts import ADMIN_PASSWORD, CLERK_PASSWORD


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
        connect_args={"check_same_thread": False},
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
def patched_db_manager(test_engine, test_session_factory):
    """Point the process-wide db_manager at the test engine."""
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager
    yield fake_manager
    db_module.db_manager = original_manager


@pytest.fixture
async def client(patched_db_manager):
    """FastAPI test client wired to the test DB."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
async def seed_users(test_db):
    """Insert an admin and a regular user; returns them by username."""
    admin = User(
        id="admin", username="admin", name="Administrator",
        password=hash_password(ADMIN_PASSWORD), is_system_admin=True,
    )
    clerk = User(
        id="clerk", username="clerk", name="Clerk",
        password=hash_password(CLERK_PASSWORD),
    )
    test_db.add_all([admin, clerk])
    await test_db.commit()
    return {"admin": admin, "clerk": clerk}


@pytest.fixture
def admin_identity():
    return AccessIdentity(
        user_id="admin", user_name="admin", name="Administrator", is_admin=True,
    )


@pytest.fixture
def clerk_identity():
    return AccessIdentity(user_id="clerk", user_name="clerk", name="Clerk")


@pytest.fixture
def auth_header():
    """Bearer header for a username (admin flag optional)."""
    def _header(username: str, is_admin: bool = False) -> dict:
        token = get_token_service().issue(username, is_admin, username.title())
        return {"Authorization": f"Bearer {token}"}
    return _header
