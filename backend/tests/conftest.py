"""Root conftest — async DB + FastAPI test client shared by all test packages.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB session
    - get_today pinned per test so date rules cannot drift mid-test
    - db_manager patched for code paths that bypass get_db (readiness probe)

Design Decisions:
    - SQLite in-memory: fast, no external dependency; enforces uq_users_cin like PostgreSQL
    - httpx ASGITransport does not run the lifespan: init_db is never called in tests
"""

import os

# Ensure tests never reach a real database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("LOG_FORMAT", "text")

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, async_sessionmaker, create_async_engine,
)

import cin_registry.infrastructure.database as db_module  # noqa: E402
import cin_registry.models  # noqa: E402,F401
from cin_registry.api.routes.users import get_today  # noqa: E402
from cin_registry.db.base import Base  # noqa: E402
from cin_registry.infrastructure.database import (  # noqa: E402
    DatabaseSessionManager, get_db,
)
from cin_registry.main import app  # noqa: E402


@pytest.fixture
def today() -> date:
    return date.today()


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
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
async def client(test_engine, test_session_factory, today):
    """FastAPI test client with DB and clock dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: today

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
def user_payload() -> dict:
    """A valid create-user body."""
    return {
        "name": "Integration User",
        "cin": "12345678",
        "cinReleaseDate": "2022-05-10",
        "isMarried": True,
    }
