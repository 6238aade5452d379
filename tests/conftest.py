import os
from datetime import datetime

# Keep rate limits out of the way and never touch the default database file
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession  # noqa: E402

from app.api.endpoints import get_clock  # noqa: E402
from app.db import models  # noqa: E402,F401
from app.db.repository import SQLTodoRepository  # noqa: E402
from app.db.session import get_session  # noqa: E402
from app.db.sqlite_adapter import SQLiteAdapter  # noqa: E402
from app.main import app  # noqa: E402
from app.services.todo_service import TodoService  # noqa: E402

# ============================================================================
# Test database: in-memory SQLite shared through StaticPool
# ============================================================================
# 1. One engine per test, so every test starts from an empty table and
#    all I/O stays on the test's own event loop
# 2. StaticPool makes every session see the same :memory: database
# 3. Tables are created explicitly, not through app startup
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# A Wednesday: the current week runs through Saturday 2026-10-24
FROZEN_NOW = datetime(2026, 10, 21, 9, 30)


@pytest_asyncio.fixture
async def engine():
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(
        engine,
        class_=SQLModelAsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def now() -> datetime:
    return FROZEN_NOW


@pytest.fixture
def repository(session) -> SQLTodoRepository:
    return SQLTodoRepository(session, SQLiteAdapter())


@pytest.fixture
def service(repository, now) -> TodoService:
    return TodoService(repository, clock=lambda: now)


@pytest_asyncio.fixture
async def client(session_maker, now):
    """
    HTTP client bound to the app with the session and clock overridden.

    Overrides are installed before the client exists and cleared after it
    closes, so the app never opens its own engine.
    """
    async def override_get_session():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_clock] = lambda: (lambda: now)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
