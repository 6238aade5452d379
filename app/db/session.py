"""
Engine and Session Setup

One engine per process, built by the adapter that matches DATABASE_URL.
Each request gets its own AsyncSession through get_session(); the todo
repository commits its own writes, and whatever is still pending when the
request ends is committed here, or rolled back if the request failed.
"""

import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from app.core.setting import settings
from app.db.interface import get_database_adapter

logger = logging.getLogger(__name__)

db_adapter = get_database_adapter(settings.DATABASE_URL)
engine = db_adapter.create_engine(settings.DATABASE_URL)

async_session_maker = async_sessionmaker(
    engine,
    class_=SQLModelAsyncSession,
    expire_on_commit=False,  # Returned todos stay readable after commit
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a request-scoped session.

    Example:
        @router.get("/api/todos")
        async def list_todos(session: AsyncSession = Depends(get_session)):
            ...
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """
    Create the todos table if it does not exist yet.

    Schema changes go through Alembic; this only bootstraps an empty
    database when AUTO_CREATE_TABLES is on.
    """
    from app.db import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info(f"Database tables ensured ({db_adapter.get_dialect_name()})")
