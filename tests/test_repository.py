"""
Tests for the SQL repository and the database adapters.
"""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import NullPool

from app.core.exceptions import StorageError
from app.db.interface import get_database_adapter
from app.db.models import Todo
from app.db.postgres_adapter import PostgreSQLAdapter
from app.db.sqlite_adapter import SQLiteAdapter

BASE = datetime(2026, 10, 21, 12, 0)


class TestSQLTodoRepository:
    @pytest.mark.asyncio
    async def test_insert_assigns_sequential_ids(self, repository):
        first = await repository.insert(Todo(title="One", expires_at=BASE))
        second = await repository.insert(Todo(title="Two", expires_at=BASE))
        assert (first.id, second.id) == (1, 2)

    @pytest.mark.asyncio
    async def test_find_by_id_for_update(self, repository):
        created = await repository.insert(Todo(title="Locked", expires_at=BASE))
        found = await repository.find_by_id(created.id, for_update=True)
        assert found is not None
        assert found.title == "Locked"

    @pytest.mark.asyncio
    async def test_query_by_expiry_is_inclusive_and_ordered(self, repository):
        start = BASE
        end = BASE + timedelta(hours=2)
        await repository.insert(Todo(title="end", expires_at=end))
        await repository.insert(Todo(title="start", expires_at=start))
        await repository.insert(Todo(title="before", expires_at=start - timedelta(microseconds=1)))
        await repository.insert(Todo(title="after", expires_at=end + timedelta(microseconds=1)))

        todos = await repository.query_by_expiry(start, end)
        assert [todo.title for todo in todos] == ["start", "end"]

    @pytest.mark.asyncio
    async def test_update_commits(self, repository, session_maker):
        created = await repository.insert(Todo(title="Before", expires_at=BASE))
        created.title = "After"
        await repository.update(created)

        async with session_maker() as other_session:
            result = await other_session.execute(select(Todo.title).where(Todo.id == created.id))
            assert result.scalar_one() == "After"

    @pytest.mark.asyncio
    async def test_delete_reports_whether_a_row_was_removed(self, repository):
        created = await repository.insert(Todo(title="Gone", expires_at=BASE))
        assert await repository.delete(created.id) is True
        assert await repository.delete(created.id) is False

    @pytest.mark.asyncio
    async def test_constraint_violation_becomes_storage_error(self, repository):
        with pytest.raises(StorageError) as exc_info:
            await repository.insert(Todo(title=None, expires_at=BASE))

        assert isinstance(exc_info.value.original_error, IntegrityError)
        assert str(exc_info.value).startswith("Storage error:")

        # The failed transaction was rolled back and left nothing behind
        assert await repository.find_all() == []
        survivor = await repository.insert(Todo(title="Still works", expires_at=BASE))
        assert survivor.id is not None

    @pytest.mark.asyncio
    async def test_failed_update_becomes_storage_error(self, repository, session_maker):
        created = await repository.insert(Todo(title="Keep", expires_at=BASE))
        created_id = created.id
        created.title = None

        with pytest.raises(StorageError) as exc_info:
            await repository.update(created)

        assert isinstance(exc_info.value.original_error, IntegrityError)
        assert f"todo {created_id}" in str(exc_info.value)

        async with session_maker() as other_session:
            result = await other_session.execute(select(Todo.title).where(Todo.id == created_id))
            assert result.scalar_one() == "Keep"

        reloaded = await repository.find_by_id(created_id)
        assert reloaded.title == "Keep"


class TestDatabaseAdapters:
    def test_factory_picks_adapter_from_url(self):
        assert isinstance(get_database_adapter("sqlite+aiosqlite:///./todos.db"), SQLiteAdapter)
        assert isinstance(get_database_adapter("postgresql+asyncpg://u:p@db/todos"), PostgreSQLAdapter)

    def test_factory_rejects_unknown_scheme(self):
        with pytest.raises(ValueError):
            get_database_adapter("mysql+aiomysql://u:p@db/todos")

    def test_sqlite_adapter_configuration(self):
        adapter = SQLiteAdapter()
        assert adapter.get_pool_class() is NullPool
        assert adapter.get_connect_args() == {"check_same_thread": False}
        assert adapter.get_dialect_name() == "sqlite"

    def test_sqlite_drops_row_lock_when_compiling(self):
        statement = SQLiteAdapter().lock_for_update(select(Todo).where(Todo.id == 1))
        compiled = str(statement.compile(dialect=sqlite.dialect()))
        assert "FOR UPDATE" not in compiled

    def test_postgres_locks_rows(self):
        adapter = PostgreSQLAdapter()
        statement = adapter.lock_for_update(select(Todo).where(Todo.id == 1))
        compiled = str(statement.compile(dialect=postgresql.dialect()))
        assert "FOR UPDATE" in compiled
        assert adapter.get_engine_kwargs()["pool_pre_ping"] is True
        assert adapter.get_dialect_name() == "postgresql"
