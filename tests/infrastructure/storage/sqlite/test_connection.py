"""Unit tests for SQLite connection pool."""

from pathlib import Path
from unittest.mock import patch

import aiosqlite
import pytest

import orderdesk.infrastructure.storage.sqlite.connection as conn_module
from orderdesk.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)


class TestConnectionPoolInit:
    def test_defaults(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path)

        assert pool.db_path == temp_db_path
        assert pool.pool_size == 5
        assert pool.busy_timeout == 30000
        assert pool.journal_mode == "WAL"
        assert pool._initialized is False


class TestConnectionPoolInitialize:
    async def test_initialize_creates_directory(self, tmp_path: Path):
        db_path = tmp_path / "subdir" / "nested" / "orders.db"
        pool = ConnectionPool(db_path, pool_size=1)

        await pool.initialize()
        assert db_path.parent.exists()
        await pool.close()

    async def test_initialize_idempotent(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=2)

        await pool.initialize()
        await pool.initialize()

        assert len(pool._connections) == 2
        await pool.close()

    async def test_connection_pragmas(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, busy_timeout=1234)
        conn = await pool._create_connection()
        try:
            cursor = await conn.execute("PRAGMA journal_mode")
            assert (await cursor.fetchone())[0].lower() == "wal"
            cursor = await conn.execute("PRAGMA busy_timeout")
            assert (await cursor.fetchone())[0] == 1234
            assert conn.row_factory is aiosqlite.Row
        finally:
            await conn.close()


class TestConnectionPoolUsage:
    @pytest.fixture
    async def pool(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        await pool.initialize()
        async with pool.acquire() as conn:
            await conn.execute("CREATE TABLE t (v INTEGER)")
            await conn.commit()
        yield pool
        await pool.close()

    async def test_transaction_commits(self, pool):
        async with pool.transaction() as conn:
            await conn.execute("INSERT INTO t VALUES (1)")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            assert (await cursor.fetchone())[0] == 1

    async def test_transaction_rolls_back_on_error(self, pool):
        with pytest.raises(RuntimeError):
            async with pool.transaction() as conn:
                await conn.execute("INSERT INTO t VALUES (1)")
                raise RuntimeError("boom")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            assert (await cursor.fetchone())[0] == 0

    async def test_connection_returned_to_pool(self, pool):
        async with pool.acquire():
            assert pool._pool.qsize() == 0
        assert pool._pool.qsize() == 1

    async def test_ping(self, pool):
        assert await pool.ping() >= 0


class TestGlobalPool:
    async def test_get_pool_uses_settings(self, mock_settings):
        conn_module._pool = None
        with patch.object(conn_module, "get_settings", return_value=mock_settings):
            try:
                pool = await get_pool()
                assert pool is await get_pool()
                assert pool.db_path == mock_settings.storage.db_path
                assert pool.pool_size == 1
            finally:
                await close_pool()

        assert conn_module._pool is None

    async def test_module_helpers(self, sqlite_pool):
        async with get_transaction() as conn:
            await conn.execute(
                "INSERT INTO mirror_outbox (order_id, source_namespace, target_namespace, created_at)"
                " VALUES ('o1', 's', 'b', '2024-06-01T00:00:00+00:00')"
            )

        async with get_connection() as conn:
            cursor = await conn.execute("SELECT order_id FROM mirror_outbox")
            row = await cursor.fetchone()

        assert row["order_id"] == "o1"
