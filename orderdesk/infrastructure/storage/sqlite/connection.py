"""
Shared aiosqlite pool behind the order, invoice, outbox and defaults stores.

Stores borrow connections through ``get_connection`` or ``get_transaction``;
the pool is created lazily from the storage settings on first use.
"""

import asyncio
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from orderdesk.config import get_logger, get_settings

logger = get_logger(__name__)


class ConnectionPool:
    """Connections opened up front with the storage pragmas, handed out through a queue."""

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
        journal_mode: str = "WAL",
    ):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout
        self.journal_mode = journal_mode

        self._pool: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._connections: list[aiosqlite.Connection] = []
        self._initialized = False
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        async with self._lock:
            if self._initialized:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            for _ in range(self.pool_size):
                conn = await self._create_connection()
                self._connections.append(conn)
                await self._pool.put(conn)

            self._initialized = True
            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
                journal_mode=self.journal_mode,
            )

    async def _create_connection(self) -> aiosqlite.Connection:
        conn = await aiosqlite.connect(self.db_path)
        await conn.execute(f"PRAGMA journal_mode={self.journal_mode}")
        await conn.execute("PRAGMA synchronous=NORMAL")
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        if not self._initialized:
            await self.initialize()

        conn = await self._pool.get()
        try:
            yield conn
        finally:
            await self._pool.put(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Commits on success, rolls back on exception."""
        async with self.acquire() as conn:
            try:
                yield conn
                await conn.commit()
            except Exception:
                await conn.rollback()
                raise

    async def ping(self) -> float:
        """Round-trip a trivial query; returns latency in ms."""
        start = time.perf_counter()
        async with self.acquire() as conn:
            await conn.execute("SELECT 1")
        return (time.perf_counter() - start) * 1000

    async def close(self) -> None:
        async with self._lock:
            for conn in self._connections:
                await conn.close()
            self._connections.clear()
            self._initialized = False
            logger.info("connection_pool_closed")


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    global _pool
    if _pool is None:
        settings = get_settings()
        _pool = ConnectionPool(
            db_path=settings.storage.db_path,
            pool_size=settings.storage.pool_size,
            busy_timeout=settings.storage.busy_timeout,
            journal_mode=settings.storage.journal_mode,
        )
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    pool = await get_pool()
    async with pool.transaction() as conn:
        yield conn
