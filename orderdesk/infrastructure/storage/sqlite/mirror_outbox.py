"""SQLite implementation of the mirror-write outbox."""

from datetime import datetime

import aiosqlite

from orderdesk.config import get_logger
from orderdesk.core.entities.base import utcnow
from orderdesk.core.entities.ledger import MirrorWrite
from orderdesk.core.interfaces.mirror_outbox import IMirrorOutbox
from orderdesk.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteMirrorOutbox(IMirrorOutbox):
    """Pending mirror writes, drained by the reconciler."""

    async def enqueue(self, entry: MirrorWrite) -> MirrorWrite:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO mirror_outbox (
                    order_id, source_namespace, target_namespace,
                    attempted_status, error, attempts, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.order_id,
                    entry.source_namespace,
                    entry.target_namespace,
                    entry.attempted_status,
                    entry.error,
                    entry.attempts,
                    entry.created_at.isoformat(),
                ),
            )
            entry.id = cursor.lastrowid

        logger.info(
            "mirror_write_enqueued",
            outbox_id=entry.id,
            order_id=entry.order_id,
            target=entry.target_namespace,
        )
        return entry

    async def list_pending(self, limit: int = 100, max_attempts: int | None = None) -> list[MirrorWrite]:
        query = "SELECT * FROM mirror_outbox WHERE resolved_at IS NULL"
        params: list = []
        if max_attempts is not None:
            query += " AND attempts < ?"
            params.append(max_attempts)
        query += " ORDER BY id LIMIT ?"
        params.append(limit)

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_entry(r) for r in rows]

    async def mark_resolved(self, entry_id: int) -> None:
        async with get_transaction() as conn:
            await conn.execute(
                "UPDATE mirror_outbox SET resolved_at = ? WHERE id = ?",
                (utcnow().isoformat(), entry_id),
            )

    async def mark_failed(self, entry_id: int, error: str) -> None:
        async with get_transaction() as conn:
            await conn.execute(
                "UPDATE mirror_outbox SET attempts = attempts + 1, error = ? WHERE id = ?",
                (error, entry_id),
            )

    async def resolve_for_order(self, order_id: str, target_namespace: str) -> int:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE mirror_outbox SET resolved_at = ?
                WHERE order_id = ? AND target_namespace = ? AND resolved_at IS NULL
                """,
                (utcnow().isoformat(), order_id, target_namespace),
            )
            return cursor.rowcount

    @staticmethod
    def _row_to_entry(row: aiosqlite.Row) -> MirrorWrite:
        return MirrorWrite(
            id=row["id"],
            order_id=row["order_id"],
            source_namespace=row["source_namespace"],
            target_namespace=row["target_namespace"],
            attempted_status=row["attempted_status"],
            error=row["error"] or "",
            attempts=row["attempts"],
            created_at=datetime.fromisoformat(row["created_at"]),
            resolved_at=datetime.fromisoformat(row["resolved_at"]) if row["resolved_at"] else None,
        )
