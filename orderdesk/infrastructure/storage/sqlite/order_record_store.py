"""SQLite implementation of per-namespace order records."""

from orderdesk.config import get_logger
from orderdesk.core.entities.base import utcnow
from orderdesk.core.entities.order import Order, OrderStatus
from orderdesk.core.interfaces.order_record_store import IOrderRecordStore
from orderdesk.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from orderdesk.infrastructure.storage.sqlite.record_codec import decode_order, encode_order

logger = get_logger(__name__)


class SQLiteOrderRecordStore(IOrderRecordStore):
    """Order copies stored as JSON documents keyed by (namespace, order_id)."""

    async def put(self, namespace: str, order: Order) -> None:
        """Create or overwrite; last write wins."""
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO order_records (
                    namespace, order_id, status, buyer_id, seller_id,
                    payload, created_at, updated_at, written_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(namespace, order_id) DO UPDATE SET
                    status = excluded.status,
                    buyer_id = excluded.buyer_id,
                    seller_id = excluded.seller_id,
                    payload = excluded.payload,
                    updated_at = excluded.updated_at,
                    written_at = excluded.written_at
                """,
                (
                    namespace,
                    order.id,
                    order.status.value,
                    order.buyer.business_id,
                    order.seller.business_id,
                    encode_order(order),
                    order.created_at.isoformat(),
                    order.updated_at.isoformat(),
                    utcnow().isoformat(),
                ),
            )
        logger.debug("order_record_written", namespace=namespace, order_id=order.id, status=order.status.value)

    async def get(self, namespace: str, order_id: str) -> Order | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT payload FROM order_records WHERE namespace = ? AND order_id = ?",
                (namespace, order_id),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return decode_order(row["payload"])

    async def list_orders(
        self,
        namespace: str,
        statuses: list[OrderStatus] | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Order]:
        query = "SELECT payload FROM order_records WHERE namespace = ?"
        params: list = [namespace]
        if statuses:
            query += f" AND status IN ({', '.join('?' for _ in statuses)})"
            params.extend(s.value for s in statuses)
        query += " ORDER BY updated_at DESC, order_id LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [decode_order(row["payload"]) for row in rows]
