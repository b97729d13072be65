"""SQLite implementation of invoice storage."""

import json

import aiosqlite

from orderdesk.config import get_logger
from orderdesk.core.entities.invoice import Invoice
from orderdesk.core.interfaces.invoice_store import IInvoiceStore
from orderdesk.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteInvoiceStore(IInvoiceStore):
    """Invoices keyed by order id; the primary key enforces one per order."""

    async def get_by_order(self, order_id: str) -> Invoice | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM invoices WHERE order_id = ?", (order_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_invoice(row)

    async def create_if_absent(self, invoice: Invoice) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO invoices (
                    order_id, invoice_number, seller_id, buyer_id,
                    status, grand_total, payload, issued_at, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(order_id) DO NOTHING
                """,
                (
                    invoice.order_id,
                    invoice.invoice_number,
                    invoice.seller.business_id,
                    invoice.buyer.business_id,
                    invoice.status.value,
                    invoice.totals.grand_total,
                    json.dumps(invoice.model_dump(mode="json", by_alias=True)),
                    invoice.issued_at.isoformat(),
                    invoice.created_at.isoformat(),
                ),
            )
            created = cursor.rowcount == 1

        if created:
            logger.info(
                "invoice_created",
                order_id=invoice.order_id,
                invoice_number=invoice.invoice_number,
                total=invoice.totals.grand_total,
            )
        return created

    async def list_invoices(
        self,
        seller_id: str | None = None,
        buyer_id: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Invoice]:
        query = "SELECT * FROM invoices WHERE 1 = 1"
        params: list = []
        if seller_id:
            query += " AND seller_id = ?"
            params.append(seller_id)
        if buyer_id:
            query += " AND buyer_id = ?"
            params.append(buyer_id)
        query += " ORDER BY issued_at DESC, order_id LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_invoice(r) for r in rows]

    @staticmethod
    def _row_to_invoice(row: aiosqlite.Row) -> Invoice:
        return Invoice.model_validate(json.loads(row["payload"]))
