"""SQLite implementation of proforma defaults storage."""

import json

from orderdesk.core.entities.base import utcnow
from orderdesk.core.entities.proforma_defaults import ProformaDefaults
from orderdesk.core.interfaces.proforma_defaults_store import IProformaDefaultsStore
from orderdesk.infrastructure.storage.sqlite.connection import get_connection, get_transaction


class SQLiteProformaDefaultsStore(IProformaDefaultsStore):
    """Global record stored with buyer_id ''."""

    async def get(self, seller_id: str, buyer_id: str | None = None) -> ProformaDefaults | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT payload FROM proforma_defaults WHERE seller_id = ? AND buyer_id = ?",
                (seller_id, buyer_id or ""),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return ProformaDefaults.model_validate(json.loads(row["payload"]))

    async def save(self, defaults: ProformaDefaults) -> ProformaDefaults:
        defaults.updated_at = utcnow()
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO proforma_defaults (seller_id, buyer_id, payload, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(seller_id, buyer_id) DO UPDATE SET
                    payload = excluded.payload,
                    updated_at = excluded.updated_at
                """,
                (
                    defaults.seller_id,
                    defaults.buyer_id or "",
                    json.dumps(defaults.model_dump(mode="json", by_alias=True)),
                    defaults.updated_at.isoformat(),
                ),
            )
        return defaults
