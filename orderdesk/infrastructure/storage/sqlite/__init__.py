"""SQLite storage implementations."""

from orderdesk.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from orderdesk.infrastructure.storage.sqlite.invoice_store import SQLiteInvoiceStore
from orderdesk.infrastructure.storage.sqlite.mirror_outbox import SQLiteMirrorOutbox
from orderdesk.infrastructure.storage.sqlite.order_record_store import SQLiteOrderRecordStore
from orderdesk.infrastructure.storage.sqlite.proforma_defaults_store import (
    SQLiteProformaDefaultsStore,
)

# Aliases used by the API lifespan
get_connection_pool = get_pool
close_connection_pool = close_pool

# Singleton instances
_order_record_store: SQLiteOrderRecordStore | None = None
_invoice_store: SQLiteInvoiceStore | None = None
_mirror_outbox: SQLiteMirrorOutbox | None = None
_proforma_defaults_store: SQLiteProformaDefaultsStore | None = None


async def get_order_record_store() -> SQLiteOrderRecordStore:
    """Get singleton order record store instance."""
    global _order_record_store
    if _order_record_store is None:
        _order_record_store = SQLiteOrderRecordStore()
    return _order_record_store


async def get_invoice_store() -> SQLiteInvoiceStore:
    """Get singleton invoice store instance."""
    global _invoice_store
    if _invoice_store is None:
        _invoice_store = SQLiteInvoiceStore()
    return _invoice_store


async def get_mirror_outbox() -> SQLiteMirrorOutbox:
    """Get singleton mirror outbox instance."""
    global _mirror_outbox
    if _mirror_outbox is None:
        _mirror_outbox = SQLiteMirrorOutbox()
    return _mirror_outbox


async def get_proforma_defaults_store() -> SQLiteProformaDefaultsStore:
    """Get singleton proforma defaults store instance."""
    global _proforma_defaults_store
    if _proforma_defaults_store is None:
        _proforma_defaults_store = SQLiteProformaDefaultsStore()
    return _proforma_defaults_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "get_connection_pool",
    "close_connection_pool",
    # Store classes
    "SQLiteOrderRecordStore",
    "SQLiteInvoiceStore",
    "SQLiteMirrorOutbox",
    "SQLiteProformaDefaultsStore",
    # Factory functions
    "get_order_record_store",
    "get_invoice_store",
    "get_mirror_outbox",
    "get_proforma_defaults_store",
]
