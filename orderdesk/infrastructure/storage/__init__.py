"""Storage infrastructure implementations."""

from orderdesk.infrastructure.storage.sqlite import (
    SQLiteInvoiceStore,
    SQLiteMirrorOutbox,
    SQLiteOrderRecordStore,
    SQLiteProformaDefaultsStore,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteOrderRecordStore",
    "SQLiteInvoiceStore",
    "SQLiteMirrorOutbox",
    "SQLiteProformaDefaultsStore",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
