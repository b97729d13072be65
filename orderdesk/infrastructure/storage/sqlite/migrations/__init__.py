"""Versioned SQL migrations."""

from orderdesk.infrastructure.storage.sqlite.migrations.migrator import (
    get_migration_status,
    initialize_database,
    run_migrations,
    verify_schema_integrity,
)

__all__ = [
    "initialize_database",
    "run_migrations",
    "get_migration_status",
    "verify_schema_integrity",
]
