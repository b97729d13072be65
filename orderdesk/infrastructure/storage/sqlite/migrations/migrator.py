"""
Database schema migrator with versioned migrations.

Supports:
- Versioned SQL migrations (v001_, v002_, etc.)
- Migration tracking in schema_migrations table
- Checksum validation of already-applied migrations
- Rollback support via backup
"""

import hashlib
import re
import shutil
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import aiosqlite

from orderdesk.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

REQUIRED_TABLES = (
    "order_records",
    "invoices",
    "mirror_outbox",
    "proforma_defaults",
    "schema_migrations",
)

_TRACKING_TABLE = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    checksum TEXT NOT NULL,
    execution_time_ms INTEGER NOT NULL DEFAULT 0,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
)
"""


@dataclass
class MigrationInfo:
    """Information about a migration file."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        """Parse migration info from filename (v001_name.sql)."""
        match = re.match(r"v(\d+)_(.+)\.sql", path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")

        content = path.read_text(encoding="utf-8")
        checksum = hashlib.sha256(content.encode()).hexdigest()[:16]
        return cls(version=match.group(1), name=match.group(2), path=path, checksum=checksum)


@dataclass
class MigrationResult:
    """Result of a migration operation."""

    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied migration versions mapped to checksums."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations ORDER BY version")
        rows = await cursor.fetchall()
        return {row[0]: row[1] for row in rows}
    except aiosqlite.OperationalError:
        # Table doesn't exist yet
        return {}


def discover_migrations() -> list[MigrationInfo]:
    """Discover all migration files in order."""
    migrations = []
    for path in sorted(MIGRATIONS_DIR.glob("v*.sql")):
        try:
            migrations.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return migrations


async def apply_migration(
    conn: aiosqlite.Connection,
    migration: MigrationInfo,
) -> MigrationResult:
    """Apply a single migration."""
    logger.info("applying_migration", version=migration.version, name=migration.name)
    start_time = time.time()

    try:
        sql = migration.path.read_text(encoding="utf-8")
        await conn.executescript(sql)

        execution_time = int((time.time() - start_time) * 1000)
        await conn.execute(
            """
            INSERT OR REPLACE INTO schema_migrations (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (migration.version, migration.name, migration.checksum, execution_time),
        )
        await conn.commit()

        logger.info(
            "migration_applied",
            version=migration.version,
            name=migration.name,
            execution_time_ms=execution_time,
        )
        return MigrationResult(
            version=migration.version,
            name=migration.name,
            success=True,
            execution_time_ms=execution_time,
        )

    except Exception as e:
        await conn.rollback()
        execution_time = int((time.time() - start_time) * 1000)
        logger.error(
            "migration_failed",
            version=migration.version,
            name=migration.name,
            error=str(e),
        )
        return MigrationResult(
            version=migration.version,
            name=migration.name,
            success=False,
            execution_time_ms=execution_time,
            error=str(e),
        )


def create_backup(db_path: Path) -> Path:
    """Create a backup of the database before migration."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_suffix(f".backup_{timestamp}.db")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def restore_backup(db_path: Path, backup_path: Path) -> None:
    shutil.copy2(backup_path, db_path)
    logger.info("database_restored_from_backup", backup_path=str(backup_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Apply all pending migrations.

    Args:
        db_path: Path to database file (default from settings)
        create_backup_before: Whether to backup before migrations

    Returns:
        List of migration results (already-applied ones are not listed)
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    logger.info("initializing_database", db_path=str(db_path))

    backup_path = None
    if create_backup_before and db_path.exists():
        backup_path = create_backup(db_path)

    results: list[MigrationResult] = []

    try:
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute(_TRACKING_TABLE)
            await conn.commit()

            applied = await get_applied_migrations(conn)

            for migration in discover_migrations():
                if migration.version in applied:
                    if applied[migration.version] != migration.checksum:
                        logger.error(
                            "migration_checksum_changed",
                            version=migration.version,
                        )
                        break
                    continue

                result = await apply_migration(conn, migration)
                results.append(result)
                if not result.success:
                    logger.error("migration_failed_stopping", version=migration.version)
                    break

            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name")
            tables = [row[0] for row in await cursor.fetchall()]
            logger.info("database_tables", count=len(tables))

        if backup_path and all(r.success for r in results):
            backup_path.unlink()
            logger.info("backup_cleaned_up")

    except Exception as e:
        logger.error("database_initialization_failed", error=str(e))
        if backup_path and backup_path.exists():
            restore_backup(db_path, backup_path)
        raise

    return results


# Alias used by the API lifespan
run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict:
    """Current migration status."""
    db_path = db_path or get_settings().storage.db_path

    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "applied_migrations": [],
            "pending_migrations": [],
        }

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)
        discovered = discover_migrations()
        pending = [m.version for m in discovered if m.version not in applied]

        return {
            "exists": True,
            "current_version": max(applied) if applied else None,
            "applied_migrations": list(applied.keys()),
            "pending_migrations": pending,
            "total_migrations": len(discovered),
        }


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """Integrity checks: SQLite integrity and required tables."""
    db_path = db_path or get_settings().storage.db_path
    checks = []

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA integrity_check")
        integrity = await cursor.fetchone()
        checks.append({
            "check": "integrity",
            "status": "PASS" if integrity[0] == "ok" else "FAIL",
            "result": integrity[0],
        })

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        existing = {row[0] for row in await cursor.fetchall()}
        missing = [t for t in REQUIRED_TABLES if t not in existing]
        checks.append({
            "check": "required_tables",
            "status": "PASS" if not missing else "FAIL",
            "missing": missing,
        })

    return checks
