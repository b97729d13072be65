"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

import orderdesk.infrastructure.storage.sqlite.connection as conn_module
from orderdesk.infrastructure.storage.sqlite.connection import close_pool
from orderdesk.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def initialized_db(temp_db_path: Path) -> Path:
    """Temporary database with every migration applied."""
    await initialize_database(temp_db_path, create_backup_before=False)
    return temp_db_path


@pytest.fixture
def mock_settings(temp_db_path: Path):
    """Mock settings with temp database path."""
    mock = MagicMock()
    mock.storage.db_path = temp_db_path
    mock.storage.pool_size = 1
    mock.storage.busy_timeout = 5000
    mock.storage.journal_mode = "WAL"
    return mock


@pytest.fixture
async def sqlite_pool(initialized_db: Path, mock_settings) -> AsyncGenerator[Path, None]:
    """Global pool pointed at the temp database for the duration of a test."""
    conn_module._pool = None
    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        try:
            yield initialized_db
        finally:
            await close_pool()
