"""Tests for SQLite proforma defaults store."""

import pytest

from orderdesk.core.entities import ProformaDefaults, RoundRule
from orderdesk.infrastructure.storage.sqlite.proforma_defaults_store import (
    SQLiteProformaDefaultsStore,
)


@pytest.fixture
def store(sqlite_pool) -> SQLiteProformaDefaultsStore:
    return SQLiteProformaDefaultsStore()


class TestSQLiteProformaDefaultsStore:
    async def test_missing(self, store):
        assert await store.get("seller-001") is None

    async def test_global_and_override_are_separate(self, store):
        await store.save(ProformaDefaults(seller_id="seller-001", delivery_fee=60))
        await store.save(
            ProformaDefaults(seller_id="seller-001", buyer_id="buyer-001", delivery_fee=0)
        )

        seller_global = await store.get("seller-001")
        override = await store.get("seller-001", "buyer-001")

        assert seller_global.delivery_fee == 60.0
        assert seller_global.buyer_id is None
        assert override.delivery_fee == 0.0
        assert override.is_override
        assert await store.get("seller-001", "buyer-999") is None

    async def test_save_replaces(self, store):
        await store.save(ProformaDefaults(seller_id="seller-001", packing_fee=10))
        await store.save(
            ProformaDefaults(seller_id="seller-001", round_enabled=True, round_rule=RoundRule.DOWN)
        )

        stored = await store.get("seller-001")

        assert stored.packing_fee is None
        assert stored.round_enabled is True
        assert stored.round_rule is RoundRule.DOWN
