"""Tests for settings and service factories."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from orderdesk.application.services import (
    get_invoice_materializer,
    get_ledger_synchronizer,
    get_proforma_calculator,
    get_status_machine,
    reset_services,
)
from orderdesk.config import get_settings
from orderdesk.core.entities import RoundRule


@pytest.fixture(autouse=True)
def fresh_services():
    reset_services()
    yield
    reset_services()


class TestSettings:
    def test_defaults(self):
        settings = get_settings()

        assert settings.pricing.verify_tolerance == 0.01
        assert settings.ledger.reconcile_batch_size == 100
        assert settings.invoice.number_prefix == "INV-"
        assert settings.storage.db_path.name == "orderdesk.db"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("PRICING_ROUNDING_ENABLED", "true")
        monkeypatch.setenv("PRICING_ROUND_RULE", "UP")
        monkeypatch.setenv("LEDGER_MAX_ATTEMPTS", "3")
        monkeypatch.setenv("INVOICE_NUMBER_PREFIX", "DI/")

        settings = get_settings()

        assert settings.pricing.rounding_enabled is True
        assert settings.pricing.round_rule == "UP"
        assert settings.ledger.max_attempts == 3
        assert settings.invoice.number_prefix == "DI/"


class TestServiceFactories:
    def test_calculator_uses_pricing_settings(self, monkeypatch):
        monkeypatch.setenv("PRICING_ROUNDING_ENABLED", "true")
        monkeypatch.setenv("PRICING_ROUND_RULE", "DOWN")

        calculator = get_proforma_calculator()

        assert calculator is get_proforma_calculator()
        assert calculator._default_rounding.enabled is True
        assert calculator._default_rounding.rule is RoundRule.DOWN
        assert calculator._tolerance == Decimal("0.01")

    def test_status_machine_singleton(self):
        assert get_status_machine() is get_status_machine()

    async def test_synchronizer_with_injected_stores(self, monkeypatch):
        monkeypatch.setenv("LEDGER_MAX_ATTEMPTS", "4")
        records, outbox = AsyncMock(), AsyncMock()

        synchronizer = await get_ledger_synchronizer(records, outbox)

        assert synchronizer._max_attempts == 4

    async def test_materializer_with_injected_store(self, monkeypatch):
        monkeypatch.setenv("INVOICE_NUMBER_PREFIX", "DI/")

        materializer = await get_invoice_materializer(AsyncMock())

        assert materializer._prefix == "DI/"
