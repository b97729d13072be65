"""API tests for ledger reconciliation."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from orderdesk.api.dependencies import get_reconcile_use_case
from orderdesk.api.main import app
from orderdesk.application.use_cases.reconcile_ledgers import ReconcileLedgersUseCase
from orderdesk.core.services import ReconcileReport


@pytest.fixture
def mock_reconcile_uc():
    uc = AsyncMock(spec=ReconcileLedgersUseCase)
    report = ReconcileReport(
        processed=3,
        repaired=2,
        failed=1,
        errors=[{"order_id": "ord-1", "outbox_id": 4, "error": "source record missing"}],
    )
    uc.execute.return_value = report
    uc.to_response.return_value = ReconcileLedgersUseCase().to_response(report)
    return uc


@pytest.fixture
async def ledger_client(mock_reconcile_uc):
    app.dependency_overrides[get_reconcile_use_case] = lambda: mock_reconcile_uc
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_reconcile_use_case, None)


class TestReconcileAPI:
    async def test_reconcile_without_body(self, ledger_client: AsyncClient, mock_reconcile_uc):
        response = await ledger_client.post("/api/ledger/reconcile")

        assert response.status_code == 200
        data = response.json()
        assert data["repaired"] == 2
        assert data["errors"][0]["outbox_id"] == 4
        mock_reconcile_uc.execute.assert_awaited_once_with(limit=None)

    async def test_reconcile_with_limit(self, ledger_client: AsyncClient, mock_reconcile_uc):
        response = await ledger_client.post("/api/ledger/reconcile", json={"limit": 25})

        assert response.status_code == 200
        mock_reconcile_uc.execute.assert_awaited_once_with(limit=25)

    async def test_limit_must_be_positive(self, ledger_client: AsyncClient):
        response = await ledger_client.post("/api/ledger/reconcile", json={"limit": 0})

        assert response.status_code == 422
