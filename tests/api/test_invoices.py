"""API tests for invoice endpoints."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from orderdesk.api.dependencies import get_backfill_use_case, get_invoices
from orderdesk.api.main import app
from orderdesk.application.use_cases.backfill_invoices import (
    BackfillInvoicesResult,
    BackfillInvoicesUseCase,
)
from orderdesk.core.services import InvoiceMaterializer


@pytest.fixture
def sample_invoice(delivered_order, calculator):
    return InvoiceMaterializer(invoice_store=AsyncMock(), calculator=calculator).build_invoice(
        delivered_order
    )


@pytest.fixture
def mock_invoice_store(sample_invoice):
    store = AsyncMock()
    store.get_by_order.return_value = sample_invoice
    store.list_invoices.return_value = [sample_invoice]
    return store


@pytest.fixture
def mock_backfill_uc():
    uc = AsyncMock(spec=BackfillInvoicesUseCase)
    result = BackfillInvoicesResult(scanned=4, created=1, skipped=3)
    uc.execute.return_value = result
    uc.to_response.return_value = BackfillInvoicesUseCase().to_response(result)
    return uc


@pytest.fixture
async def invoices_client(mock_invoice_store, mock_backfill_uc):
    app.dependency_overrides[get_invoices] = lambda: mock_invoice_store
    app.dependency_overrides[get_backfill_use_case] = lambda: mock_backfill_uc
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_invoices, None)
    app.dependency_overrides.pop(get_backfill_use_case, None)


class TestInvoicesAPI:
    async def test_get_invoice(self, invoices_client: AsyncClient):
        response = await invoices_client.get("/api/invoices/ord-20240601-abc123")

        assert response.status_code == 200
        data = response.json()
        assert data["invoice_number"] == "INV-ABC123"
        assert data["seller_id"] == "seller-001"
        assert data["grand_total"] == 236.0
        assert data["record"]["orderId"] == "ord-20240601-abc123"

    async def test_missing_invoice_is_404(self, invoices_client: AsyncClient, mock_invoice_store):
        mock_invoice_store.get_by_order.return_value = None

        response = await invoices_client.get("/api/invoices/ord-nope")

        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "INVOICE_NOT_FOUND"
        assert "backfill" in data["hint"]

    async def test_list_by_buyer(self, invoices_client: AsyncClient, mock_invoice_store):
        response = await invoices_client.get("/api/invoices", params={"buyer_id": "buyer-001"})

        assert response.status_code == 200
        assert response.json()["total"] == 1
        mock_invoice_store.list_invoices.assert_awaited_once_with(
            seller_id=None, buyer_id="buyer-001", limit=100, offset=0
        )

    async def test_backfill(self, invoices_client: AsyncClient, mock_backfill_uc):
        response = await invoices_client.post("/api/invoices/backfill", json={"seller_id": "seller-001"})

        assert response.status_code == 200
        assert response.json()["created"] == 1
        request = mock_backfill_uc.execute.call_args.args[0]
        assert request.seller_id == "seller-001"
        assert request.limit is None

    async def test_backfill_requires_seller(self, invoices_client: AsyncClient):
        response = await invoices_client.post("/api/invoices/backfill", json={})

        assert response.status_code == 422
