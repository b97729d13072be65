"""Tests for InvoiceMaterializer."""

from unittest.mock import AsyncMock

import pytest

from orderdesk.core.entities import (
    InvoicePaymentStatus,
    InvoiceStatus,
    OrderStatus,
    PaymentInfo,
)
from orderdesk.core.exceptions import ValidationError
from orderdesk.core.services import InvoiceMaterializer, invoice_number_for


@pytest.fixture
def mock_invoice_store():
    store = AsyncMock()
    store.get_by_order.return_value = None
    store.create_if_absent.return_value = True
    return store


@pytest.fixture
def materializer(mock_invoice_store, calculator):
    return InvoiceMaterializer(invoice_store=mock_invoice_store, calculator=calculator)


class TestInvoiceNumber:
    def test_derived_from_order_id(self, order_factory):
        assert invoice_number_for(order_factory()) == "INV-ABC123"

    def test_custom_prefix(self, order_factory):
        assert invoice_number_for(order_factory(), prefix="DI/") == "DI/ABC123"

    def test_explicit_number_wins(self, order_factory):
        assert invoice_number_for(order_factory(invoice_number="GST/24/0042")) == "GST/24/0042"


class TestMaterialize:
    async def test_creates_invoice(self, materializer, mock_invoice_store, delivered_order):
        result = await materializer.materialize(delivered_order)

        assert result.created is True
        assert result.skipped is None
        assert result.invoice.order_id == delivered_order.id
        assert result.invoice.invoice_number == "INV-ABC123"
        assert result.invoice.grand_total == 236.0
        assert result.invoice.seller.business_id == "seller-001"
        mock_invoice_store.create_if_absent.assert_awaited_once_with(result.invoice)

    async def test_invoiced_status_is_accepted(self, materializer, order_factory):
        result = await materializer.materialize(order_factory(OrderStatus.INVOICED))
        assert result.created is True

    @pytest.mark.parametrize("status", [OrderStatus.SHIPPED, OrderStatus.OUT_FOR_DELIVERY, OrderStatus.REQUESTED])
    async def test_rejects_undelivered_orders(self, materializer, mock_invoice_store, order_factory, status):
        with pytest.raises(ValidationError):
            await materializer.materialize(order_factory(status))
        mock_invoice_store.create_if_absent.assert_not_awaited()

    async def test_existing_invoice_is_skipped(self, materializer, mock_invoice_store, delivered_order):
        existing = materializer.build_invoice(delivered_order)
        mock_invoice_store.get_by_order.return_value = existing

        result = await materializer.materialize(delivered_order)

        assert result.created is False
        assert result.invoice is existing
        assert result.skipped.code == "MATERIALIZATION_SKIPPED"
        mock_invoice_store.create_if_absent.assert_not_awaited()

    async def test_lost_race_returns_winner(self, materializer, mock_invoice_store, delivered_order):
        winner = materializer.build_invoice(delivered_order)
        mock_invoice_store.get_by_order.side_effect = [None, winner]
        mock_invoice_store.create_if_absent.return_value = False

        result = await materializer.materialize(delivered_order)

        assert result.created is False
        assert result.invoice is winner
        assert result.skipped is not None

    async def test_repeat_calls_create_once(self, materializer, mock_invoice_store, delivered_order):
        first = await materializer.materialize(delivered_order)
        mock_invoice_store.get_by_order.return_value = first.invoice

        second = await materializer.materialize(delivered_order)

        assert second.created is False
        assert mock_invoice_store.create_if_absent.await_count == 1


class TestBuildInvoice:
    def test_paid_order(self, materializer, delivered_order):
        delivered_order.payment = PaymentInfo(mode="UPI", is_paid=True)
        invoice = materializer.build_invoice(delivered_order)

        assert invoice.status is InvoiceStatus.PAID
        assert invoice.payment.status is InvoicePaymentStatus.PAID

    @pytest.mark.parametrize("mode", ["CREDIT_CYCLE", "End of Month"])
    def test_credit_terms_are_payment_due(self, materializer, delivered_order, mode):
        delivered_order.payment = PaymentInfo(mode=mode, credit_days=30)
        invoice = materializer.build_invoice(delivered_order)

        assert invoice.status is InvoiceStatus.ISSUED
        assert invoice.payment.status is InvoicePaymentStatus.PAYMENT_DUE

    def test_cod_is_pending(self, materializer, delivered_order):
        delivered_order.payment = PaymentInfo(mode="Cash on Delivery")
        invoice = materializer.build_invoice(delivered_order)

        assert invoice.payment.status is InvoicePaymentStatus.PENDING
        assert invoice.payment.code == "COD"
        assert invoice.payment.mode == "Cash on Delivery"

    def test_uses_stored_breakdown(self, materializer, delivered_order):
        delivered_order.breakdown.grand_total = 240.0
        invoice = materializer.build_invoice(delivered_order)
        assert invoice.totals.grand_total == 240.0

    def test_recomputes_without_breakdown(self, materializer, order_factory):
        invoice = materializer.build_invoice(order_factory(OrderStatus.DELIVERED))
        assert invoice.totals.grand_total == 236.0
        assert invoice.totals.is_balanced()

    def test_snapshot_does_not_follow_order(self, materializer, delivered_order):
        invoice = materializer.build_invoice(delivered_order)
        delivered_order.buyer.business_name = "Renamed Traders"
        delivered_order.breakdown.grand_total = 1.0

        assert invoice.buyer.business_name == "Sharma Traders"
        assert invoice.totals.grand_total == 236.0
