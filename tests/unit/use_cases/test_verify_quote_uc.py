"""Tests for VerifyQuoteUseCase and PreviewProformaUseCase."""

from unittest.mock import AsyncMock

import pytest

from orderdesk.application.dto.requests import ProformaPreviewRequest
from orderdesk.application.use_cases.preview_proforma import PreviewProformaUseCase
from orderdesk.application.use_cases.verify_quote import VerifyQuoteUseCase
from orderdesk.core.entities import OrderStatus, RoundRule, TaxType
from orderdesk.core.exceptions import OrderNotFoundError


@pytest.fixture
def mock_record_store():
    return AsyncMock()


class TestVerifyQuoteUseCase:
    async def test_consistent(self, mock_record_store, calculator, order_factory):
        order = order_factory(OrderStatus.QUOTED)
        order.breakdown = calculator.calculate_for_order(order)
        mock_record_store.get.return_value = order
        use_case = VerifyQuoteUseCase(record_store=mock_record_store, calculator=calculator)

        response = use_case.to_response(await use_case.execute("buyer-001", order.id))

        assert response.consistent is True
        assert response.has_breakdown is True
        assert response.recomputed["grandTotal"] == 236.0

    async def test_reports_mismatch(self, mock_record_store, calculator, order_factory):
        order = order_factory(OrderStatus.QUOTED)
        order.breakdown = calculator.calculate_for_order(order)
        order.breakdown.taxable_base = 180.0
        mock_record_store.get.return_value = order
        use_case = VerifyQuoteUseCase(record_store=mock_record_store, calculator=calculator)

        response = use_case.to_response(await use_case.execute("buyer-001", order.id))

        assert response.consistent is False
        assert response.mismatches[0].field == "taxable_base"
        assert response.mismatches[0].recomputed == 200.0

    async def test_missing_order(self, mock_record_store, calculator):
        mock_record_store.get.return_value = None
        use_case = VerifyQuoteUseCase(record_store=mock_record_store, calculator=calculator)

        with pytest.raises(OrderNotFoundError):
            await use_case.execute("buyer-001", "missing")


class TestPreviewProformaUseCase:
    async def test_interstate_preview(self, calculator, mrp_line):
        use_case = PreviewProformaUseCase(calculator=calculator)
        request = ProformaPreviewRequest(
            lines=[mrp_line],
            buyer_state="Karnataka",
            seller_state="Maharashtra",
            packing=10,
        )

        breakdown = await use_case.execute(request)
        response = use_case.to_response(breakdown)

        assert breakdown.tax_type is TaxType.IGST
        assert breakdown.taxable_base == 210.0
        assert breakdown.tax_breakup.igst == 37.8
        assert response.grand_total == 247.8
        assert response.balanced is True

    async def test_rounding_requested(self, calculator, mrp_line):
        use_case = PreviewProformaUseCase(calculator=calculator)
        request = ProformaPreviewRequest(
            lines=[mrp_line],
            packing=10,
            rounding_enabled=True,
            round_rule=RoundRule.DOWN,
        )

        breakdown = await use_case.execute(request)

        assert breakdown.grand_total == 247.0
        assert breakdown.round_off == -0.8

    async def test_discount_amount_preferred_when_edited_last(self, calculator, mrp_line):
        use_case = PreviewProformaUseCase(calculator=calculator)
        request = ProformaPreviewRequest(
            lines=[mrp_line],
            discount_pct=50,
            discount_amt=20,
            discount_changed_by="amt",
        )

        breakdown = await use_case.execute(request)

        assert breakdown.discount_amt == 20.0
        assert breakdown.discount_pct == 10.0
