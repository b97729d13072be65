"""
Preview Proforma Use Case.

Pure breakdown, nothing persisted.
"""

from orderdesk.application.dto.requests import ProformaPreviewRequest
from orderdesk.application.dto.responses import ProformaPreviewResponse
from orderdesk.application.use_cases.common import overlay_charges, overlay_rounding
from orderdesk.core.entities.proforma import ChargesBreakdown, OrderCharges, RoundingConfig
from orderdesk.core.services import ProformaCalculator


class PreviewProformaUseCase:
    def __init__(self, calculator: ProformaCalculator | None = None):
        self._calculator = calculator

    def _get_calculator(self) -> ProformaCalculator:
        if self._calculator is None:
            from orderdesk.application.services import get_proforma_calculator

            self._calculator = get_proforma_calculator()
        return self._calculator

    async def execute(self, request: ProformaPreviewRequest) -> ChargesBreakdown:
        calculator = self._get_calculator()
        rounding = None
        if request.rounding_enabled is not None or request.round_rule is not None:
            rounding = overlay_rounding(RoundingConfig(), request)
        return calculator.calculate(
            request.lines,
            overlay_charges(OrderCharges(), request),
            buyer_state=request.buyer_state,
            seller_state=request.seller_state,
            rounding=rounding,
        )

    def to_response(self, breakdown: ChargesBreakdown) -> ProformaPreviewResponse:
        return ProformaPreviewResponse(
            breakdown=breakdown.model_dump(mode="json", by_alias=True),
            grand_total=breakdown.grand_total,
            tax_type=breakdown.tax_type.value,
            balanced=breakdown.is_balanced(),
        )
