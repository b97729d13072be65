"""
Verify Quote Use Case.

Compare a stored breakdown with a recomputation.
"""

from dataclasses import dataclass

from orderdesk.application.dto.responses import MismatchResponse, VerifyQuoteResponse
from orderdesk.config import get_logger
from orderdesk.core.entities.order import Order
from orderdesk.core.entities.proforma import ChargesBreakdown
from orderdesk.core.exceptions import OrderNotFoundError
from orderdesk.core.interfaces import IOrderRecordStore
from orderdesk.core.services import BreakdownMismatch, ProformaCalculator

logger = get_logger(__name__)


@dataclass
class VerifyQuoteResult:
    order: Order
    namespace: str
    recomputed: ChargesBreakdown
    mismatches: list[BreakdownMismatch]


class VerifyQuoteUseCase:
    """Flag stored totals that disagree with the server computation."""

    def __init__(
        self,
        record_store: IOrderRecordStore | None = None,
        calculator: ProformaCalculator | None = None,
    ):
        self._record_store = record_store
        self._calculator = calculator

    async def _get_record_store(self) -> IOrderRecordStore:
        if self._record_store is None:
            from orderdesk.infrastructure.storage.sqlite import get_order_record_store

            self._record_store = await get_order_record_store()
        return self._record_store

    def _get_calculator(self) -> ProformaCalculator:
        if self._calculator is None:
            from orderdesk.application.services import get_proforma_calculator

            self._calculator = get_proforma_calculator()
        return self._calculator

    async def execute(self, namespace: str, order_id: str) -> VerifyQuoteResult:
        store = await self._get_record_store()
        order = await store.get(namespace, order_id)
        if order is None:
            raise OrderNotFoundError(order_id, namespace)

        calculator = self._get_calculator()
        mismatches = calculator.verify(order)
        rounding = order.breakdown.rounding if order.breakdown else order.rounding
        recomputed = calculator.calculate(
            order.lines,
            order.charges,
            buyer_state=order.buyer.state,
            seller_state=order.seller.state,
            rounding=rounding,
        )

        logger.info(
            "verify_quote_complete",
            order_id=order_id,
            namespace=namespace,
            mismatches=len(mismatches),
        )
        return VerifyQuoteResult(
            order=order,
            namespace=namespace,
            recomputed=recomputed,
            mismatches=mismatches,
        )

    def to_response(self, result: VerifyQuoteResult) -> VerifyQuoteResponse:
        return VerifyQuoteResponse(
            order_id=result.order.id,
            namespace=result.namespace,
            has_breakdown=result.order.breakdown is not None,
            consistent=not result.mismatches,
            mismatches=[
                MismatchResponse(field=m.field, stored=m.stored, recomputed=m.recomputed)
                for m in result.mismatches
            ],
            recomputed=result.recomputed.model_dump(mode="json", by_alias=True),
        )
