"""
Issue Quote Use Case.

Seller prices a buyer request or skips to DIRECT.
"""

from dataclasses import dataclass, field

from orderdesk.application.dto.requests import IssueQuoteRequest
from orderdesk.application.dto.responses import OrderMutationResponse
from orderdesk.application.use_cases.common import (
    load_effective_defaults,
    overlay_charges,
    overlay_rounding,
    warning_response,
)
from orderdesk.config import get_logger
from orderdesk.core.entities.order import Actor, LedgerRole, Order, OrderStatus
from orderdesk.core.exceptions import OrderDeskError, OrderNotFoundError
from orderdesk.core.interfaces import IOrderRecordStore, IProformaDefaultsStore
from orderdesk.core.services import (
    DualLedgerSynchronizer,
    OrderStatusMachine,
    ProformaCalculator,
    charges_from_defaults,
)

logger = get_logger(__name__)


@dataclass
class IssueQuoteResult:
    order: Order
    mirror_written: bool
    warnings: list[OrderDeskError] = field(default_factory=list)


class IssueQuoteUseCase:
    """
    Respond to a REQUESTED order.

    A quote (QUOTED) carries the seller's prices and a server-computed
    breakdown; client-side totals are never accepted. Skipping the quote
    (DIRECT) applies the seller's proforma defaults instead. Charge inputs
    resolve as: manual > buyer override > seller global > built-in.
    """

    def __init__(
        self,
        record_store: IOrderRecordStore | None = None,
        defaults_store: IProformaDefaultsStore | None = None,
        synchronizer: DualLedgerSynchronizer | None = None,
        status_machine: OrderStatusMachine | None = None,
        calculator: ProformaCalculator | None = None,
    ):
        self._record_store = record_store
        self._defaults_store = defaults_store
        self._synchronizer = synchronizer
        self._machine = status_machine
        self._calculator = calculator

    async def _get_record_store(self) -> IOrderRecordStore:
        if self._record_store is None:
            from orderdesk.infrastructure.storage.sqlite import get_order_record_store

            self._record_store = await get_order_record_store()
        return self._record_store

    async def _get_defaults_store(self) -> IProformaDefaultsStore:
        if self._defaults_store is None:
            from orderdesk.infrastructure.storage.sqlite import get_proforma_defaults_store

            self._defaults_store = await get_proforma_defaults_store()
        return self._defaults_store

    async def _get_synchronizer(self) -> DualLedgerSynchronizer:
        if self._synchronizer is None:
            from orderdesk.application.services import get_ledger_synchronizer

            self._synchronizer = await get_ledger_synchronizer(record_store=await self._get_record_store())
        return self._synchronizer

    def _get_machine(self) -> OrderStatusMachine:
        if self._machine is None:
            from orderdesk.application.services import get_status_machine

            self._machine = get_status_machine()
        return self._machine

    def _get_calculator(self) -> ProformaCalculator:
        if self._calculator is None:
            from orderdesk.application.services import get_proforma_calculator

            self._calculator = get_proforma_calculator()
        return self._calculator

    async def execute(self, order_id: str, request: IssueQuoteRequest) -> IssueQuoteResult:
        """Execute issue quote use case."""
        target = OrderStatus.DIRECT if request.skip_quote else OrderStatus.QUOTED
        logger.info("issue_quote_started", order_id=order_id, seller=request.seller_id, target=target.value)

        store = await self._get_record_store()
        order = await store.get(request.seller_id, order_id)
        if order is None:
            raise OrderNotFoundError(order_id, request.seller_id)

        actor = Actor(party_id=request.seller_id, name=request.seller_name, role=LedgerRole.SELLER)
        updated = self._get_machine().apply(order, target, actor, notes=request.notes)

        if request.lines:
            updated.lines = list(request.lines)

        calculator = self._get_calculator()
        defaults = await load_effective_defaults(
            await self._get_defaults_store(),
            updated.seller.business_id,
            updated.buyer.business_id,
        )
        items_sub_total = calculator.calculate(updated.lines).items_sub_total
        charges, rounding = charges_from_defaults(defaults, items_sub_total)

        if not request.skip_quote:
            charges = overlay_charges(charges, request)
            rounding = overlay_rounding(rounding, request)

        updated.charges = charges
        updated.rounding = rounding
        updated.breakdown = calculator.calculate_for_order(updated)

        propagation = await (await self._get_synchronizer()).propagate(
            updated, LedgerRole.SELLER, attempted=target
        )

        logger.info(
            "issue_quote_complete",
            order_id=order_id,
            status=updated.status.value,
            grand_total=updated.breakdown.grand_total,
            tax_type=updated.breakdown.tax_type.value,
        )
        return IssueQuoteResult(
            order=updated,
            mirror_written=propagation.mirror_written,
            warnings=list(propagation.warnings),
        )

    def to_response(self, result: IssueQuoteResult) -> OrderMutationResponse:
        """Convert result to API response."""
        order = result.order
        return OrderMutationResponse(
            order=order.model_dump(mode="json", by_alias=True),
            status=order.status.value,
            status_label=order.status_label,
            mirror_written=result.mirror_written,
            warnings=[warning_response(w) for w in result.warnings],
        )
