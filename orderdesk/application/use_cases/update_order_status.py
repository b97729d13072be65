"""
Update Order Status Use Case.

Transitions, propagation and invoicing.
"""

from dataclasses import dataclass, field

from orderdesk.application.dto.requests import UpdateStatusRequest
from orderdesk.application.dto.responses import OrderMutationResponse
from orderdesk.application.use_cases.common import invoice_response, warning_response
from orderdesk.config import get_logger
from orderdesk.core.entities.invoice import Invoice
from orderdesk.core.entities.order import Actor, Order, OrderStatus, Shipment
from orderdesk.core.exceptions import (
    InvoiceMaterializationFailed,
    OrderDeskError,
    OrderNotFoundError,
)
from orderdesk.core.interfaces import IOrderRecordStore
from orderdesk.core.services import (
    DualLedgerSynchronizer,
    InvoiceMaterializer,
    OrderStatusMachine,
)
from orderdesk.core.services.invoice_materializer import INVOICEABLE_STATUSES

logger = get_logger(__name__)


@dataclass
class UpdateOrderStatusResult:
    order: Order
    mirror_written: bool
    warnings: list[OrderDeskError] = field(default_factory=list)
    invoice: Invoice | None = None
    invoice_created: bool = False


class UpdateOrderStatusUseCase:
    """
    Apply one status transition on behalf of a buyer or seller.

    The order is read from the actor's own namespace, moved by the status
    machine, then written through the ledger synchronizer. Reaching
    DELIVERED (or INVOICED) materializes the invoice; a failure there does
    not undo the committed transition and is reported as a warning. The
    invoice backfill retries it.
    """

    def __init__(
        self,
        record_store: IOrderRecordStore | None = None,
        synchronizer: DualLedgerSynchronizer | None = None,
        materializer: InvoiceMaterializer | None = None,
        status_machine: OrderStatusMachine | None = None,
    ):
        self._record_store = record_store
        self._synchronizer = synchronizer
        self._materializer = materializer
        self._machine = status_machine

    async def _get_record_store(self) -> IOrderRecordStore:
        if self._record_store is None:
            from orderdesk.infrastructure.storage.sqlite import get_order_record_store

            self._record_store = await get_order_record_store()
        return self._record_store

    async def _get_synchronizer(self) -> DualLedgerSynchronizer:
        if self._synchronizer is None:
            from orderdesk.application.services import get_ledger_synchronizer

            self._synchronizer = await get_ledger_synchronizer(record_store=await self._get_record_store())
        return self._synchronizer

    async def _get_materializer(self) -> InvoiceMaterializer:
        if self._materializer is None:
            from orderdesk.application.services import get_invoice_materializer

            self._materializer = await get_invoice_materializer()
        return self._materializer

    def _get_machine(self) -> OrderStatusMachine:
        if self._machine is None:
            from orderdesk.application.services import get_status_machine

            self._machine = get_status_machine()
        return self._machine

    async def execute(self, order_id: str, request: UpdateStatusRequest) -> UpdateOrderStatusResult:
        """Execute update order status use case."""
        logger.info(
            "update_order_status_started",
            order_id=order_id,
            actor=request.actor_id,
            role=request.role.value,
            status=request.status,
        )

        store = await self._get_record_store()
        order = await store.get(request.actor_id, order_id)
        if order is None:
            raise OrderNotFoundError(order_id, request.actor_id)

        actor = Actor(party_id=request.actor_id, name=request.actor_name, role=request.role)
        updated = self._get_machine().apply(order, request.status, actor, notes=request.notes)
        self._apply_details(updated, request)

        propagation = await (await self._get_synchronizer()).propagate(
            updated, request.role, attempted=updated.status
        )
        result = UpdateOrderStatusResult(
            order=updated,
            mirror_written=propagation.mirror_written,
            warnings=list(propagation.warnings),
        )

        if updated.status in INVOICEABLE_STATUSES:
            await self._materialize(result)

        logger.info(
            "update_order_status_complete",
            order_id=order_id,
            status=updated.status.value,
            mirror_written=result.mirror_written,
            invoice_created=result.invoice_created,
            warnings=len(result.warnings),
        )
        return result

    @staticmethod
    def _apply_details(order: Order, request: UpdateStatusRequest) -> None:
        if order.status is OrderStatus.SHIPPED and (
            request.courier or request.awb or request.expected_delivery_date
        ):
            order.shipment = Shipment(
                courier=request.courier,
                awb=request.awb,
                expected_delivery_date=request.expected_delivery_date,
            )
        if request.is_paid is not None:
            order.payment.is_paid = request.is_paid
        if request.invoice_number:
            order.invoice_number = request.invoice_number

    async def _materialize(self, result: UpdateOrderStatusResult) -> None:
        order = result.order
        try:
            materialized = await (await self._get_materializer()).materialize(order)
        except Exception as e:
            logger.error("invoice_materialization_failed", order_id=order.id, error=str(e))
            result.warnings.append(InvoiceMaterializationFailed(order.id, str(e)))
            return

        result.invoice = materialized.invoice
        result.invoice_created = materialized.created

    def to_response(self, result: UpdateOrderStatusResult) -> OrderMutationResponse:
        """Convert result to API response."""
        order = result.order
        return OrderMutationResponse(
            order=order.model_dump(mode="json", by_alias=True),
            status=order.status.value,
            status_label=order.status_label,
            mirror_written=result.mirror_written,
            warnings=[warning_response(w) for w in result.warnings],
            invoice=invoice_response(result.invoice) if result.invoice else None,
            invoice_created=result.invoice_created,
        )
