"""
Repair Order Use Case.

Read-repair of one stale mirror copy.
"""

from orderdesk.application.dto.requests import RepairOrderRequest
from orderdesk.application.dto.responses import RepairOrderResponse
from orderdesk.config import get_logger
from orderdesk.core.entities.order import Order
from orderdesk.core.exceptions import ValidationError
from orderdesk.core.services import DualLedgerSynchronizer

logger = get_logger(__name__)


class RepairOrderUseCase:
    """Overwrite the target namespace's copy with the source's (last write wins)."""

    def __init__(self, synchronizer: DualLedgerSynchronizer | None = None):
        self._synchronizer = synchronizer

    async def _get_synchronizer(self) -> DualLedgerSynchronizer:
        if self._synchronizer is None:
            from orderdesk.application.services import get_ledger_synchronizer

            self._synchronizer = await get_ledger_synchronizer()
        return self._synchronizer

    async def execute(self, order_id: str, request: RepairOrderRequest) -> Order:
        if request.source_namespace == request.target_namespace:
            raise ValidationError(
                "target_namespace",
                "source and target namespaces must differ",
                request.target_namespace,
            )

        logger.info(
            "repair_order_started",
            order_id=order_id,
            source=request.source_namespace,
            target=request.target_namespace,
        )
        synchronizer = await self._get_synchronizer()
        return await synchronizer.read_repair(
            order_id, request.source_namespace, request.target_namespace
        )

    def to_response(self, order: Order, request: RepairOrderRequest) -> RepairOrderResponse:
        return RepairOrderResponse(
            order_id=order.id,
            source_namespace=request.source_namespace,
            target_namespace=request.target_namespace,
            status=order.status.value,
        )
