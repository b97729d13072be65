"""
Backfill Invoices Use Case.

Create invoices missing for delivered orders.
"""

from dataclasses import dataclass, field

from orderdesk.application.dto.requests import BackfillInvoicesRequest
from orderdesk.application.dto.responses import BackfillInvoicesResponse
from orderdesk.config import get_logger, get_settings
from orderdesk.core.entities.order import Order, OrderStatus
from orderdesk.core.interfaces import IOrderRecordStore
from orderdesk.core.services import InvoiceMaterializer

logger = get_logger(__name__)


@dataclass
class BackfillInvoicesResult:
    scanned: int = 0
    created: int = 0
    skipped: int = 0
    failed: int = 0
    errors: list[dict] = field(default_factory=list)


class BackfillInvoicesUseCase:
    """
    Page through a seller's delivered and invoiced orders and materialize any
    invoice that does not exist yet.

    Idempotent: a second run finds every invoice present and skips it.
    One failing order does not stop the scan.
    """

    def __init__(
        self,
        record_store: IOrderRecordStore | None = None,
        materializer: InvoiceMaterializer | None = None,
    ):
        self._record_store = record_store
        self._materializer = materializer

    async def _get_record_store(self) -> IOrderRecordStore:
        if self._record_store is None:
            from orderdesk.infrastructure.storage.sqlite import get_order_record_store

            self._record_store = await get_order_record_store()
        return self._record_store

    async def _get_materializer(self) -> InvoiceMaterializer:
        if self._materializer is None:
            from orderdesk.application.services import get_invoice_materializer

            self._materializer = await get_invoice_materializer()
        return self._materializer

    async def execute(self, request: BackfillInvoicesRequest) -> BackfillInvoicesResult:
        page_size = request.limit or get_settings().invoice.backfill_batch_size
        logger.info("backfill_invoices_started", seller_id=request.seller_id, page_size=page_size)

        store = await self._get_record_store()
        materializer = await self._get_materializer()

        result = BackfillInvoicesResult()
        offset = 0
        while True:
            orders = await store.list_orders(
                request.seller_id,
                statuses=[OrderStatus.DELIVERED, OrderStatus.INVOICED],
                limit=page_size,
                offset=offset,
            )
            for order in orders:
                await self._backfill_one(materializer, order, result)
            if len(orders) < page_size:
                break
            offset += page_size

        logger.info(
            "backfill_invoices_complete",
            seller_id=request.seller_id,
            scanned=result.scanned,
            created=result.created,
            skipped=result.skipped,
            failed=result.failed,
        )
        return result

    async def _backfill_one(
        self,
        materializer: InvoiceMaterializer,
        order: Order,
        result: BackfillInvoicesResult,
    ) -> None:
        result.scanned += 1
        try:
            outcome = await materializer.materialize(order)
        except Exception as e:
            result.failed += 1
            result.errors.append({"order_id": order.id, "error": str(e)})
            logger.warning("backfill_invoice_failed", order_id=order.id, error=str(e))
            return

        if outcome.created:
            result.created += 1
        else:
            result.skipped += 1

    def to_response(self, result: BackfillInvoicesResult) -> BackfillInvoicesResponse:
        return BackfillInvoicesResponse(
            scanned=result.scanned,
            created=result.created,
            skipped=result.skipped,
            failed=result.failed,
            errors=result.errors,
        )
