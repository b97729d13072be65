"""
Dual ledger synchronizer.

Every order lives twice: under the buyer's namespace and under the seller's.
There is no cross-namespace transaction. A mutation is written to the acting
party's copy first; the counterparty's copy follows. A failed mirror write
leaves the mutation committed, is returned as a warning, and is queued in the
outbox where ``reconcile_pending`` later re-reads the primary and overwrites
the mirror (last write wins, no merge).

This is the only component that writes order records.
"""

from dataclasses import dataclass, field

from orderdesk.config import get_logger
from orderdesk.core.entities.ledger import MirrorWrite
from orderdesk.core.entities.order import LedgerRole, Order, OrderStatus
from orderdesk.core.exceptions import (
    LedgerWriteError,
    OrderNotFoundError,
    PartialPropagationFailure,
    ValidationError,
)
from orderdesk.core.interfaces import IMirrorOutbox, IOrderRecordStore

logger = get_logger(__name__)


@dataclass
class PropagationResult:
    """Outcome of writing one mutation to both namespaces."""

    order: Order
    primary_namespace: str
    mirror_namespace: str
    mirror_written: bool
    warning: PartialPropagationFailure | None = None

    @property
    def warnings(self) -> list[PartialPropagationFailure]:
        return [self.warning] if self.warning else []


@dataclass
class ReconcileReport:
    processed: int = 0
    repaired: int = 0
    failed: int = 0
    errors: list[dict] = field(default_factory=list)


class DualLedgerSynchronizer:
    """Write-primary, then mirror, with an outbox for failed mirrors."""

    def __init__(
        self,
        record_store: IOrderRecordStore,
        outbox: IMirrorOutbox,
        max_attempts: int | None = None,
    ):
        self._records = record_store
        self._outbox = outbox
        self._max_attempts = max_attempts

    async def propagate(
        self,
        order: Order,
        acting_role: LedgerRole,
        attempted: OrderStatus | None = None,
    ) -> PropagationResult:
        """
        Write the acting party's record, then the counterparty's.

        Raises:
            ValidationError: a namespace id is missing; nothing was written.
            LedgerWriteError: the primary write failed; nothing was written.
        """
        primary_ns = order.namespace_for(acting_role)
        mirror_ns = order.namespace_for(acting_role.counterparty)
        attempted_code = (attempted or order.status).value

        if not primary_ns:
            raise ValidationError(f"{acting_role.value.lower()}.business_id", "missing namespace id")
        if not mirror_ns:
            raise ValidationError(
                f"{acting_role.counterparty.value.lower()}.business_id",
                "missing counterparty id",
            )

        try:
            await self._records.put(primary_ns, order)
        except Exception as e:
            logger.error(
                "primary_write_failed",
                order_id=order.id,
                namespace=primary_ns,
                attempted=attempted_code,
                error=str(e),
            )
            raise LedgerWriteError(order.id, primary_ns, attempted_code, str(e)) from e

        try:
            await self._records.put(mirror_ns, order)
        except Exception as e:
            warning = await self._defer_mirror(order, primary_ns, mirror_ns, attempted_code, str(e))
            return PropagationResult(
                order=order,
                primary_namespace=primary_ns,
                mirror_namespace=mirror_ns,
                mirror_written=False,
                warning=warning,
            )

        # A successful overwrite supersedes anything still queued for this copy
        try:
            await self._outbox.resolve_for_order(order.id, mirror_ns)
        except Exception as e:
            logger.warning("outbox_resolve_failed", order_id=order.id, error=str(e))

        logger.info(
            "order_propagated",
            order_id=order.id,
            status=order.status.value,
            primary=primary_ns,
            mirror=mirror_ns,
        )
        return PropagationResult(
            order=order,
            primary_namespace=primary_ns,
            mirror_namespace=mirror_ns,
            mirror_written=True,
        )

    async def _defer_mirror(
        self,
        order: Order,
        primary_ns: str,
        mirror_ns: str,
        attempted: str,
        error: str,
    ) -> PartialPropagationFailure:
        logger.warning(
            "mirror_write_failed",
            order_id=order.id,
            namespace=mirror_ns,
            attempted=attempted,
            error=error,
        )
        outbox_id = None
        try:
            entry = await self._outbox.enqueue(
                MirrorWrite(
                    order_id=order.id,
                    source_namespace=primary_ns,
                    target_namespace=mirror_ns,
                    attempted_status=attempted,
                    error=error,
                )
            )
            outbox_id = entry.id
        except Exception as e:
            # Still recoverable through read_repair
            logger.error(
                "mirror_outbox_enqueue_failed",
                order_id=order.id,
                namespace=mirror_ns,
                error=str(e),
            )
        return PartialPropagationFailure(order.id, mirror_ns, attempted, error, outbox_id=outbox_id)

    async def reconcile_pending(self, limit: int = 100) -> ReconcileReport:
        """Drain the outbox: re-read each source record and overwrite its mirror."""
        report = ReconcileReport()
        pending = await self._outbox.list_pending(limit=limit, max_attempts=self._max_attempts)

        for entry in pending:
            report.processed += 1
            try:
                await self.read_repair(entry.order_id, entry.source_namespace, entry.target_namespace)
                await self._outbox.mark_resolved(entry.id)  # type: ignore[arg-type]
                report.repaired += 1
            except Exception as e:
                report.failed += 1
                report.errors.append({"order_id": entry.order_id, "outbox_id": entry.id, "error": str(e)})
                await self._outbox.mark_failed(entry.id, str(e))  # type: ignore[arg-type]
                logger.warning(
                    "mirror_reconcile_failed",
                    order_id=entry.order_id,
                    outbox_id=entry.id,
                    attempts=entry.attempts + 1,
                    error=str(e),
                )

        if report.processed:
            logger.info(
                "mirror_reconcile_complete",
                processed=report.processed,
                repaired=report.repaired,
                failed=report.failed,
            )
        return report

    async def read_repair(self, order_id: str, source_namespace: str, target_namespace: str) -> Order:
        """Overwrite the target copy with a full re-fetch of the source copy."""
        source = await self._records.get(source_namespace, order_id)
        if source is None:
            raise OrderNotFoundError(order_id, source_namespace)

        if target_namespace not in (source.buyer.business_id, source.seller.business_id):
            raise ValidationError("namespace", "not a party to this order", target_namespace)

        await self._records.put(target_namespace, source)
        logger.info(
            "mirror_repaired",
            order_id=order_id,
            source=source_namespace,
            target=target_namespace,
            status=source.status.value,
        )
        return source
