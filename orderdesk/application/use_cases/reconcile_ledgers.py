"""
Reconcile Ledgers Use Case.

Drain the mirror-write outbox.
"""

from orderdesk.application.dto.responses import ReconcileResponse
from orderdesk.config import get_logger, get_settings
from orderdesk.core.services import DualLedgerSynchronizer, ReconcileReport

logger = get_logger(__name__)


class ReconcileLedgersUseCase:
    """Re-attempt every pending mirror write, up to a batch limit."""

    def __init__(self, synchronizer: DualLedgerSynchronizer | None = None):
        self._synchronizer = synchronizer

    async def _get_synchronizer(self) -> DualLedgerSynchronizer:
        if self._synchronizer is None:
            from orderdesk.application.services import get_ledger_synchronizer

            self._synchronizer = await get_ledger_synchronizer()
        return self._synchronizer

    async def execute(self, limit: int | None = None) -> ReconcileReport:
        limit = limit or get_settings().ledger.reconcile_batch_size
        logger.info("reconcile_ledgers_started", limit=limit)
        synchronizer = await self._get_synchronizer()
        return await synchronizer.reconcile_pending(limit=limit)

    def to_response(self, report: ReconcileReport) -> ReconcileResponse:
        return ReconcileResponse(
            processed=report.processed,
            repaired=report.repaired,
            failed=report.failed,
            errors=report.errors,
        )
