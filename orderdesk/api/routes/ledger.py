"""Dual ledger maintenance endpoints."""

from fastapi import APIRouter, Depends

from orderdesk.api.dependencies import get_reconcile_use_case
from orderdesk.application.dto.requests import ReconcileRequest
from orderdesk.application.dto.responses import ReconcileResponse
from orderdesk.application.use_cases import ReconcileLedgersUseCase

router = APIRouter(prefix="/api/ledger", tags=["ledger"])


@router.post("/reconcile", response_model=ReconcileResponse)
async def reconcile_ledgers(
    request: ReconcileRequest | None = None,
    use_case: ReconcileLedgersUseCase = Depends(get_reconcile_use_case),
) -> ReconcileResponse:
    """Retry pending mirror writes from the outbox."""
    report = await use_case.execute(limit=request.limit if request else None)
    return use_case.to_response(report)
