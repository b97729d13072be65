"""Invoice endpoints."""

from fastapi import APIRouter, Depends, Query

from orderdesk.api.dependencies import get_backfill_use_case, get_invoices
from orderdesk.application.dto.requests import BackfillInvoicesRequest
from orderdesk.application.dto.responses import (
    BackfillInvoicesResponse,
    ErrorResponse,
    InvoiceListResponse,
    InvoiceResponse,
)
from orderdesk.application.use_cases import BackfillInvoicesUseCase
from orderdesk.application.use_cases.common import invoice_response
from orderdesk.core.exceptions import InvoiceNotFoundError
from orderdesk.core.interfaces import IInvoiceStore

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    seller_id: str | None = Query(default=None),
    buyer_id: str | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    store: IInvoiceStore = Depends(get_invoices),
) -> InvoiceListResponse:
    """List invoices, newest first."""
    invoices = await store.list_invoices(
        seller_id=seller_id, buyer_id=buyer_id, limit=limit, offset=offset
    )
    return InvoiceListResponse(
        invoices=[invoice_response(inv) for inv in invoices],
        total=len(invoices),
    )


@router.post("/backfill", response_model=BackfillInvoicesResponse)
async def backfill_invoices(
    request: BackfillInvoicesRequest,
    use_case: BackfillInvoicesUseCase = Depends(get_backfill_use_case),
) -> BackfillInvoicesResponse:
    """Create invoices missing for a seller's delivered orders."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get(
    "/{order_id}",
    response_model=InvoiceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_invoice(
    order_id: str,
    store: IInvoiceStore = Depends(get_invoices),
) -> InvoiceResponse:
    """Get the invoice materialized for an order."""
    invoice = await store.get_by_order(order_id)
    if invoice is None:
        raise InvoiceNotFoundError(order_id)
    return invoice_response(invoice)
