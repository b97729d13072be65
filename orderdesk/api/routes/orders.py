"""Order lifecycle endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from orderdesk.api.dependencies import (
    get_create_order_use_case,
    get_issue_quote_use_case,
    get_order_records,
    get_repair_use_case,
    get_update_status_use_case,
    get_verify_quote_use_case,
)
from orderdesk.application.dto.requests import (
    CreateOrderRequest,
    IssueQuoteRequest,
    RepairOrderRequest,
    UpdateStatusRequest,
)
from orderdesk.application.dto.responses import (
    ErrorResponse,
    OrderListResponse,
    OrderMutationResponse,
    OrderRecordResponse,
    RepairOrderResponse,
    VerifyQuoteResponse,
)
from orderdesk.application.use_cases import (
    CreateOrderUseCase,
    IssueQuoteUseCase,
    RepairOrderUseCase,
    UpdateOrderStatusUseCase,
    VerifyQuoteUseCase,
)
from orderdesk.application.use_cases.common import order_record_response
from orderdesk.core.interfaces import IOrderRecordStore
from orderdesk.core.services.order_status_machine import parse_status

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post(
    "",
    response_model=OrderMutationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_order(
    request: CreateOrderRequest,
    use_case: CreateOrderUseCase = Depends(get_create_order_use_case),
) -> OrderMutationResponse:
    """Create a buyer request or a seller assignment in both ledgers."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.post(
    "/{order_id}/quote",
    response_model=OrderMutationResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse, "description": "Order is not awaiting a quote"},
    },
)
async def issue_quote(
    order_id: str,
    request: IssueQuoteRequest,
    use_case: IssueQuoteUseCase = Depends(get_issue_quote_use_case),
) -> OrderMutationResponse:
    """Quote a requested order (QUOTED) or skip the proforma (DIRECT)."""
    result = await use_case.execute(order_id, request)
    return use_case.to_response(result)


@router.post(
    "/{order_id}/status",
    response_model=OrderMutationResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse, "description": "Transition not allowed"},
    },
)
async def update_order_status(
    order_id: str,
    request: UpdateStatusRequest,
    use_case: UpdateOrderStatusUseCase = Depends(get_update_status_use_case),
) -> OrderMutationResponse:
    """
    Move an order to its next status.

    A stale counterparty copy is reported in ``warnings`` and queued for
    reconciliation; it does not fail the request.
    """
    result = await use_case.execute(order_id, request)
    return use_case.to_response(result)


@router.post(
    "/{order_id}/repair",
    response_model=RepairOrderResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def repair_order(
    order_id: str,
    request: RepairOrderRequest,
    use_case: RepairOrderUseCase = Depends(get_repair_use_case),
) -> RepairOrderResponse:
    """Overwrite one party's copy with the other's."""
    order = await use_case.execute(order_id, request)
    return use_case.to_response(order, request)


@router.get("/{namespace}", response_model=OrderListResponse)
async def list_orders(
    namespace: str,
    status_filter: list[str] | None = Query(default=None, alias="status"),
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    store: IOrderRecordStore = Depends(get_order_records),
) -> OrderListResponse:
    """List orders held in a business's namespace, newest first."""
    statuses = [parse_status(s) for s in status_filter] if status_filter else None
    orders = await store.list_orders(namespace, statuses=statuses, limit=limit, offset=offset)
    return OrderListResponse(
        namespace=namespace,
        orders=[order_record_response(o, namespace) for o in orders],
        total=len(orders),
    )


@router.get(
    "/{namespace}/{order_id}",
    response_model=OrderRecordResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_order(
    namespace: str,
    order_id: str,
    store: IOrderRecordStore = Depends(get_order_records),
) -> OrderRecordResponse:
    """Get one party's copy of an order."""
    order = await store.get(namespace, order_id)
    if order is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Order not found: {order_id}",
        )
    return order_record_response(order, namespace)


@router.get(
    "/{namespace}/{order_id}/verify",
    response_model=VerifyQuoteResponse,
    responses={404: {"model": ErrorResponse}},
)
async def verify_order_breakdown(
    namespace: str,
    order_id: str,
    use_case: VerifyQuoteUseCase = Depends(get_verify_quote_use_case),
) -> VerifyQuoteResponse:
    """Recompute the breakdown server-side and report disagreements."""
    result = await use_case.execute(namespace, order_id)
    return use_case.to_response(result)
