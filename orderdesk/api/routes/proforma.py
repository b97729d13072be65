"""Proforma preview and defaults endpoints."""

from fastapi import APIRouter, Depends, Query

from orderdesk.api.dependencies import get_preview_use_case, get_proforma_defaults_use_case
from orderdesk.application.dto.requests import ProformaDefaultsRequest, ProformaPreviewRequest
from orderdesk.application.dto.responses import (
    ErrorResponse,
    ProformaDefaultsResponse,
    ProformaPreviewResponse,
)
from orderdesk.application.use_cases import ManageProformaDefaultsUseCase, PreviewProformaUseCase

router = APIRouter(tags=["proforma"])


@router.post(
    "/api/proforma/preview",
    response_model=ProformaPreviewResponse,
    responses={400: {"model": ErrorResponse}},
)
async def preview_proforma(
    request: ProformaPreviewRequest,
    use_case: PreviewProformaUseCase = Depends(get_preview_use_case),
) -> ProformaPreviewResponse:
    """Compute a breakdown without storing anything."""
    breakdown = await use_case.execute(request)
    return use_case.to_response(breakdown)


@router.get("/api/proforma-defaults/{seller_id}", response_model=ProformaDefaultsResponse)
async def get_proforma_defaults(
    seller_id: str,
    buyer_id: str | None = Query(default=None, description="Per-buyer override"),
    use_case: ManageProformaDefaultsUseCase = Depends(get_proforma_defaults_use_case),
) -> ProformaDefaultsResponse:
    """Stored defaults at the requested layer plus the effective result."""
    result = await use_case.get(seller_id, buyer_id)
    return use_case.to_response(result)


@router.put("/api/proforma-defaults/{seller_id}", response_model=ProformaDefaultsResponse)
async def save_proforma_defaults(
    seller_id: str,
    request: ProformaDefaultsRequest,
    buyer_id: str | None = Query(default=None, description="Per-buyer override"),
    use_case: ManageProformaDefaultsUseCase = Depends(get_proforma_defaults_use_case),
) -> ProformaDefaultsResponse:
    """Save the seller's global defaults, or a buyer override with ``buyer_id``."""
    result = await use_case.save(seller_id, request, buyer_id)
    return use_case.to_response(result)
