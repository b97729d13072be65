"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from orderdesk.application.dto.requests import (
    BackfillInvoicesRequest,
    ChargeInputs,
    CreateOrderRequest,
    IssueQuoteRequest,
    ProformaDefaultsRequest,
    ProformaPreviewRequest,
    ReconcileRequest,
    RepairOrderRequest,
    UpdateStatusRequest,
)
from orderdesk.application.dto.responses import (
    BackfillInvoicesResponse,
    ErrorResponse,
    HealthResponse,
    InvoiceListResponse,
    InvoiceResponse,
    MismatchResponse,
    OrderListResponse,
    OrderMutationResponse,
    OrderRecordResponse,
    ProformaDefaultsResponse,
    ProformaPreviewResponse,
    ProviderHealthResponse,
    ReconcileResponse,
    RepairOrderResponse,
    VerifyQuoteResponse,
    WarningResponse,
)

__all__ = [
    # Requests
    "ChargeInputs",
    "CreateOrderRequest",
    "IssueQuoteRequest",
    "UpdateStatusRequest",
    "RepairOrderRequest",
    "ReconcileRequest",
    "ProformaPreviewRequest",
    "ProformaDefaultsRequest",
    "BackfillInvoicesRequest",
    # Responses
    "WarningResponse",
    "InvoiceResponse",
    "InvoiceListResponse",
    "OrderMutationResponse",
    "OrderRecordResponse",
    "OrderListResponse",
    "MismatchResponse",
    "VerifyQuoteResponse",
    "ProformaPreviewResponse",
    "ProformaDefaultsResponse",
    "ReconcileResponse",
    "RepairOrderResponse",
    "BackfillInvoicesResponse",
    "ProviderHealthResponse",
    "HealthResponse",
    "ErrorResponse",
]
