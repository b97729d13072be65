"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.

Order and invoice records are returned in their stored camelCase form
under ``order`` / ``record``, so clients see the same schema the ledgers hold.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class WarningResponse(BaseModel):
    """Non-fatal problem attached to a successful mutation."""

    code: str = Field(..., description="Warning code (e.g. PARTIAL_PROPAGATION)")
    message: str = Field(..., description="Human-readable message")
    order_id: str | None = None
    namespace: str | None = Field(default=None, description="Namespace left stale")
    attempted: str | None = Field(default=None, description="Status that was being written")
    retryable: bool = Field(default=False, description="Reconciliation will retry it")
    outbox_id: int | None = Field(default=None, description="Queued mirror write id")


class InvoiceResponse(BaseModel):
    """Materialized invoice."""

    order_id: str
    invoice_number: str
    seller_id: str
    buyer_id: str
    seller_name: str = ""
    buyer_name: str = ""
    status: str = Field(..., description="Issued or Paid")
    payment_status: str = Field(..., description="Paid, Payment Due or Pending")
    payment_mode: str = ""
    grand_total: float
    tax_type: str
    issued_at: datetime
    record: dict[str, Any] = Field(default={}, description="Full stored invoice (camelCase)")


class OrderMutationResponse(BaseModel):
    """Result of a create / quote / status mutation."""

    order: dict[str, Any] = Field(..., description="Order record as stored (camelCase)")
    status: str = Field(..., description="Status code")
    status_label: str = Field(..., description="Display label")
    mirror_written: bool = Field(..., description="Counterparty copy is up to date")
    warnings: list[WarningResponse] = Field(default=[])
    invoice: InvoiceResponse | None = Field(default=None, description="Invoice, once delivered")
    invoice_created: bool = Field(default=False, description="Invoice was created by this call")


class OrderRecordResponse(BaseModel):
    namespace: str
    order: dict[str, Any]
    status: str
    status_label: str
    allowed_next: list[str] = Field(default=[], description="Statuses reachable from here")


class OrderListResponse(BaseModel):
    namespace: str
    orders: list[OrderRecordResponse] = Field(default=[])
    total: int = Field(..., ge=0)


class MismatchResponse(BaseModel):
    field: str
    stored: float | str
    recomputed: float | str


class VerifyQuoteResponse(BaseModel):
    """Stored breakdown compared with a fresh server computation."""

    order_id: str
    namespace: str
    has_breakdown: bool
    consistent: bool
    mismatches: list[MismatchResponse] = Field(default=[])
    recomputed: dict[str, Any] = Field(..., description="Server-computed breakdown (camelCase)")


class ProformaPreviewResponse(BaseModel):
    breakdown: dict[str, Any] = Field(..., description="Computed breakdown (camelCase)")
    grand_total: float
    tax_type: str
    balanced: bool = Field(..., description="grandTotal equals taxableBase + taxes + roundOff")


class ProformaDefaultsResponse(BaseModel):
    """Stored record for the requested layer plus the resolved effective defaults."""

    seller_id: str
    buyer_id: str | None = None
    stored: dict[str, Any] | None = Field(default=None, description="Record at this layer, if any")
    effective: dict[str, Any] = Field(..., description="Defaults after layering")


class ReconcileResponse(BaseModel):
    processed: int = Field(..., ge=0)
    repaired: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    errors: list[dict[str, Any]] = Field(default=[])


class RepairOrderResponse(BaseModel):
    order_id: str
    source_namespace: str
    target_namespace: str
    status: str


class BackfillInvoicesResponse(BaseModel):
    scanned: int = Field(..., ge=0)
    created: int = Field(..., ge=0)
    skipped: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    errors: list[dict[str, Any]] = Field(default=[])


class InvoiceListResponse(BaseModel):
    invoices: list[InvoiceResponse] = Field(default=[])
    total: int = Field(..., ge=0)


class ProviderHealthResponse(BaseModel):
    """Dependency health status."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ProviderHealthResponse | None = None
    pending_mirror_writes: int | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. ORDER_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
