"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.

Order lines and parties reuse the core entities, which accept either
camelCase (stored record form) or snake_case keys.
"""

from typing import Literal

from pydantic import BaseModel, Field

from orderdesk.core.entities.order import LedgerRole, OrderOrigin, Party
from orderdesk.core.entities.pricing import OrderLine
from orderdesk.core.entities.proforma import RoundRule


class ChargeInputs(BaseModel):
    """Order-level charge inputs shared by quote and preview requests.

    ``None`` means "not supplied": quotes fall back to proforma defaults,
    previews treat it as zero.
    """

    delivery: float | None = Field(default=None, ge=0, description="Delivery fee")
    packing: float | None = Field(default=None, ge=0, description="Packing fee")
    insurance: float | None = Field(default=None, ge=0, description="Insurance fee")
    other: float | None = Field(default=None, ge=0, description="Other charges")
    discount_pct: float | None = Field(
        default=None, ge=0, le=100, description="Order discount percentage"
    )
    discount_amt: float | None = Field(default=None, ge=0, description="Order discount amount")
    discount_changed_by: Literal["pct", "amt"] | None = Field(
        default=None,
        description="Which discount field the user edited last; it is authoritative",
    )
    rounding_enabled: bool | None = Field(default=None, description="Round grand total to rupees")
    round_rule: RoundRule | None = Field(default=None, description="NEAREST, UP or DOWN")

    def has_manual_charges(self) -> bool:
        return any(
            v is not None
            for v in (
                self.delivery,
                self.packing,
                self.insurance,
                self.other,
                self.discount_pct,
                self.discount_amt,
            )
        )


class CreateOrderRequest(BaseModel):
    """Request to create an order.

    Buyers create requests (REQUESTED); sellers create assignments (ASSIGNED).
    """

    origin: OrderOrigin = Field(
        default=OrderOrigin.BUYER_REQUEST,
        description="BUYER_REQUEST or SELLER_ASSIGNMENT",
    )
    buyer: Party = Field(..., description="Buyer business identity")
    seller: Party = Field(..., description="Seller business identity")
    lines: list[OrderLine] = Field(..., min_length=1, description="Order lines")
    actor_id: str = Field(..., min_length=1, description="Business id of the creating party")
    actor_name: str = Field(default="", description="Display name of the creating user")
    payment_mode: str | None = Field(
        default=None,
        description="Payment mode code or label",
        examples=["COD", "Credit Cycle", "UPI"],
    )
    credit_days: int | None = Field(default=None, ge=0, description="Credit period in days")
    is_paid: bool = Field(default=False, description="Already paid")
    notes: str | None = Field(default=None, max_length=2000)
    autofill_location: bool = Field(
        default=True,
        description="Fill missing city/state from the parties' pincodes",
    )


class IssueQuoteRequest(ChargeInputs):
    """Seller response to a buyer request: a priced quote or a direct order."""

    seller_id: str = Field(..., min_length=1, description="Seller business id")
    seller_name: str = Field(default="", description="Display name of the quoting user")
    skip_quote: bool = Field(
        default=False,
        description="Skip the proforma and move straight to DIRECT with default charges",
    )
    lines: list[OrderLine] | None = Field(
        default=None,
        description="Replacement lines with the seller's prices; keeps existing lines when omitted",
    )
    notes: str | None = Field(default=None, max_length=2000)


class UpdateStatusRequest(BaseModel):
    """Request to move an order to another status."""

    actor_id: str = Field(..., min_length=1, description="Business id of the acting party")
    actor_name: str = Field(default="", description="Display name of the acting user")
    role: LedgerRole = Field(..., description="BUYER or SELLER")
    status: str = Field(
        ...,
        description="Target status code or label",
        examples=["PACKED", "Out for Delivery"],
    )
    notes: str | None = Field(default=None, max_length=2000)
    courier: str | None = Field(default=None, description="Courier name (SHIPPED)")
    awb: str | None = Field(default=None, description="Air waybill / tracking number (SHIPPED)")
    expected_delivery_date: str | None = Field(default=None, description="ISO date (SHIPPED)")
    is_paid: bool | None = Field(default=None, description="Update the payment flag")
    invoice_number: str | None = Field(default=None, description="Explicit invoice number")


class RepairOrderRequest(BaseModel):
    """Overwrite one party's copy with the other party's copy."""

    source_namespace: str = Field(..., min_length=1, description="Namespace holding the good copy")
    target_namespace: str = Field(..., min_length=1, description="Namespace to overwrite")


class ReconcileRequest(BaseModel):
    limit: int | None = Field(default=None, ge=1, le=10000, description="Max outbox entries")


class ProformaPreviewRequest(ChargeInputs):
    """Pure breakdown calculation; nothing is stored."""

    lines: list[OrderLine] = Field(..., min_length=1)
    buyer_state: str | None = Field(default=None, description="Buyer jurisdiction")
    seller_state: str | None = Field(default=None, description="Seller jurisdiction")


class ProformaDefaultsRequest(BaseModel):
    """Seller defaults; ``None`` fields inherit from the next layer."""

    delivery_fee: float | None = Field(default=None, ge=0)
    packing_fee: float | None = Field(default=None, ge=0)
    insurance_fee: float | None = Field(default=None, ge=0)
    other_fee: float | None = Field(default=None, ge=0)
    discount_pct: float | None = Field(default=None, ge=0, le=100)
    discount_amt: float | None = Field(default=None, ge=0)
    round_enabled: bool | None = None
    round_rule: RoundRule | None = None
    autodetect_tax_type: bool | None = None


class BackfillInvoicesRequest(BaseModel):
    """Create missing invoices for delivered orders."""

    seller_id: str = Field(..., min_length=1, description="Seller namespace to scan")
    limit: int | None = Field(default=None, ge=1, le=10000, description="Orders read per page")
