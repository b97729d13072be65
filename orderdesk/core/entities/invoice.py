"""Invoice entity materialized from a fulfilled order."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from orderdesk.core.entities.base import CamelModel, ensure_utc, utcnow
from orderdesk.core.entities.order import Party
from orderdesk.core.entities.proforma import ChargesBreakdown


class InvoiceStatus(str, Enum):
    ISSUED = "Issued"
    PAID = "Paid"


class InvoicePaymentStatus(str, Enum):
    PAID = "Paid"
    PAYMENT_DUE = "Payment Due"
    PENDING = "Pending"


class InvoicePayment(CamelModel):
    """Payment snapshot taken when the invoice was created."""

    mode: str = ""
    code: str = ""
    is_paid: bool = False
    status: InvoicePaymentStatus = InvoicePaymentStatus.PENDING


class Invoice(CamelModel):
    """
    Financial invoice, created once per order.

    Keyed by ``order_id``; party snapshots and totals are copies taken at
    creation time and never follow later changes to the order.
    """

    order_id: str
    invoice_number: str
    buyer: Party
    seller: Party
    totals: ChargesBreakdown
    payment: InvoicePayment = Field(default_factory=InvoicePayment)
    status: InvoiceStatus = InvoiceStatus.ISSUED
    issued_at: datetime = Field(default_factory=utcnow)
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("issued_at", "created_at", mode="before")
    @classmethod
    def coerce_datetime(cls, v: Any) -> Any:
        return ensure_utc(v)

    @property
    def grand_total(self) -> float:
        return self.totals.grand_total
