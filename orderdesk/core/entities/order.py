"""Order aggregate and lifecycle entities."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from orderdesk.core.entities.base import CamelModel, ensure_utc, utcnow
from orderdesk.core.entities.pricing import OrderLine
from orderdesk.core.entities.proforma import ChargesBreakdown, OrderCharges, RoundingConfig

_STATUS_LABELS: dict[str, str] = {
    "REQUESTED": "Requested",
    "QUOTED": "Quoted",
    "ACCEPTED": "Accepted",
    "REJECTED": "Rejected",
    "DIRECT": "Direct (Proforma Skipped)",
    "ASSIGNED": "Assigned",
    "PACKED": "Packed",
    "SHIPPED": "Shipped",
    "OUT_FOR_DELIVERY": "Out for Delivery",
    "DELIVERED": "Delivered",
    "INVOICED": "Invoiced",
}


class OrderStatus(str, Enum):
    """Lifecycle status of an order."""

    REQUESTED = "REQUESTED"
    QUOTED = "QUOTED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    DIRECT = "DIRECT"
    ASSIGNED = "ASSIGNED"
    PACKED = "PACKED"
    SHIPPED = "SHIPPED"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    INVOICED = "INVOICED"

    @property
    def label(self) -> str:
        """Display label derived from the code."""
        return _STATUS_LABELS[self.value]

    @property
    def timestamp_key(self) -> str:
        """camelCase timestamp key, e.g. OUT_FOR_DELIVERY -> outForDeliveryAt."""
        head, *rest = self.value.lower().split("_")
        return head + "".join(part.capitalize() for part in rest) + "At"

    @classmethod
    def parse(cls, raw: Any) -> "OrderStatus":
        """
        Parse a status code or a legacy display label.

        Accepts "OUT_FOR_DELIVERY", "Out for Delivery", "out-for-delivery".
        Raises ValueError for anything else.
        """
        if isinstance(raw, cls):
            return raw
        text = str(raw or "").strip()
        for code, label in _STATUS_LABELS.items():
            if text.lower() == label.lower():
                return cls(code)
        normalized = text.upper().replace("-", "_").replace(" ", "_")
        return cls(normalized)


class LedgerRole(str, Enum):
    """Which party's namespace a record (or an actor) belongs to."""

    BUYER = "BUYER"
    SELLER = "SELLER"

    @property
    def counterparty(self) -> "LedgerRole":
        return LedgerRole.SELLER if self is LedgerRole.BUYER else LedgerRole.BUYER


class OrderOrigin(str, Enum):
    """Who initiated the order."""

    BUYER_REQUEST = "BUYER_REQUEST"
    SELLER_ASSIGNMENT = "SELLER_ASSIGNMENT"


class Party(CamelModel):
    """Business identity and jurisdiction of a buyer or seller."""

    business_id: str = ""
    business_name: str = ""
    email: str = ""
    phone: str = ""
    city: str = ""
    state: str = ""
    pincode: str = ""
    gst_number: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def coerce_string(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()


class Actor(CamelModel):
    """Party performing a mutation."""

    party_id: str
    name: str = ""
    role: LedgerRole


class PaymentInfo(CamelModel):
    """Order-level payment flags."""

    mode: str = ""
    is_paid: bool = False
    credit_days: int | None = None


class Shipment(CamelModel):
    courier: str | None = None
    awb: str | None = None
    expected_delivery_date: str | None = None


class StatusHistoryEntry(CamelModel):
    """One applied transition. Append-only."""

    status: OrderStatus
    updated_at: datetime
    updated_by: str = ""
    updated_by_name: str = ""
    notes: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v: Any) -> OrderStatus:
        return OrderStatus.parse(v)

    @field_validator("updated_at", mode="before")
    @classmethod
    def coerce_updated_at(cls, v: Any) -> Any:
        return ensure_utc(v)


class Order(CamelModel):
    """Order aggregate as held in either party's namespace."""

    id: str
    origin: OrderOrigin = OrderOrigin.BUYER_REQUEST
    buyer: Party
    seller: Party
    lines: list[OrderLine] = Field(default_factory=list)
    status: OrderStatus
    status_timestamps: dict[str, datetime] = Field(default_factory=dict)
    status_history: list[StatusHistoryEntry] = Field(default_factory=list)
    charges: OrderCharges = Field(default_factory=OrderCharges)
    rounding: RoundingConfig = Field(default_factory=RoundingConfig)
    breakdown: ChargesBreakdown | None = None
    payment: PaymentInfo = Field(default_factory=PaymentInfo)
    shipment: Shipment | None = None
    invoice_number: str | None = None
    inventory_synced: bool = False
    notes: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v: Any) -> OrderStatus:
        return OrderStatus.parse(v)

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def coerce_datetime(cls, v: Any) -> Any:
        return ensure_utc(v)

    @field_validator("status_timestamps", mode="before")
    @classmethod
    def coerce_timestamps(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {k: ensure_utc(ts) for k, ts in v.items() if ts is not None}
        return v

    def party(self, role: LedgerRole) -> Party:
        return self.buyer if role is LedgerRole.BUYER else self.seller

    def namespace_for(self, role: LedgerRole) -> str:
        """Namespace (business id) holding this party's copy of the order."""
        return self.party(role).business_id

    @property
    def status_label(self) -> str:
        return self.status.label
