"""Domain entities."""

from orderdesk.core.entities.invoice import (
    Invoice,
    InvoicePayment,
    InvoicePaymentStatus,
    InvoiceStatus,
)
from orderdesk.core.entities.ledger import MirrorWrite
from orderdesk.core.entities.location import Location
from orderdesk.core.entities.order import (
    Actor,
    LedgerRole,
    Order,
    OrderOrigin,
    OrderStatus,
    Party,
    PaymentInfo,
    Shipment,
    StatusHistoryEntry,
)
from orderdesk.core.entities.pricing import MAX_GST_RATE, OrderLine, PricingMode
from orderdesk.core.entities.proforma import (
    ChargesBreakdown,
    DiscountKind,
    LineBreakdown,
    OrderCharges,
    OrderDiscount,
    RoundingConfig,
    RoundRule,
    TaxBreakup,
    TaxType,
)
from orderdesk.core.entities.proforma_defaults import ProformaDefaults

__all__ = [
    # Pricing
    "MAX_GST_RATE",
    "OrderLine",
    "PricingMode",
    # Proforma
    "ChargesBreakdown",
    "DiscountKind",
    "LineBreakdown",
    "OrderCharges",
    "OrderDiscount",
    "RoundingConfig",
    "RoundRule",
    "TaxBreakup",
    "TaxType",
    "ProformaDefaults",
    # Order
    "Actor",
    "LedgerRole",
    "Order",
    "OrderOrigin",
    "OrderStatus",
    "Party",
    "PaymentInfo",
    "Shipment",
    "StatusHistoryEntry",
    # Invoice
    "Invoice",
    "InvoicePayment",
    "InvoicePaymentStatus",
    "InvoiceStatus",
    # Ledger
    "MirrorWrite",
    "Location",
]
