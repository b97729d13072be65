"""
Core domain services.

Layer-pure: depend only on core entities, interfaces and exceptions.
"""

from orderdesk.core.services.invoice_materializer import (
    InvoiceMaterializer,
    MaterializationResult,
    invoice_number_for,
)
from orderdesk.core.services.ledger_synchronizer import (
    DualLedgerSynchronizer,
    PropagationResult,
    ReconcileReport,
)
from orderdesk.core.services.order_status_machine import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    OrderStatusMachine,
    allowed_next,
    can_transition,
    initial_status,
)
from orderdesk.core.services.payment_terms import PaymentTerms, normalize_payment_mode
from orderdesk.core.services.pricing_normalizer import (
    PriceSplit,
    calc_base_plus_tax,
    line_amounts,
    normalize_line,
    round2,
    split_from_mrp,
    to_number,
)
from orderdesk.core.services.proforma_calculator import (
    BreakdownMismatch,
    ProformaCalculator,
    determine_tax_type,
)
from orderdesk.core.services.proforma_defaults import (
    builtin_defaults,
    charges_from_defaults,
    resolve_effective_defaults,
)

__all__ = [
    # Pricing
    "PriceSplit",
    "calc_base_plus_tax",
    "line_amounts",
    "normalize_line",
    "round2",
    "split_from_mrp",
    "to_number",
    # Proforma
    "BreakdownMismatch",
    "ProformaCalculator",
    "determine_tax_type",
    "builtin_defaults",
    "charges_from_defaults",
    "resolve_effective_defaults",
    # Status machine
    "OrderStatusMachine",
    "TERMINAL_STATES",
    "VALID_TRANSITIONS",
    "allowed_next",
    "can_transition",
    "initial_status",
    # Ledger
    "DualLedgerSynchronizer",
    "PropagationResult",
    "ReconcileReport",
    # Invoice
    "InvoiceMaterializer",
    "MaterializationResult",
    "invoice_number_for",
    "PaymentTerms",
    "normalize_payment_mode",
]
