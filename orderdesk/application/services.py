"""
Service factory functions for dependency injection.

Wires settings and infrastructure implementations into the core services.
Use cases obtain their collaborators from here unless given explicit ones.
"""

from typing import TYPE_CHECKING

from orderdesk.config import get_settings
from orderdesk.core.entities.proforma import RoundingConfig
from orderdesk.core.services import (
    DualLedgerSynchronizer,
    InvoiceMaterializer,
    OrderStatusMachine,
    ProformaCalculator,
)

if TYPE_CHECKING:
    from orderdesk.core.interfaces import IInvoiceStore, IMirrorOutbox, IOrderRecordStore


# Singleton service instances
_proforma_calculator: ProformaCalculator | None = None
_status_machine: OrderStatusMachine | None = None


def get_proforma_calculator() -> ProformaCalculator:
    """
    Get or create the ProformaCalculator.

    Default rounding and verification tolerance come from PRICING_ settings.
    """
    global _proforma_calculator

    if _proforma_calculator is None:
        pricing = get_settings().pricing
        _proforma_calculator = ProformaCalculator(
            default_rounding=RoundingConfig(
                enabled=pricing.rounding_enabled,
                rule=pricing.round_rule,
            ),
            tolerance=pricing.verify_tolerance,
        )
    return _proforma_calculator


def get_status_machine() -> OrderStatusMachine:
    """Get or create the OrderStatusMachine."""
    global _status_machine

    if _status_machine is None:
        _status_machine = OrderStatusMachine()
    return _status_machine


async def get_ledger_synchronizer(
    record_store: "IOrderRecordStore | None" = None,
    outbox: "IMirrorOutbox | None" = None,
) -> DualLedgerSynchronizer:
    """
    Build a DualLedgerSynchronizer.

    Args:
        record_store: Optional order record store override
        outbox: Optional mirror outbox override

    Returns:
        Synchronizer bound to the given (or SQLite) stores
    """
    # Lazy import infrastructure to avoid circular imports
    from orderdesk.infrastructure.storage.sqlite import get_mirror_outbox, get_order_record_store

    return DualLedgerSynchronizer(
        record_store=record_store or await get_order_record_store(),
        outbox=outbox or await get_mirror_outbox(),
        max_attempts=get_settings().ledger.max_attempts,
    )


async def get_invoice_materializer(
    invoice_store: "IInvoiceStore | None" = None,
    calculator: ProformaCalculator | None = None,
) -> InvoiceMaterializer:
    """Build an InvoiceMaterializer bound to the given (or SQLite) invoice store."""
    from orderdesk.infrastructure.storage.sqlite import get_invoice_store

    return InvoiceMaterializer(
        invoice_store=invoice_store or await get_invoice_store(),
        calculator=calculator or get_proforma_calculator(),
        number_prefix=get_settings().invoice.number_prefix,
    )


def reset_services() -> None:
    """Reset all singleton services (for testing)."""
    global _proforma_calculator, _status_machine
    _proforma_calculator = None
    _status_machine = None
