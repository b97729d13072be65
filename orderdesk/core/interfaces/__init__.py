"""Core interfaces (ports) implemented by infrastructure."""

from orderdesk.core.interfaces.collaborators import IInvoiceRenderer, ILocationLookup
from orderdesk.core.interfaces.invoice_store import IInvoiceStore
from orderdesk.core.interfaces.mirror_outbox import IMirrorOutbox
from orderdesk.core.interfaces.order_record_store import IOrderRecordStore
from orderdesk.core.interfaces.proforma_defaults_store import IProformaDefaultsStore

__all__ = [
    "IOrderRecordStore",
    "IInvoiceStore",
    "IMirrorOutbox",
    "IProformaDefaultsStore",
    "ILocationLookup",
    "IInvoiceRenderer",
]
