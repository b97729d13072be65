"""API route modules."""

from orderdesk.api.routes.health import router as health_router
from orderdesk.api.routes.invoices import router as invoices_router
from orderdesk.api.routes.ledger import router as ledger_router
from orderdesk.api.routes.orders import router as orders_router
from orderdesk.api.routes.proforma import router as proforma_router

__all__ = [
    "health_router",
    "orders_router",
    "ledger_router",
    "proforma_router",
    "invoices_router",
]
