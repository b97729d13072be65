"""Interfaces for external collaborators."""

from abc import ABC, abstractmethod

from orderdesk.core.entities.invoice import Invoice
from orderdesk.core.entities.location import Location
from orderdesk.core.entities.order import Order


class ILocationLookup(ABC):
    """Resolves postal codes to city/state. Read-only."""

    @abstractmethod
    async def lookup(self, pincode: str) -> Location | None:
        """
        Resolve a postal code.

        Returns None when the code is unknown; raises LocationLookupError
        when the service cannot be reached.
        """
        pass


class IInvoiceRenderer(ABC):
    """Produces a printable artifact from a finalized invoice and its order."""

    @abstractmethod
    def render(self, invoice: Invoice, order: Order) -> bytes:
        """Pure function of its inputs."""
        pass
