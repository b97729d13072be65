"""Abstract interface for invoice storage."""

from abc import ABC, abstractmethod

from orderdesk.core.entities.invoice import Invoice


class IInvoiceStore(ABC):
    """Interface for invoice persistence, one invoice per order."""

    @abstractmethod
    async def get_by_order(self, order_id: str) -> Invoice | None:
        """Get the invoice materialized for an order."""
        pass

    @abstractmethod
    async def create_if_absent(self, invoice: Invoice) -> bool:
        """
        Insert the invoice unless one exists for the same order.

        Returns True when this call created it.
        """
        pass

    @abstractmethod
    async def list_invoices(
        self,
        seller_id: str | None = None,
        buyer_id: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Invoice]:
        """List invoices, newest first."""
        pass
