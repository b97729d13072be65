"""Abstract interface for per-namespace order records."""

from abc import ABC, abstractmethod

from orderdesk.core.entities.order import Order, OrderStatus


class IOrderRecordStore(ABC):
    """
    Persistence of order copies keyed by (namespace, order id).

    Writes are last-write-wins; no merge is performed.
    """

    @abstractmethod
    async def put(self, namespace: str, order: Order) -> None:
        """Create or overwrite the order record under a namespace."""
        pass

    @abstractmethod
    async def get(self, namespace: str, order_id: str) -> Order | None:
        """Get an order record from a namespace."""
        pass

    @abstractmethod
    async def list_orders(
        self,
        namespace: str,
        statuses: list[OrderStatus] | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Order]:
        """List orders in a namespace, newest first."""
        pass
