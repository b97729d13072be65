"""Abstract interface for proforma defaults storage."""

from abc import ABC, abstractmethod

from orderdesk.core.entities.proforma_defaults import ProformaDefaults


class IProformaDefaultsStore(ABC):
    """Seller global defaults and per-buyer overrides."""

    @abstractmethod
    async def get(self, seller_id: str, buyer_id: str | None = None) -> ProformaDefaults | None:
        """Get the global record (no buyer) or a buyer override."""
        pass

    @abstractmethod
    async def save(self, defaults: ProformaDefaults) -> ProformaDefaults:
        """Create or replace a defaults record."""
        pass
