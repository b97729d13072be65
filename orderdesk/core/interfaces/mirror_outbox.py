"""Abstract interface for the mirror-write outbox."""

from abc import ABC, abstractmethod

from orderdesk.core.entities.ledger import MirrorWrite


class IMirrorOutbox(ABC):
    """Queue of mirror writes awaiting reconciliation."""

    @abstractmethod
    async def enqueue(self, entry: MirrorWrite) -> MirrorWrite:
        """Record a failed mirror write. Returns the entry with its id."""
        pass

    @abstractmethod
    async def list_pending(self, limit: int = 100, max_attempts: int | None = None) -> list[MirrorWrite]:
        """Unresolved entries, oldest first."""
        pass

    @abstractmethod
    async def mark_resolved(self, entry_id: int) -> None:
        pass

    @abstractmethod
    async def mark_failed(self, entry_id: int, error: str) -> None:
        """Bump the attempt counter and store the latest error."""
        pass

    @abstractmethod
    async def resolve_for_order(self, order_id: str, target_namespace: str) -> int:
        """Resolve pending entries made stale by a successful mirror write."""
        pass
