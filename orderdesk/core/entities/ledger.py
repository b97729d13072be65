"""Mirror outbox entities for the dual ledger."""

from datetime import datetime

from pydantic import Field

from orderdesk.core.entities.base import CamelModel, utcnow


class MirrorWrite(CamelModel):
    """A mirror write that failed and awaits reconciliation."""

    id: int | None = None
    order_id: str
    source_namespace: str
    target_namespace: str
    attempted_status: str | None = None
    error: str = ""
    attempts: int = 1
    created_at: datetime = Field(default_factory=utcnow)
    resolved_at: datetime | None = None

    @property
    def is_resolved(self) -> bool:
        return self.resolved_at is not None
