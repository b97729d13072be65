"""
Proforma Defaults Use Case.

Read and save seller / per-buyer defaults.
"""

from dataclasses import dataclass

from orderdesk.application.dto.requests import ProformaDefaultsRequest
from orderdesk.application.dto.responses import ProformaDefaultsResponse
from orderdesk.application.use_cases.common import load_effective_defaults
from orderdesk.config import get_logger
from orderdesk.core.entities.proforma_defaults import ProformaDefaults
from orderdesk.core.interfaces import IProformaDefaultsStore

logger = get_logger(__name__)


@dataclass
class ProformaDefaultsResult:
    seller_id: str
    buyer_id: str | None
    stored: ProformaDefaults | None
    effective: ProformaDefaults


class ManageProformaDefaultsUseCase:
    """
    A record without ``buyer_id`` is the seller's global default; a record
    with one is an override whose unset fields inherit from the global.
    """

    def __init__(self, store: IProformaDefaultsStore | None = None):
        self._store = store

    async def _get_store(self) -> IProformaDefaultsStore:
        if self._store is None:
            from orderdesk.infrastructure.storage.sqlite import get_proforma_defaults_store

            self._store = await get_proforma_defaults_store()
        return self._store

    async def get(self, seller_id: str, buyer_id: str | None = None) -> ProformaDefaultsResult:
        store = await self._get_store()
        return ProformaDefaultsResult(
            seller_id=seller_id,
            buyer_id=buyer_id,
            stored=await store.get(seller_id, buyer_id),
            effective=await load_effective_defaults(store, seller_id, buyer_id),
        )

    async def save(
        self,
        seller_id: str,
        request: ProformaDefaultsRequest,
        buyer_id: str | None = None,
    ) -> ProformaDefaultsResult:
        store = await self._get_store()
        record = ProformaDefaults(seller_id=seller_id, buyer_id=buyer_id or None, **request.model_dump())
        saved = await store.save(record)

        logger.info(
            "proforma_defaults_saved",
            seller_id=seller_id,
            buyer_id=buyer_id,
            override=saved.is_override,
        )
        return ProformaDefaultsResult(
            seller_id=seller_id,
            buyer_id=buyer_id,
            stored=saved,
            effective=await load_effective_defaults(store, seller_id, buyer_id),
        )

    def to_response(self, result: ProformaDefaultsResult) -> ProformaDefaultsResponse:
        return ProformaDefaultsResponse(
            seller_id=result.seller_id,
            buyer_id=result.buyer_id,
            stored=result.stored.model_dump(mode="json", by_alias=True) if result.stored else None,
            effective=result.effective.model_dump(mode="json", by_alias=True),
        )
