"""
Dependency injection container for FastAPI.

Provides use case and store instances to route handlers. Tests replace
these through ``app.dependency_overrides``.
"""

from functools import lru_cache

from orderdesk.application.use_cases import (
    BackfillInvoicesUseCase,
    CreateOrderUseCase,
    IssueQuoteUseCase,
    ManageProformaDefaultsUseCase,
    PreviewProformaUseCase,
    ReconcileLedgersUseCase,
    RepairOrderUseCase,
    UpdateOrderStatusUseCase,
    VerifyQuoteUseCase,
)
from orderdesk.config import Settings, get_settings
from orderdesk.core.interfaces import IInvoiceStore, IMirrorOutbox, IOrderRecordStore
from orderdesk.infrastructure.storage.sqlite import (
    get_invoice_store,
    get_mirror_outbox,
    get_order_record_store,
)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Store dependencies
async def get_order_records() -> IOrderRecordStore:
    """Get order record store."""
    return await get_order_record_store()


async def get_invoices() -> IInvoiceStore:
    """Get invoice store."""
    return await get_invoice_store()


async def get_outbox() -> IMirrorOutbox:
    """Get mirror outbox."""
    return await get_mirror_outbox()


# Use case dependencies
def get_create_order_use_case() -> CreateOrderUseCase:
    return CreateOrderUseCase()


def get_issue_quote_use_case() -> IssueQuoteUseCase:
    return IssueQuoteUseCase()


def get_update_status_use_case() -> UpdateOrderStatusUseCase:
    return UpdateOrderStatusUseCase()


def get_reconcile_use_case() -> ReconcileLedgersUseCase:
    return ReconcileLedgersUseCase()


def get_repair_use_case() -> RepairOrderUseCase:
    return RepairOrderUseCase()


def get_backfill_use_case() -> BackfillInvoicesUseCase:
    return BackfillInvoicesUseCase()


def get_verify_quote_use_case() -> VerifyQuoteUseCase:
    return VerifyQuoteUseCase()


def get_preview_use_case() -> PreviewProformaUseCase:
    return PreviewProformaUseCase()


def get_proforma_defaults_use_case() -> ManageProformaDefaultsUseCase:
    return ManageProformaDefaultsUseCase()
