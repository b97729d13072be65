"""Application use cases."""

from orderdesk.application.use_cases.backfill_invoices import (
    BackfillInvoicesResult,
    BackfillInvoicesUseCase,
)
from orderdesk.application.use_cases.create_order import CreateOrderResult, CreateOrderUseCase
from orderdesk.application.use_cases.issue_quote import IssueQuoteResult, IssueQuoteUseCase
from orderdesk.application.use_cases.manage_proforma_defaults import (
    ManageProformaDefaultsUseCase,
    ProformaDefaultsResult,
)
from orderdesk.application.use_cases.preview_proforma import PreviewProformaUseCase
from orderdesk.application.use_cases.reconcile_ledgers import ReconcileLedgersUseCase
from orderdesk.application.use_cases.repair_order import RepairOrderUseCase
from orderdesk.application.use_cases.update_order_status import (
    UpdateOrderStatusResult,
    UpdateOrderStatusUseCase,
)
from orderdesk.application.use_cases.verify_quote import VerifyQuoteResult, VerifyQuoteUseCase

__all__ = [
    "CreateOrderUseCase",
    "CreateOrderResult",
    "IssueQuoteUseCase",
    "IssueQuoteResult",
    "UpdateOrderStatusUseCase",
    "UpdateOrderStatusResult",
    "ReconcileLedgersUseCase",
    "RepairOrderUseCase",
    "BackfillInvoicesUseCase",
    "BackfillInvoicesResult",
    "VerifyQuoteUseCase",
    "VerifyQuoteResult",
    "PreviewProformaUseCase",
    "ManageProformaDefaultsUseCase",
    "ProformaDefaultsResult",
]
