"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers that mutate orders.
"""

from orderdesk.application.services import (
    get_invoice_materializer,
    get_ledger_synchronizer,
    get_proforma_calculator,
    get_status_machine,
    reset_services,
)
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

__all__ = [
    # Use Cases
    "CreateOrderUseCase",
    "IssueQuoteUseCase",
    "UpdateOrderStatusUseCase",
    "ReconcileLedgersUseCase",
    "RepairOrderUseCase",
    "BackfillInvoicesUseCase",
    "VerifyQuoteUseCase",
    "PreviewProformaUseCase",
    "ManageProformaDefaultsUseCase",
    # Service factories
    "get_proforma_calculator",
    "get_status_machine",
    "get_ledger_synchronizer",
    "get_invoice_materializer",
    "reset_services",
]
