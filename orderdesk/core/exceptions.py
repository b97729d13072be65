"""
Domain exceptions for the OrderDesk engine.

Some members of the taxonomy are never raised: ``PartialPropagationFailure``
and ``MaterializationSkipped`` travel inside results as warnings/signals so
that the caller keeps going while still getting a structured payload.
"""

from typing import Any


class OrderDeskError(Exception):
    """Base exception for all OrderDesk errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Order flow
class OrderFlowError(OrderDeskError):
    """Base exception for order lifecycle violations."""

    pass


class InvalidTransitionError(OrderFlowError):
    """Requested status change is not allowed from the current status."""

    def __init__(
        self,
        current: str,
        attempted: str,
        order_id: str | None = None,
        reason: str | None = None,
    ):
        message = f"Cannot move order from {current} to {attempted}"
        if reason:
            message += f": {reason}"
        super().__init__(
            message,
            code="INVALID_TRANSITION",
            details={
                "order_id": order_id,
                "current": current,
                "attempted": attempted,
                "reason": reason,
            },
        )
        self.current = current
        self.attempted = attempted


class PartialPropagationFailure(OrderFlowError):
    """Primary record written, mirror record not. Returned as a warning."""

    def __init__(
        self,
        order_id: str,
        namespace: str,
        attempted: str | None,
        error: str,
        outbox_id: int | None = None,
    ):
        super().__init__(
            f"Order {order_id} saved, but the copy under '{namespace}' "
            f"could not be updated: {error}",
            code="PARTIAL_PROPAGATION",
            details={
                "order_id": order_id,
                "namespace": namespace,
                "attempted": attempted,
                "error": error,
                "outbox_id": outbox_id,
                "retryable": True,
            },
        )


class MaterializationSkipped(OrderFlowError):
    """Invoice already exists for the order. A no-op signal, not a failure."""

    def __init__(self, order_id: str, invoice_number: str | None = None):
        super().__init__(
            f"Invoice already exists for order {order_id}",
            code="MATERIALIZATION_SKIPPED",
            details={"order_id": order_id, "invoice_number": invoice_number},
        )


class InvoiceMaterializationFailed(OrderFlowError):
    """Order committed but its invoice could not be created yet."""

    def __init__(self, order_id: str, error: str):
        super().__init__(
            f"Order {order_id} delivered, but its invoice could not be created: {error}",
            code="INVOICE_MATERIALIZATION_FAILED",
            details={"order_id": order_id, "error": error, "retryable": True},
        )


# Storage Exceptions
class StorageError(OrderDeskError):
    """Base exception for storage operations."""

    pass


class OrderNotFoundError(StorageError):
    """Order record not found in a namespace."""

    def __init__(self, order_id: str, namespace: str | None = None):
        super().__init__(
            f"Order not found: {order_id}"
            + (f" (namespace '{namespace}')" if namespace else ""),
            code="ORDER_NOT_FOUND",
            details={"order_id": order_id, "namespace": namespace},
        )


class InvoiceNotFoundError(StorageError):
    """Invoice not found in storage."""

    def __init__(self, order_id: str):
        super().__init__(
            f"Invoice not found for order: {order_id}",
            code="INVOICE_NOT_FOUND",
            details={"order_id": order_id},
        )


class LedgerWriteError(StorageError):
    """Primary record write failed; the mutation was not applied."""

    def __init__(
        self,
        order_id: str,
        namespace: str,
        attempted: str | None,
        error: str,
    ):
        super().__init__(
            f"Failed to write order {order_id} under '{namespace}': {error}",
            code="LEDGER_WRITE_FAILED",
            details={
                "order_id": order_id,
                "namespace": namespace,
                "attempted": attempted,
                "error": error,
            },
        )


class CorruptRecordError(StorageError):
    """Stored order record does not match any accepted shape."""

    def __init__(self, order_id: str | None, reason: str):
        super().__init__(
            f"Stored record for order {order_id} is malformed: {reason}",
            code="CORRUPT_RECORD",
            details={"order_id": order_id, "reason": reason},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Collaborators
class LocationLookupError(OrderDeskError):
    """Postal code lookup failed."""

    def __init__(self, pincode: str, reason: str):
        super().__init__(
            f"Location lookup failed for {pincode}: {reason}",
            code="LOCATION_LOOKUP_FAILED",
            details={"pincode": pincode, "reason": reason},
        )


# Validation Exceptions
class ValidationError(OrderDeskError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )


class ConfigurationError(OrderDeskError):
    """Configuration error."""

    pass
