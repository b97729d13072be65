"""
Invoice materializer.

Creates the financial invoice for a delivered order exactly once. The
existence check short-circuits repeat calls; the store's insert-if-absent
settles races between concurrent callers. Safe to retry.
"""

from dataclasses import dataclass

from orderdesk.config import get_logger
from orderdesk.core.entities.base import utcnow
from orderdesk.core.entities.invoice import (
    Invoice,
    InvoicePayment,
    InvoicePaymentStatus,
    InvoiceStatus,
)
from orderdesk.core.entities.order import Order, OrderStatus
from orderdesk.core.exceptions import MaterializationSkipped, ValidationError
from orderdesk.core.interfaces import IInvoiceStore
from orderdesk.core.services.payment_terms import normalize_payment_mode
from orderdesk.core.services.proforma_calculator import ProformaCalculator

logger = get_logger(__name__)

INVOICEABLE_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.INVOICED})


@dataclass
class MaterializationResult:
    invoice: Invoice | None
    created: bool
    skipped: MaterializationSkipped | None = None


def invoice_number_for(order: Order, prefix: str = "INV-") -> str:
    """Order's own invoice number, else prefix + last six of the order id."""
    if order.invoice_number:
        return order.invoice_number
    return f"{prefix}{order.id[-6:].upper()}"


class InvoiceMaterializer:
    """Builds and stores the invoice snapshot of a fulfilled order."""

    def __init__(
        self,
        invoice_store: IInvoiceStore,
        calculator: ProformaCalculator | None = None,
        number_prefix: str = "INV-",
    ):
        self._store = invoice_store
        self._calculator = calculator or ProformaCalculator()
        self._prefix = number_prefix

    async def materialize(self, order: Order) -> MaterializationResult:
        """
        Create the invoice for ``order`` unless it already exists.

        Raises:
            ValidationError: order has not been delivered.
        """
        if order.status not in INVOICEABLE_STATUSES:
            raise ValidationError(
                "status",
                f"invoice requires a delivered order, got {order.status.value}",
                order.status.value,
            )

        existing = await self._store.get_by_order(order.id)
        if existing is not None:
            return self._skipped(existing)

        invoice = self.build_invoice(order)
        created = await self._store.create_if_absent(invoice)
        if not created:
            # Lost a race with a concurrent caller
            winner = await self._store.get_by_order(order.id)
            return self._skipped(winner or invoice)

        logger.info(
            "invoice_materialized",
            order_id=order.id,
            invoice_number=invoice.invoice_number,
            grand_total=invoice.totals.grand_total,
            payment_status=invoice.payment.status.value,
        )
        return MaterializationResult(invoice=invoice, created=True)

    def build_invoice(self, order: Order) -> Invoice:
        """Snapshot parties, totals and payment status. No I/O."""
        if order.breakdown is not None:
            totals = order.breakdown
            mismatches = self._calculator.verify(order)
            if mismatches:
                logger.warning(
                    "invoice_totals_mismatch",
                    order_id=order.id,
                    fields=[m.field for m in mismatches],
                )
        else:
            totals = self._calculator.calculate_for_order(order)
            logger.info("invoice_totals_recomputed", order_id=order.id, grand_total=totals.grand_total)

        terms = normalize_payment_mode(order.payment.mode, order.payment.credit_days)
        is_paid = order.payment.is_paid
        if is_paid:
            payment_status = InvoicePaymentStatus.PAID
        elif terms.is_credit:
            payment_status = InvoicePaymentStatus.PAYMENT_DUE
        else:
            payment_status = InvoicePaymentStatus.PENDING

        now = utcnow()
        return Invoice(
            order_id=order.id,
            invoice_number=invoice_number_for(order, self._prefix),
            buyer=order.buyer.model_copy(),
            seller=order.seller.model_copy(),
            totals=totals.model_copy(deep=True),
            payment=InvoicePayment(
                mode=terms.display() if terms.code else "",
                code=terms.code,
                is_paid=is_paid,
                status=payment_status,
            ),
            status=InvoiceStatus.PAID if is_paid else InvoiceStatus.ISSUED,
            issued_at=now,
            created_at=now,
        )

    @staticmethod
    def _skipped(invoice: Invoice) -> MaterializationResult:
        logger.info(
            "invoice_materialization_skipped",
            order_id=invoice.order_id,
            invoice_number=invoice.invoice_number,
        )
        return MaterializationResult(
            invoice=invoice,
            created=False,
            skipped=MaterializationSkipped(invoice.order_id, invoice.invoice_number),
        )
