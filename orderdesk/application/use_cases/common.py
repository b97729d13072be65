"""Helpers shared by the order use cases."""

from orderdesk.application.dto.requests import ChargeInputs
from orderdesk.application.dto.responses import (
    InvoiceResponse,
    OrderRecordResponse,
    WarningResponse,
)
from orderdesk.config import get_settings
from orderdesk.core.entities.invoice import Invoice
from orderdesk.core.entities.order import Order
from orderdesk.core.entities.proforma import (
    OrderCharges,
    OrderDiscount,
    RoundingConfig,
)
from orderdesk.core.entities.proforma_defaults import ProformaDefaults
from orderdesk.core.exceptions import OrderDeskError
from orderdesk.core.interfaces import IProformaDefaultsStore
from orderdesk.core.services import (
    allowed_next,
    builtin_defaults,
    resolve_effective_defaults,
)


def settings_rounding() -> RoundingConfig:
    pricing = get_settings().pricing
    return RoundingConfig(enabled=pricing.rounding_enabled, rule=pricing.round_rule)


async def load_effective_defaults(
    store: IProformaDefaultsStore,
    seller_id: str,
    buyer_id: str | None = None,
) -> ProformaDefaults:
    """Built-in < seller global < buyer override."""
    seller_global = await store.get(seller_id)
    override = await store.get(seller_id, buyer_id) if buyer_id else None
    return resolve_effective_defaults(
        builtin_defaults(seller_id, settings_rounding()),
        seller_global,
        override,
    )


def discount_from_inputs(inputs: ChargeInputs) -> OrderDiscount | None:
    """
    Canonical discount from the manual inputs, or None when none was given.

    The field named by ``discount_changed_by`` wins; without it a lone
    percentage is taken as a percentage and anything else as an amount.
    """
    changed_by = inputs.discount_changed_by
    if changed_by is None:
        changed_by = "pct" if inputs.discount_pct is not None and inputs.discount_amt is None else "amt"

    if changed_by == "pct" and inputs.discount_pct is not None:
        return OrderDiscount.percent(inputs.discount_pct)
    if inputs.discount_amt is not None:
        return OrderDiscount.amount(inputs.discount_amt)
    if inputs.discount_pct is not None:
        return OrderDiscount.percent(inputs.discount_pct)
    return None


def overlay_charges(base: OrderCharges, inputs: ChargeInputs) -> OrderCharges:
    """Manual per-quote inputs over ``base``."""
    charges = base.model_copy(deep=True)
    for name in ("delivery", "packing", "insurance", "other"):
        value = getattr(inputs, name)
        if value is not None:
            setattr(charges, name, value)
    discount = discount_from_inputs(inputs)
    if discount is not None:
        charges.discount = discount
    return charges


def overlay_rounding(base: RoundingConfig, inputs: ChargeInputs) -> RoundingConfig:
    rounding = base.model_copy()
    if inputs.rounding_enabled is not None:
        rounding.enabled = inputs.rounding_enabled
    if inputs.round_rule is not None:
        rounding.rule = inputs.round_rule
    return rounding


def order_record_response(order: Order, namespace: str) -> OrderRecordResponse:
    return OrderRecordResponse(
        namespace=namespace,
        order=order.model_dump(mode="json", by_alias=True),
        status=order.status.value,
        status_label=order.status_label,
        allowed_next=sorted(s.value for s in allowed_next(order.status)),
    )


def invoice_response(invoice: Invoice) -> InvoiceResponse:
    return InvoiceResponse(
        order_id=invoice.order_id,
        invoice_number=invoice.invoice_number,
        seller_id=invoice.seller.business_id,
        buyer_id=invoice.buyer.business_id,
        seller_name=invoice.seller.business_name,
        buyer_name=invoice.buyer.business_name,
        status=invoice.status.value,
        payment_status=invoice.payment.status.value,
        payment_mode=invoice.payment.mode,
        grand_total=invoice.grand_total,
        tax_type=invoice.totals.tax_type.value,
        issued_at=invoice.issued_at,
        record=invoice.model_dump(mode="json", by_alias=True),
    )


def warning_response(warning: OrderDeskError) -> WarningResponse:
    details = warning.details
    return WarningResponse(
        code=warning.code,
        message=warning.message,
        order_id=details.get("order_id"),
        namespace=details.get("namespace"),
        attempted=details.get("attempted"),
        retryable=bool(details.get("retryable", False)),
        outbox_id=details.get("outbox_id"),
    )
