"""
Proforma defaults resolution.

Priority: manual per-quote input > buyer override > seller global > built-in.
"""

from decimal import Decimal

from orderdesk.core.entities.proforma import (
    OrderCharges,
    OrderDiscount,
    RoundingConfig,
    RoundRule,
)
from orderdesk.core.entities.proforma_defaults import ProformaDefaults
from orderdesk.core.services.pricing_normalizer import HUNDRED, to_decimal

_OVERRIDABLE = (
    "delivery_fee",
    "packing_fee",
    "insurance_fee",
    "other_fee",
    "discount_pct",
    "discount_amt",
    "round_enabled",
    "round_rule",
    "autodetect_tax_type",
)


def builtin_defaults(seller_id: str, rounding: RoundingConfig | None = None) -> ProformaDefaults:
    """Complete record used when a seller has configured nothing."""
    rounding = rounding or RoundingConfig()
    return ProformaDefaults(
        seller_id=seller_id,
        delivery_fee=0.0,
        packing_fee=0.0,
        insurance_fee=0.0,
        other_fee=0.0,
        discount_pct=0.0,
        discount_amt=0.0,
        round_enabled=rounding.enabled,
        round_rule=rounding.rule,
        autodetect_tax_type=True,
    )


def resolve_effective_defaults(
    base: ProformaDefaults,
    *layers: ProformaDefaults | None,
) -> ProformaDefaults:
    """Overlay non-null fields of each layer onto ``base``, in order."""
    merged = base.model_dump()
    for layer in layers:
        if layer is None:
            continue
        for name in _OVERRIDABLE:
            value = getattr(layer, name)
            if value is not None:
                merged[name] = value
        if layer.buyer_id is not None:
            merged["buyer_id"] = layer.buyer_id
    return ProformaDefaults.model_validate(merged)


def charges_from_defaults(
    defaults: ProformaDefaults,
    items_sub_total: float = 0.0,
) -> tuple[OrderCharges, RoundingConfig]:
    """
    Charge inputs and rounding derived from effective defaults.

    When both a percentage and an amount discount are configured the larger
    one, measured against the items subtotal, wins.
    """
    pct = to_decimal(defaults.discount_pct)
    amt = to_decimal(defaults.discount_amt)
    from_pct = to_decimal(items_sub_total) * pct / HUNDRED

    if pct > 0 and from_pct >= amt:
        discount = OrderDiscount.percent(pct)
    elif amt > 0:
        discount = OrderDiscount.amount(amt)
    else:
        discount = OrderDiscount.amount(Decimal("0"))

    charges = OrderCharges(
        delivery=defaults.delivery_fee,
        packing=defaults.packing_fee,
        insurance=defaults.insurance_fee,
        other=defaults.other_fee,
        discount=discount,
    )
    rounding = RoundingConfig(
        enabled=bool(defaults.round_enabled),
        rule=defaults.round_rule or RoundRule.NEAREST,
    )
    return charges, rounding
