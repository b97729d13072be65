"""Proforma (charges breakdown) entities and their inputs."""

from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from orderdesk.core.entities.base import CamelModel, clamp, coerce_amount


class TaxType(str, Enum):
    """GST regime chosen from buyer/seller jurisdictions."""

    CGST_SGST = "CGST_SGST"
    IGST = "IGST"


class RoundRule(str, Enum):
    """Rupee-level rounding rule for the grand total."""

    NEAREST = "NEAREST"
    UP = "UP"
    DOWN = "DOWN"


class DiscountKind(str, Enum):
    PCT = "pct"
    AMT = "amt"


class RoundingConfig(CamelModel):
    """Rounding configuration."""

    enabled: bool = False
    rule: RoundRule = RoundRule.NEAREST

    @field_validator("rule", mode="before")
    @classmethod
    def coerce_rule(cls, v: Any) -> RoundRule:
        if isinstance(v, RoundRule):
            return v
        try:
            return RoundRule(str(v or "NEAREST").strip().upper())
        except ValueError:
            return RoundRule.NEAREST


class OrderDiscount(CamelModel):
    """Order-level discount with a single authoritative representation."""

    kind: DiscountKind = DiscountKind.AMT
    value: float = 0.0

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, v: Any) -> float:
        return max(0.0, coerce_amount(v))

    @classmethod
    def percent(cls, pct: Any) -> "OrderDiscount":
        return cls(kind=DiscountKind.PCT, value=clamp(coerce_amount(pct), 0.0, 100.0))

    @classmethod
    def amount(cls, amt: Any) -> "OrderDiscount":
        return cls(kind=DiscountKind.AMT, value=amt)


class OrderCharges(CamelModel):
    """Order-level charge inputs."""

    delivery: float = 0.0
    packing: float = 0.0
    insurance: float = 0.0
    other: float = 0.0
    discount: OrderDiscount = Field(default_factory=OrderDiscount)

    @field_validator("delivery", "packing", "insurance", "other", mode="before")
    @classmethod
    def coerce_fee(cls, v: Any) -> float:
        """Fees are never negative."""
        return max(0.0, coerce_amount(v))


class TaxBreakup(CamelModel):
    cgst: float = 0.0
    sgst: float = 0.0
    igst: float = 0.0

    @property
    def total(self) -> float:
        return float(Decimal(str(self.cgst)) + Decimal(str(self.sgst)) + Decimal(str(self.igst)))


class LineBreakdown(CamelModel):
    """Per-line detail kept with the snapshot for audit."""

    name: str = ""
    sku: str = ""
    quantity: float = 0.0
    gst_rate: float = 0.0
    unit_base: float = 0.0
    unit_tax: float = 0.0
    unit_final: float = 0.0
    gross: float = 0.0
    discount: float = 0.0
    net: float = 0.0
    taxable_share: float = 0.0
    tax: float = 0.0


class ChargesBreakdown(CamelModel):
    """Immutable snapshot of a computed proforma."""

    gross_items: float = 0.0
    line_discount_total: float = 0.0
    items_sub_total: float = 0.0
    delivery: float = 0.0
    packing: float = 0.0
    insurance: float = 0.0
    other: float = 0.0
    discount_pct: float = 0.0
    discount_amt: float = 0.0
    taxable_base: float = 0.0
    tax_type: TaxType = TaxType.CGST_SGST
    tax_breakup: TaxBreakup = Field(default_factory=TaxBreakup)
    round_off: float = 0.0
    grand_total: float = 0.0
    rounding: RoundingConfig = Field(default_factory=RoundingConfig)
    lines: list[LineBreakdown] = Field(default_factory=list)

    @property
    def total_tax(self) -> float:
        return self.tax_breakup.total

    def is_balanced(self) -> bool:
        """grandTotal == taxableBase + cgst + sgst + igst + roundOff, exactly."""
        parts = (
            self.taxable_base,
            self.tax_breakup.cgst,
            self.tax_breakup.sgst,
            self.tax_breakup.igst,
            self.round_off,
        )
        return sum(Decimal(str(p)) for p in parts) == Decimal(str(self.grand_total))
