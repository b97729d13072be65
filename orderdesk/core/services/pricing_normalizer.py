"""
Pricing normalizer.

Reduces a line's pricing representation (MRP-inclusive, base-plus-tax or
legacy flat price) to a canonical ``{base, tax, final}`` triple. All money is
handled as ``Decimal`` and rounded half-up at the cent. Arithmetic never
raises: malformed input is treated as zero.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from orderdesk.core.entities.pricing import MAX_GST_RATE, OrderLine, PricingMode

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class PriceSplit:
    """Canonical price triple. ``base + tax == final`` always holds."""

    base: Decimal
    tax: Decimal
    final: Decimal

    def as_dict(self) -> dict[str, float]:
        return {"base": float(self.base), "tax": float(self.tax), "final": float(self.final)}


def to_decimal(value: Any) -> Decimal:
    """Coerce anything to a finite Decimal; garbage becomes zero."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).replace(",", "").strip())
        except (InvalidOperation, ValueError):
            return ZERO
    return result if result.is_finite() else ZERO


def round2(value: Any) -> Decimal:
    """Round half-up to the cent."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_number(value: Any) -> float:
    """Safe float for display and persistence."""
    return float(round2(value))


def clamp_rate(rate: Any) -> Decimal:
    """GST rate limited to 0..28."""
    return max(ZERO, min(Decimal(str(MAX_GST_RATE)), to_decimal(rate)))


def split_from_mrp(final: Any, rate: Any) -> PriceSplit:
    """
    Split a tax-inclusive price.

    ``base = final / (1 + rate/100)``, ``tax = final - base``. A zero rate or a
    non-positive price leaves everything in base.
    """
    amount = to_decimal(final)
    r = clamp_rate(rate)
    if amount <= 0 or r <= 0:
        total = round2(amount)
        return PriceSplit(base=total, tax=round2(0), final=total)

    base = round2(amount / (1 + r / HUNDRED))
    total = round2(amount)
    return PriceSplit(base=base, tax=round2(total - base), final=total)


def calc_base_plus_tax(base: Any, rate: Any) -> PriceSplit:
    """Add tax on top of a pre-tax price."""
    b = round2(base)
    tax = round2(b * clamp_rate(rate) / HUNDRED)
    return PriceSplit(base=b, tax=tax, final=round2(b + tax))


def normalize_line(line: OrderLine) -> PriceSplit:
    """Unit price triple for a line according to its pricing mode."""
    if line.pricing_mode is PricingMode.MRP_INCLUSIVE:
        return split_from_mrp(line.final_price or line.mrp, line.gst_rate)
    if line.pricing_mode is PricingMode.BASE_PLUS_TAX:
        return calc_base_plus_tax(line.base_price, line.gst_rate)

    # LEGACY: the flat price is the whole story
    flat = round2(line.final_price)
    return PriceSplit(base=flat, tax=round2(0), final=flat)


def line_amounts(line: OrderLine) -> PriceSplit:
    """Quantity-scaled triple for a line."""
    unit = normalize_line(line)
    qty = to_decimal(line.quantity)
    base = round2(unit.base * qty)
    tax = round2(unit.tax * qty)
    return PriceSplit(base=base, tax=tax, final=round2(base + tax))
