"""
Proforma calculator.

Layer-pure service producing a ChargesBreakdown from order lines, order-level
charges, the parties' jurisdictions and a rounding configuration. Also
re-derives a stored breakdown so that client-supplied totals can be checked
before they are treated as authoritative.
"""

from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal

from orderdesk.config import get_logger
from orderdesk.core.entities.order import Order
from orderdesk.core.entities.pricing import OrderLine
from orderdesk.core.entities.proforma import (
    ChargesBreakdown,
    DiscountKind,
    LineBreakdown,
    OrderCharges,
    RoundingConfig,
    RoundRule,
    TaxBreakup,
    TaxType,
)
from orderdesk.core.entities.proforma_defaults import ProformaDefaults
from orderdesk.core.services.pricing_normalizer import (
    HUNDRED,
    ZERO,
    line_amounts,
    normalize_line,
    round2,
    to_decimal,
)
from orderdesk.core.services.proforma_defaults import charges_from_defaults

logger = get_logger(__name__)

_ROUNDING_MODES = {
    RoundRule.NEAREST: ROUND_HALF_UP,
    RoundRule.UP: ROUND_CEILING,
    RoundRule.DOWN: ROUND_FLOOR,
}

# Fields compared when verifying a stored breakdown
_VERIFIED_FIELDS = (
    "gross_items",
    "line_discount_total",
    "items_sub_total",
    "delivery",
    "packing",
    "insurance",
    "other",
    "discount_amt",
    "taxable_base",
    "round_off",
    "grand_total",
)


@dataclass
class BreakdownMismatch:
    """A stored figure that disagrees with the server recomputation."""

    field: str
    stored: float | str
    recomputed: float | str


@dataclass
class _LineResult:
    line: OrderLine
    unit_base: Decimal
    unit_tax: Decimal
    unit_final: Decimal
    gross: Decimal
    discount: Decimal
    net: Decimal
    taxable_share: Decimal = ZERO
    tax: Decimal = ZERO


def determine_tax_type(buyer_state: str | None, seller_state: str | None) -> TaxType:
    """
    Intrastate (CGST+SGST) when both states match, else IGST.

    States compare case- and whitespace-insensitively; a missing state
    defaults to intrastate.
    """
    buyer = (buyer_state or "").strip().lower()
    seller = (seller_state or "").strip().lower()
    if not buyer or not seller or buyer == seller:
        return TaxType.CGST_SGST
    return TaxType.IGST


def apply_rounding(amount: Decimal, rounding: RoundingConfig) -> Decimal:
    """Rupee-level rounding per rule; the adjustment is returned, not the total."""
    if not rounding.enabled:
        return round2(0)
    rounded = amount.quantize(Decimal("1"), rounding=_ROUNDING_MODES[rounding.rule])
    return round2(rounded - amount)


class ProformaCalculator:
    """
    Computes the legally structured price breakdown of an order.

    Each line's own GST rate applies to its proportional share of the
    taxable base, so mixed-rate orders are never forced to a single rate.
    """

    def __init__(self, default_rounding: RoundingConfig | None = None, tolerance: float = 0.01):
        self._default_rounding = default_rounding or RoundingConfig()
        self._tolerance = Decimal(str(tolerance))

    def calculate(
        self,
        lines: list[OrderLine],
        charges: OrderCharges | None = None,
        buyer_state: str | None = None,
        seller_state: str | None = None,
        rounding: RoundingConfig | None = None,
    ) -> ChargesBreakdown:
        charges = charges or OrderCharges()
        rounding = rounding or self._default_rounding

        results = [self._line_result(line) for line in lines]

        gross_items = sum((r.gross for r in results), ZERO)
        line_discount_total = sum((r.discount for r in results), ZERO)
        items_sub_total = sum((r.net for r in results), ZERO)

        delivery = round2(charges.delivery)
        packing = round2(charges.packing)
        insurance = round2(charges.insurance)
        other = round2(charges.other)
        pre_discount_total = items_sub_total + delivery + packing + insurance + other

        discount_amt, discount_pct = self._order_discount(charges, pre_discount_total)
        taxable_base = pre_discount_total - discount_amt

        tax_type = determine_tax_type(buyer_state, seller_state)
        cgst = sgst = igst = ZERO
        if items_sub_total > 0 and taxable_base > 0:
            for r in results:
                r.taxable_share = round2(taxable_base * r.net / items_sub_total)
                r.tax = round2(taxable_base * r.net / items_sub_total * to_decimal(r.line.gst_rate) / HUNDRED)
                if tax_type is TaxType.CGST_SGST:
                    half = round2(r.tax / 2)
                    cgst += half
                    sgst += half
                else:
                    igst += r.tax

        pre_round = taxable_base + cgst + sgst + igst
        round_off = apply_rounding(pre_round, rounding)

        return ChargesBreakdown(
            gross_items=float(gross_items),
            line_discount_total=float(line_discount_total),
            items_sub_total=float(items_sub_total),
            delivery=float(delivery),
            packing=float(packing),
            insurance=float(insurance),
            other=float(other),
            discount_pct=float(discount_pct),
            discount_amt=float(discount_amt),
            taxable_base=float(taxable_base),
            tax_type=tax_type,
            tax_breakup=TaxBreakup(cgst=float(cgst), sgst=float(sgst), igst=float(igst)),
            round_off=float(round_off),
            grand_total=float(pre_round + round_off),
            rounding=rounding,
            lines=[self._line_breakdown(r) for r in results],
        )

    def calculate_for_order(self, order: Order) -> ChargesBreakdown:
        """Breakdown from the inputs held on an order."""
        return self.calculate(
            order.lines,
            order.charges,
            buyer_state=order.buyer.state,
            seller_state=order.seller.state,
            rounding=order.rounding,
        )

    def calculate_from_defaults(
        self,
        lines: list[OrderLine],
        defaults: ProformaDefaults,
        buyer_state: str | None = None,
        seller_state: str | None = None,
    ) -> ChargesBreakdown:
        """Breakdown with charges and rounding taken from effective proforma defaults."""
        items_sub_total = self.calculate(lines).items_sub_total
        charges, rounding = charges_from_defaults(defaults, items_sub_total)
        return self.calculate(lines, charges, buyer_state, seller_state, rounding)

    def verify(self, order: Order) -> list[BreakdownMismatch]:
        """
        Compare the order's stored breakdown with a fresh computation.

        An order without a breakdown has nothing to verify.
        """
        stored = order.breakdown
        if stored is None:
            return []

        fresh = self.calculate(
            order.lines,
            order.charges,
            buyer_state=order.buyer.state,
            seller_state=order.seller.state,
            rounding=stored.rounding,
        )

        mismatches = []
        for field in _VERIFIED_FIELDS:
            a = getattr(stored, field)
            b = getattr(fresh, field)
            if abs(to_decimal(a) - to_decimal(b)) > self._tolerance:
                mismatches.append(BreakdownMismatch(field=field, stored=a, recomputed=b))

        for tax_field in ("cgst", "sgst", "igst"):
            a = getattr(stored.tax_breakup, tax_field)
            b = getattr(fresh.tax_breakup, tax_field)
            if abs(to_decimal(a) - to_decimal(b)) > self._tolerance:
                mismatches.append(BreakdownMismatch(field=tax_field, stored=a, recomputed=b))

        if stored.tax_type != fresh.tax_type:
            mismatches.append(
                BreakdownMismatch(
                    field="tax_type",
                    stored=stored.tax_type.value,
                    recomputed=fresh.tax_type.value,
                )
            )

        if mismatches:
            logger.warning(
                "breakdown_mismatch",
                order_id=order.id,
                fields=[m.field for m in mismatches],
            )
        return mismatches

    @staticmethod
    def _line_result(line: OrderLine) -> _LineResult:
        unit = normalize_line(line)
        gross = line_amounts(line).base

        if line.item_discount_changed_by == "amt":
            discount = min(round2(line.item_discount_amt), gross)
        else:
            discount = round2(gross * to_decimal(line.item_discount_pct) / HUNDRED)

        return _LineResult(
            line=line,
            unit_base=unit.base,
            unit_tax=unit.tax,
            unit_final=unit.final,
            gross=gross,
            discount=discount,
            net=gross - discount,
        )

    @staticmethod
    def _order_discount(charges: OrderCharges, pre_discount_total: Decimal) -> tuple[Decimal, Decimal]:
        """Canonical discount amount plus its derived percentage."""
        if pre_discount_total <= 0:
            return round2(0), round2(0)

        discount = charges.discount
        if discount.kind is DiscountKind.PCT:
            pct = min(to_decimal(discount.value), HUNDRED)
            amount = round2(pre_discount_total * pct / HUNDRED)
            return min(amount, pre_discount_total), round2(pct)

        amount = min(round2(discount.value), pre_discount_total)
        return amount, round2(amount / pre_discount_total * HUNDRED)

    @staticmethod
    def _line_breakdown(r: _LineResult) -> LineBreakdown:
        return LineBreakdown(
            name=r.line.name,
            sku=r.line.sku,
            quantity=r.line.quantity,
            gst_rate=r.line.gst_rate,
            unit_base=float(r.unit_base),
            unit_tax=float(r.unit_tax),
            unit_final=float(r.unit_final),
            gross=float(r.gross),
            discount=float(r.discount),
            net=float(r.net),
            taxable_share=float(r.taxable_share),
            tax=float(r.tax),
        )
