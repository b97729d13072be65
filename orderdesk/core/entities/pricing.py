"""Line-item pricing entities."""

from enum import Enum
from typing import Any, Literal

from pydantic import field_validator

from orderdesk.core.entities.base import CamelModel, clamp, coerce_amount

MAX_GST_RATE = 28.0


class PricingMode(str, Enum):
    """How the authoritative price of a line is expressed."""

    LEGACY = "LEGACY"
    MRP_INCLUSIVE = "MRP_INCLUSIVE"
    BASE_PLUS_TAX = "BASE_PLUS_TAX"


class OrderLine(CamelModel):
    """One purchasable unit within an order."""

    name: str = ""
    sku: str = ""
    hsn: str = ""
    unit: str = ""
    quantity: float = 0.0
    pricing_mode: PricingMode = PricingMode.LEGACY
    mrp: float = 0.0
    base_price: float = 0.0
    final_price: float = 0.0
    gst_rate: float = 0.0
    item_discount_pct: float = 0.0
    item_discount_amt: float = 0.0
    item_discount_changed_by: Literal["pct", "amt"] = "pct"

    @field_validator("name", "sku", "hsn", "unit", mode="before")
    @classmethod
    def coerce_string(cls, v: Any) -> str:
        """Ensure string fields are never None."""
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("quantity", "mrp", "base_price", "final_price", "item_discount_amt", mode="before")
    @classmethod
    def coerce_non_negative(cls, v: Any) -> float:
        return max(0.0, coerce_amount(v))

    @field_validator("gst_rate", mode="before")
    @classmethod
    def clamp_gst_rate(cls, v: Any) -> float:
        return clamp(coerce_amount(v), 0.0, MAX_GST_RATE)

    @field_validator("item_discount_pct", mode="before")
    @classmethod
    def clamp_discount_pct(cls, v: Any) -> float:
        return clamp(coerce_amount(v), 0.0, 100.0)

    @field_validator("pricing_mode", mode="before")
    @classmethod
    def coerce_pricing_mode(cls, v: Any) -> PricingMode:
        """Unknown or missing modes fall back to LEGACY."""
        if isinstance(v, PricingMode):
            return v
        try:
            return PricingMode(str(v or "").strip().upper())
        except ValueError:
            return PricingMode.LEGACY

    @field_validator("item_discount_changed_by", mode="before")
    @classmethod
    def coerce_changed_by(cls, v: Any) -> str:
        return "amt" if str(v or "").strip().lower() == "amt" else "pct"
