"""Seller-level proforma defaults with per-buyer overrides."""

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from orderdesk.core.entities.base import CamelModel, clamp, coerce_amount, utcnow
from orderdesk.core.entities.proforma import RoundRule


class ProformaDefaults(CamelModel):
    """
    Default charges a seller applies when skipping a priced quote.

    A record without ``buyer_id`` is the seller's global default. A record
    with ``buyer_id`` is an override where ``None`` fields inherit from
    the global record.
    """

    seller_id: str
    buyer_id: str | None = None
    delivery_fee: float | None = None
    packing_fee: float | None = None
    insurance_fee: float | None = None
    other_fee: float | None = None
    discount_pct: float | None = None
    discount_amt: float | None = None
    round_enabled: bool | None = None
    round_rule: RoundRule | None = None
    autodetect_tax_type: bool | None = None
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("delivery_fee", "packing_fee", "insurance_fee", "other_fee", "discount_amt", mode="before")
    @classmethod
    def coerce_fee(cls, v: Any) -> float | None:
        if v is None or v == "":
            return None
        return max(0.0, coerce_amount(v))

    @field_validator("discount_pct", mode="before")
    @classmethod
    def clamp_pct(cls, v: Any) -> float | None:
        if v is None or v == "":
            return None
        return clamp(coerce_amount(v), 0.0, 100.0)

    @property
    def is_override(self) -> bool:
        return self.buyer_id is not None
