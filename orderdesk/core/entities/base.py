"""Shared model configuration and coercion helpers for entities."""

import math
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Entity base: snake_case in Python, camelCase when persisted."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


def coerce_amount(v: Any) -> float:
    """Convert None/empty/invalid/non-finite to 0.0."""
    if v is None or v == "" or isinstance(v, bool):
        return 0.0
    if isinstance(v, (int, float, Decimal)):
        result = float(v)
    else:
        try:
            result = float(Decimal(str(v).replace(",", "").strip()))
        except (InvalidOperation, ValueError):
            return 0.0
    return result if math.isfinite(result) else 0.0


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def ensure_utc(v: Any) -> Any:
    """Treat naive datetimes as UTC."""
    if isinstance(v, str) and v:
        v = datetime.fromisoformat(v.replace("Z", "+00:00"))
    if isinstance(v, datetime) and v.tzinfo is None:
        return v.replace(tzinfo=UTC)
    return v


def utcnow() -> datetime:
    return datetime.now(UTC)
