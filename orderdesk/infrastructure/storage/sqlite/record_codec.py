"""
Order record codec.

The single place where stored order documents are upgraded. Writes carry the
status code in both ``status`` and ``statusCode`` (same enum value). Reads
accept either field, upgrade display labels ("Out for Delivery") to codes and
turn map-shaped ``statusHistory`` into a list ordered by ``updatedAt``.
Anything else is rejected.
"""

import json
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from orderdesk.core.entities.order import Order, OrderStatus
from orderdesk.core.exceptions import CorruptRecordError

_TIMESTAMP_KEYS = ("updatedAt", "updated_at", "at", "timestamp", "createdAt")


def encode_order(order: Order) -> str:
    payload = order.model_dump(mode="json", by_alias=True)
    payload["statusCode"] = payload["status"]
    return json.dumps(payload, separators=(",", ":"))


def decode_order(raw: str | bytes | dict[str, Any]) -> Order:
    """Parse a stored document into an Order, upgrading legacy shapes."""
    if isinstance(raw, dict):
        data = dict(raw)
    else:
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise CorruptRecordError(None, f"payload is not JSON: {e}") from e

    if not isinstance(data, dict):
        raise CorruptRecordError(None, "payload is not an object")

    order_id = data.get("id")
    data["status"] = _status(order_id, data.get("statusCode") or data.get("status"))
    data.pop("statusCode", None)
    data["statusHistory"] = _history(order_id, data.get("statusHistory"))

    try:
        return Order.model_validate(data)
    except PydanticValidationError as e:
        raise CorruptRecordError(order_id, str(e)) from e


def _status(order_id: str | None, raw: Any) -> str:
    try:
        return OrderStatus.parse(raw).value
    except ValueError:
        raise CorruptRecordError(order_id, f"unknown status {raw!r}") from None


def _history(order_id: str | None, raw: Any) -> list[dict[str, Any]]:
    if raw is None:
        return []
    if isinstance(raw, dict):
        entries = list(raw.values())
    elif isinstance(raw, list):
        entries = raw
    else:
        raise CorruptRecordError(order_id, f"statusHistory has type {type(raw).__name__}")

    upgraded = [_history_entry(order_id, e) for e in entries]
    if isinstance(raw, dict):
        upgraded.sort(key=lambda e: e["updatedAt"])
    return upgraded


def _history_entry(order_id: str | None, entry: Any) -> dict[str, Any]:
    if not isinstance(entry, dict):
        raise CorruptRecordError(order_id, "statusHistory entry is not an object")

    updated_at = next((entry[k] for k in _TIMESTAMP_KEYS if entry.get(k)), None)
    if updated_at is None:
        raise CorruptRecordError(order_id, "statusHistory entry has no timestamp")

    return {
        "status": _status(order_id, entry.get("statusCode") or entry.get("status")),
        "updatedAt": _parse_time(order_id, updated_at),
        "updatedBy": entry.get("updatedBy") or "",
        "updatedByName": entry.get("updatedByName") or "",
        "notes": entry.get("notes"),
    }


def _parse_time(order_id: str | None, value: Any) -> datetime:
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, (int, float)):
        # epoch milliseconds
        try:
            ts = datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError):
            raise CorruptRecordError(order_id, f"bad timestamp {value!r}") from None
    else:
        try:
            ts = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            raise CorruptRecordError(order_id, f"bad timestamp {value!r}") from None
    return ts if ts.tzinfo else ts.replace(tzinfo=UTC)
