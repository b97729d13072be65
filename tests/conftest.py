"""Pytest configuration and fixtures."""

from collections.abc import Callable, Generator
from datetime import UTC, datetime

import pytest

from orderdesk.config import reset_settings
from orderdesk.core.entities import (
    Actor,
    LedgerRole,
    Order,
    OrderLine,
    OrderStatus,
    Party,
    PricingMode,
    StatusHistoryEntry,
)
from orderdesk.core.services import OrderStatusMachine, ProformaCalculator

BUYER_ID = "buyer-001"
SELLER_ID = "seller-001"
ORDER_ID = "ord-20240601-abc123"


@pytest.fixture(autouse=True)
def fresh_settings() -> Generator[None, None, None]:
    """Every test starts from environment defaults."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def buyer() -> Party:
    return Party(
        business_id=BUYER_ID,
        business_name="Sharma Traders",
        city="Pune",
        state="Maharashtra",
        pincode="411001",
    )


@pytest.fixture
def seller() -> Party:
    return Party(
        business_id=SELLER_ID,
        business_name="Deccan Distributors",
        city="Mumbai",
        state="Maharashtra",
        pincode="400001",
    )


@pytest.fixture
def mrp_line() -> OrderLine:
    """Two units at MRP 118 including 18% GST."""
    return OrderLine(
        name="Basmati Rice 5kg",
        sku="RICE-5KG",
        quantity=2,
        pricing_mode=PricingMode.MRP_INCLUSIVE,
        mrp=118,
        final_price=118,
        gst_rate=18,
    )


@pytest.fixture
def buyer_actor() -> Actor:
    return Actor(party_id=BUYER_ID, name="Asha", role=LedgerRole.BUYER)


@pytest.fixture
def seller_actor() -> Actor:
    return Actor(party_id=SELLER_ID, name="Ravi", role=LedgerRole.SELLER)


@pytest.fixture
def machine() -> OrderStatusMachine:
    return OrderStatusMachine()


@pytest.fixture
def calculator() -> ProformaCalculator:
    return ProformaCalculator()


@pytest.fixture
def order_factory(buyer, seller, mrp_line) -> Callable[..., Order]:
    """Build an order sitting at ``status`` with a single history entry."""

    def _make(status: OrderStatus = OrderStatus.REQUESTED, **overrides) -> Order:
        at = datetime(2024, 6, 1, 10, 0, tzinfo=UTC)
        data = {
            "id": ORDER_ID,
            "buyer": buyer,
            "seller": seller,
            "lines": [mrp_line],
            "status": status,
            "status_timestamps": {status.timestamp_key: at},
            "status_history": [
                StatusHistoryEntry(status=status, updated_at=at, updated_by=SELLER_ID)
            ],
            "created_at": at,
            "updated_at": at,
        }
        data.update(overrides)
        return Order(**data)

    return _make


@pytest.fixture
def delivered_order(order_factory, calculator) -> Order:
    order = order_factory(OrderStatus.DELIVERED)
    order.breakdown = calculator.calculate_for_order(order)
    return order
