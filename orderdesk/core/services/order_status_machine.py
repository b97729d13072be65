"""
Order status machine.

Encodes the legal lifecycle transitions and which party may perform each.
``apply`` is pure: it returns a new Order carrying the appended history entry
and never touches the input, so a rejected transition has no side effects.
"""

from datetime import datetime, timedelta
from typing import Any
from uuid import uuid4

from orderdesk.config import get_logger
from orderdesk.core.entities.base import utcnow
from orderdesk.core.entities.order import (
    Actor,
    LedgerRole,
    Order,
    OrderOrigin,
    OrderStatus,
    Party,
    PaymentInfo,
    StatusHistoryEntry,
)
from orderdesk.core.entities.pricing import OrderLine
from orderdesk.core.exceptions import InvalidTransitionError, ValidationError

logger = get_logger(__name__)

S = OrderStatus

VALID_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    S.REQUESTED: frozenset({S.QUOTED, S.DIRECT}),
    S.QUOTED: frozenset({S.ACCEPTED, S.REJECTED}),
    S.ACCEPTED: frozenset({S.ASSIGNED}),
    S.DIRECT: frozenset({S.ASSIGNED}),
    S.ASSIGNED: frozenset({S.PACKED}),
    S.PACKED: frozenset({S.SHIPPED}),
    S.SHIPPED: frozenset({S.OUT_FOR_DELIVERY}),
    S.OUT_FOR_DELIVERY: frozenset({S.DELIVERED}),
    S.DELIVERED: frozenset({S.INVOICED}),
    S.REJECTED: frozenset(),
    S.INVOICED: frozenset(),
}

TERMINAL_STATES: frozenset[OrderStatus] = frozenset({S.REJECTED, S.INVOICED})

# Quote decisions belong to the buyer; everything else is the seller's move
BUYER_DECISIONS: frozenset[OrderStatus] = frozenset({S.ACCEPTED, S.REJECTED})

INITIAL_STATUS: dict[OrderOrigin, OrderStatus] = {
    OrderOrigin.BUYER_REQUEST: S.REQUESTED,
    OrderOrigin.SELLER_ASSIGNMENT: S.ASSIGNED,
}

_TICK = timedelta(microseconds=1)


def initial_status(origin: OrderOrigin) -> OrderStatus:
    return INITIAL_STATUS[origin]


def initiating_role(origin: OrderOrigin) -> LedgerRole:
    return LedgerRole.BUYER if origin is OrderOrigin.BUYER_REQUEST else LedgerRole.SELLER


def allowed_next(status: OrderStatus) -> frozenset[OrderStatus]:
    return VALID_TRANSITIONS[status]


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in VALID_TRANSITIONS[current]


def required_role(target: OrderStatus) -> LedgerRole:
    return LedgerRole.BUYER if target in BUYER_DECISIONS else LedgerRole.SELLER


def parse_status(raw: Any) -> OrderStatus:
    """Parse a requested status, rejecting unknown codes as input errors."""
    try:
        return OrderStatus.parse(raw)
    except ValueError:
        raise ValidationError("status", f"unknown status '{raw}'", raw) from None


class OrderStatusMachine:
    """Finite state machine over OrderStatus with attributed history."""

    def new_order(
        self,
        origin: OrderOrigin,
        buyer: Party,
        seller: Party,
        lines: list[OrderLine],
        actor: Actor,
        payment: PaymentInfo | None = None,
        notes: str | None = None,
        order_id: str | None = None,
        at: datetime | None = None,
    ) -> Order:
        """Create an order in its origin-dependent initial status."""
        if actor.role is not initiating_role(origin):
            raise ValidationError(
                "actor",
                f"{origin.value} orders are created by the {initiating_role(origin).value.lower()}",
                actor.role.value,
            )

        at = at or utcnow()
        status = initial_status(origin)
        entry = StatusHistoryEntry(
            status=status,
            updated_at=at,
            updated_by=actor.party_id,
            updated_by_name=actor.name,
            notes=notes,
        )
        return Order(
            id=order_id or uuid4().hex,
            origin=origin,
            buyer=buyer,
            seller=seller,
            lines=lines,
            status=status,
            status_timestamps={status.timestamp_key: at},
            status_history=[entry],
            payment=payment or PaymentInfo(),
            notes=notes,
            created_at=at,
            updated_at=at,
        )

    def apply(
        self,
        order: Order,
        target: OrderStatus | str,
        actor: Actor,
        notes: str | None = None,
        at: datetime | None = None,
    ) -> Order:
        """
        Apply one transition and return the updated copy.

        Raises:
            InvalidTransitionError: target not reachable from the current
                status, or the actor's role may not perform it.
        """
        target = parse_status(target)
        current = order.status

        if not can_transition(current, target):
            reason = "status is terminal" if current in TERMINAL_STATES else None
            raise InvalidTransitionError(current.value, target.value, order_id=order.id, reason=reason)

        role = required_role(target)
        if actor.role is not role:
            raise InvalidTransitionError(
                current.value,
                target.value,
                order_id=order.id,
                reason=f"only the {role.value.lower()} can do this",
            )

        expected_party = order.namespace_for(actor.role)
        if expected_party and actor.party_id != expected_party:
            raise ValidationError("actor", "actor is not a party to this order", actor.party_id)

        at = self._next_timestamp(order, at or utcnow())
        entry = StatusHistoryEntry(
            status=target,
            updated_at=at,
            updated_by=actor.party_id,
            updated_by_name=actor.name,
            notes=notes,
        )

        updated = order.model_copy(deep=True)
        updated.status = target
        updated.status_history.append(entry)
        updated.status_timestamps[target.timestamp_key] = at
        updated.updated_at = at

        logger.info(
            "order_status_changed",
            order_id=order.id,
            previous=current.value,
            status=target.value,
            actor=actor.party_id,
            role=actor.role.value,
        )
        return updated

    @staticmethod
    def _next_timestamp(order: Order, at: datetime) -> datetime:
        """Keep history strictly increasing even if the clock steps back."""
        if order.status_history:
            last = order.status_history[-1].updated_at
            if at <= last:
                return last + _TICK
        return at
