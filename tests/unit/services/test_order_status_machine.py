"""Tests for OrderStatusMachine."""

from datetime import UTC, datetime, timedelta

import pytest

from orderdesk.core.entities import Actor, LedgerRole, OrderOrigin, OrderStatus
from orderdesk.core.exceptions import InvalidTransitionError, ValidationError
from orderdesk.core.services import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    allowed_next,
    can_transition,
    initial_status,
)

S = OrderStatus


class TestTransitionTable:
    def test_every_status_has_an_entry(self):
        assert set(VALID_TRANSITIONS) == set(OrderStatus)

    def test_terminal_states_have_no_exits(self):
        assert TERMINAL_STATES == {S.REJECTED, S.INVOICED}
        for status in TERMINAL_STATES:
            assert allowed_next(status) == frozenset()

    def test_requested_branches(self):
        assert allowed_next(S.REQUESTED) == {S.QUOTED, S.DIRECT}
        assert allowed_next(S.QUOTED) == {S.ACCEPTED, S.REJECTED}

    def test_no_skipping_ahead(self):
        assert not can_transition(S.QUOTED, S.SHIPPED)
        assert not can_transition(S.ASSIGNED, S.SHIPPED)

    def test_initial_status(self):
        assert initial_status(OrderOrigin.BUYER_REQUEST) is S.REQUESTED
        assert initial_status(OrderOrigin.SELLER_ASSIGNMENT) is S.ASSIGNED


class TestNewOrder:
    def test_buyer_request(self, machine, buyer, seller, mrp_line, buyer_actor):
        at = datetime(2024, 6, 1, 9, 0, tzinfo=UTC)
        order = machine.new_order(
            OrderOrigin.BUYER_REQUEST, buyer, seller, [mrp_line], buyer_actor, at=at
        )

        assert order.status is S.REQUESTED
        assert order.status_timestamps == {"requestedAt": at}
        assert len(order.status_history) == 1
        assert order.status_history[0].updated_by == buyer_actor.party_id
        assert order.id

    def test_seller_assignment(self, machine, buyer, seller, mrp_line, seller_actor):
        order = machine.new_order(
            OrderOrigin.SELLER_ASSIGNMENT, buyer, seller, [mrp_line], seller_actor
        )
        assert order.status is S.ASSIGNED
        assert "assignedAt" in order.status_timestamps

    def test_wrong_initiator_rejected(self, machine, buyer, seller, mrp_line, buyer_actor):
        with pytest.raises(ValidationError):
            machine.new_order(OrderOrigin.SELLER_ASSIGNMENT, buyer, seller, [mrp_line], buyer_actor)


class TestApply:
    def test_full_lifecycle(self, machine, order_factory, buyer_actor, seller_actor):
        order = order_factory(S.REQUESTED)
        steps = [
            (S.QUOTED, seller_actor),
            (S.ACCEPTED, buyer_actor),
            (S.ASSIGNED, seller_actor),
            (S.PACKED, seller_actor),
            (S.SHIPPED, seller_actor),
            (S.OUT_FOR_DELIVERY, seller_actor),
            (S.DELIVERED, seller_actor),
            (S.INVOICED, seller_actor),
        ]
        for target, actor in steps:
            order = machine.apply(order, target, actor)
            assert order.status is target

        assert [e.status for e in order.status_history] == [S.REQUESTED] + [t for t, _ in steps]
        assert set(order.status_timestamps) == {e.status.timestamp_key for e in order.status_history}

    def test_direct_path(self, machine, order_factory, seller_actor):
        order = machine.apply(order_factory(S.REQUESTED), S.DIRECT, seller_actor)
        order = machine.apply(order, S.ASSIGNED, seller_actor)
        assert order.status is S.ASSIGNED

    def test_invalid_transition_leaves_order_untouched(self, machine, order_factory, seller_actor):
        order = order_factory(S.QUOTED)
        before = order.model_dump()

        with pytest.raises(InvalidTransitionError) as exc_info:
            machine.apply(order, S.SHIPPED, seller_actor)

        assert exc_info.value.current == "QUOTED"
        assert exc_info.value.attempted == "SHIPPED"
        assert order.model_dump() == before

    def test_terminal_status_reason(self, machine, order_factory, buyer_actor):
        with pytest.raises(InvalidTransitionError, match="terminal"):
            machine.apply(order_factory(S.REJECTED), S.ACCEPTED, buyer_actor)

    def test_seller_cannot_accept_quote(self, machine, order_factory, seller_actor):
        with pytest.raises(InvalidTransitionError, match="only the buyer"):
            machine.apply(order_factory(S.QUOTED), S.ACCEPTED, seller_actor)

    def test_buyer_cannot_pack(self, machine, order_factory, buyer_actor):
        with pytest.raises(InvalidTransitionError, match="only the seller"):
            machine.apply(order_factory(S.ASSIGNED), S.PACKED, buyer_actor)

    def test_actor_must_be_party_to_order(self, machine, order_factory):
        stranger = Actor(party_id="seller-999", role=LedgerRole.SELLER)
        with pytest.raises(ValidationError):
            machine.apply(order_factory(S.ASSIGNED), S.PACKED, stranger)

    def test_accepts_display_label(self, machine, order_factory, seller_actor):
        order = machine.apply(order_factory(S.SHIPPED), "Out for Delivery", seller_actor)
        assert order.status is S.OUT_FOR_DELIVERY
        assert "outForDeliveryAt" in order.status_timestamps

    def test_unknown_status_is_validation_error(self, machine, order_factory, seller_actor):
        with pytest.raises(ValidationError):
            machine.apply(order_factory(S.ASSIGNED), "TELEPORTED", seller_actor)

    def test_input_not_mutated_on_success(self, machine, order_factory, seller_actor):
        order = order_factory(S.ASSIGNED)
        updated = machine.apply(order, S.PACKED, seller_actor, notes="boxed")

        assert order.status is S.ASSIGNED
        assert len(order.status_history) == 1
        assert updated.status_history[-1].notes == "boxed"
        assert updated.status_history[-1].updated_by_name == seller_actor.name

    def test_history_strictly_increasing_when_clock_repeats(self, machine, order_factory, seller_actor):
        order = order_factory(S.ASSIGNED)
        stamp = order.status_history[-1].updated_at

        packed = machine.apply(order, S.PACKED, seller_actor, at=stamp)
        shipped = machine.apply(packed, S.SHIPPED, seller_actor, at=stamp - timedelta(seconds=5))

        times = [e.updated_at for e in shipped.status_history]
        assert times == sorted(times)
        assert len(set(times)) == len(times)
        assert shipped.updated_at == times[-1]
