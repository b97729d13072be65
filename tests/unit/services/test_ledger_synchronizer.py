"""Tests for DualLedgerSynchronizer."""

from unittest.mock import AsyncMock, call

import pytest

from orderdesk.core.entities import LedgerRole, MirrorWrite, OrderStatus
from orderdesk.core.exceptions import (
    LedgerWriteError,
    OrderNotFoundError,
    PartialPropagationFailure,
    ValidationError,
)
from orderdesk.core.services import DualLedgerSynchronizer


@pytest.fixture
def mock_record_store():
    return AsyncMock()


@pytest.fixture
def mock_outbox():
    outbox = AsyncMock()

    async def enqueue(entry):
        entry.id = 7
        return entry

    outbox.enqueue.side_effect = enqueue
    return outbox


@pytest.fixture
def synchronizer(mock_record_store, mock_outbox):
    return DualLedgerSynchronizer(record_store=mock_record_store, outbox=mock_outbox, max_attempts=5)


class TestPropagate:
    async def test_writes_primary_then_mirror(self, synchronizer, mock_record_store, mock_outbox, order_factory):
        order = order_factory(OrderStatus.PACKED)

        result = await synchronizer.propagate(order, LedgerRole.SELLER)

        assert mock_record_store.put.await_args_list == [
            call("seller-001", order),
            call("buyer-001", order),
        ]
        assert result.mirror_written is True
        assert result.warnings == []
        mock_outbox.resolve_for_order.assert_awaited_once_with(order.id, "buyer-001")

    async def test_buyer_action_writes_buyer_first(self, synchronizer, mock_record_store, order_factory):
        order = order_factory(OrderStatus.ACCEPTED)

        result = await synchronizer.propagate(order, LedgerRole.BUYER)

        assert mock_record_store.put.await_args_list[0] == call("buyer-001", order)
        assert result.primary_namespace == "buyer-001"
        assert result.mirror_namespace == "seller-001"

    async def test_mirror_failure_returns_warning(self, synchronizer, mock_record_store, mock_outbox, order_factory):
        order = order_factory(OrderStatus.PACKED)
        mock_record_store.put.side_effect = [None, RuntimeError("buyer ledger offline")]

        result = await synchronizer.propagate(order, LedgerRole.SELLER)

        assert result.mirror_written is False
        assert isinstance(result.warning, PartialPropagationFailure)
        assert result.warning.details["namespace"] == "buyer-001"
        assert result.warning.details["attempted"] == "PACKED"
        assert result.warning.details["outbox_id"] == 7
        assert result.warning.details["retryable"] is True

        entry = mock_outbox.enqueue.await_args.args[0]
        assert isinstance(entry, MirrorWrite)
        assert entry.source_namespace == "seller-001"
        assert entry.target_namespace == "buyer-001"
        assert entry.error == "buyer ledger offline"
        mock_outbox.resolve_for_order.assert_not_awaited()

    async def test_mirror_failure_with_outbox_down(self, synchronizer, mock_record_store, mock_outbox, order_factory):
        mock_record_store.put.side_effect = [None, RuntimeError("offline")]
        mock_outbox.enqueue.side_effect = RuntimeError("outbox offline")

        result = await synchronizer.propagate(order_factory(OrderStatus.PACKED), LedgerRole.SELLER)

        assert result.mirror_written is False
        assert result.warning.details["outbox_id"] is None

    async def test_primary_failure_raises(self, synchronizer, mock_record_store, mock_outbox, order_factory):
        mock_record_store.put.side_effect = RuntimeError("disk full")

        with pytest.raises(LedgerWriteError) as exc_info:
            await synchronizer.propagate(order_factory(OrderStatus.PACKED), LedgerRole.SELLER)

        assert exc_info.value.details["namespace"] == "seller-001"
        assert mock_record_store.put.await_count == 1
        mock_outbox.enqueue.assert_not_awaited()

    async def test_missing_counterparty_writes_nothing(self, synchronizer, mock_record_store, order_factory, buyer):
        buyer.business_id = ""
        order = order_factory(OrderStatus.ASSIGNED, buyer=buyer)

        with pytest.raises(ValidationError):
            await synchronizer.propagate(order, LedgerRole.SELLER)

        mock_record_store.put.assert_not_awaited()

    async def test_attempted_status_overrides(self, synchronizer, mock_record_store, order_factory):
        mock_record_store.put.side_effect = [None, RuntimeError("offline")]

        result = await synchronizer.propagate(
            order_factory(OrderStatus.QUOTED), LedgerRole.SELLER, attempted=OrderStatus.DIRECT
        )

        assert result.warning.details["attempted"] == "DIRECT"


class TestReadRepair:
    async def test_overwrites_target(self, synchronizer, mock_record_store, order_factory):
        order = order_factory(OrderStatus.SHIPPED)
        mock_record_store.get.return_value = order

        repaired = await synchronizer.read_repair(order.id, "seller-001", "buyer-001")

        assert repaired is order
        mock_record_store.get.assert_awaited_once_with("seller-001", order.id)
        mock_record_store.put.assert_awaited_once_with("buyer-001", order)

    async def test_missing_source(self, synchronizer, mock_record_store):
        mock_record_store.get.return_value = None

        with pytest.raises(OrderNotFoundError):
            await synchronizer.read_repair("o1", "seller-001", "buyer-001")

        mock_record_store.put.assert_not_awaited()

    async def test_target_must_be_a_party(self, synchronizer, mock_record_store, order_factory):
        mock_record_store.get.return_value = order_factory(OrderStatus.SHIPPED)

        with pytest.raises(ValidationError):
            await synchronizer.read_repair("o1", "seller-001", "someone-else")


class TestReconcilePending:
    async def test_repairs_and_resolves(self, synchronizer, mock_record_store, mock_outbox, order_factory):
        order = order_factory(OrderStatus.PACKED)
        mock_outbox.list_pending.return_value = [
            MirrorWrite(id=3, order_id=order.id, source_namespace="seller-001", target_namespace="buyer-001")
        ]
        mock_record_store.get.return_value = order

        report = await synchronizer.reconcile_pending(limit=50)

        mock_outbox.list_pending.assert_awaited_once_with(limit=50, max_attempts=5)
        mock_record_store.put.assert_awaited_once_with("buyer-001", order)
        mock_outbox.mark_resolved.assert_awaited_once_with(3)
        assert (report.processed, report.repaired, report.failed) == (1, 1, 0)

    async def test_failure_marks_entry(self, synchronizer, mock_record_store, mock_outbox):
        mock_outbox.list_pending.return_value = [
            MirrorWrite(id=4, order_id="gone", source_namespace="seller-001", target_namespace="buyer-001"),
        ]
        mock_record_store.get.return_value = None

        report = await synchronizer.reconcile_pending()

        assert report.failed == 1
        assert report.errors[0]["outbox_id"] == 4
        mock_outbox.mark_failed.assert_awaited_once()
        assert mock_outbox.mark_failed.await_args.args[0] == 4
        mock_outbox.mark_resolved.assert_not_awaited()

    async def test_empty_outbox(self, synchronizer, mock_outbox):
        mock_outbox.list_pending.return_value = []
        report = await synchronizer.reconcile_pending()
        assert report.processed == 0
