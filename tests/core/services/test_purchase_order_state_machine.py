"""Tests for PurchaseOrderStateMachine."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from rms_procurement.core.entities import PurchaseOrder, PurchaseOrderItem, PurchaseOrderStatus
from rms_procurement.core.exceptions import InvalidPOStateError, InvalidTransitionError
from rms_procurement.core.services import (
    ALLOWED_TRANSITIONS,
    RECEIVABLE_STATUSES,
    PurchaseOrderStateMachine,
)

S = PurchaseOrderStatus


def _po(status: S, lines: list[tuple[str, str]] | None = None) -> PurchaseOrder:
    items = [
        PurchaseOrderItem(
            id=i,
            inventory_item_id=1,
            quantity=Decimal(qty),
            unit_price=Decimal("1"),
            received_qty=Decimal(received),
        )
        for i, (qty, received) in enumerate(lines or [("10", "0")], start=1)
    ]
    return PurchaseOrder(id=1, supplier_id="SUP-1", outlet_id="OUT-1", status=status, items=items)


@pytest.fixture
def machine() -> PurchaseOrderStateMachine:
    return PurchaseOrderStateMachine()


class TestTransitionTable:
    def test_every_status_has_an_entry(self):
        assert set(ALLOWED_TRANSITIONS) == set(PurchaseOrderStatus)

    def test_terminal_statuses(self):
        assert ALLOWED_TRANSITIONS[S.RECEIVED] == frozenset()
        assert ALLOWED_TRANSITIONS[S.CANCELLED] == frozenset()

    def test_partially_received_cannot_be_cancelled(self):
        assert not PurchaseOrderStateMachine.can_transition(S.PARTIALLY_RECEIVED, S.CANCELLED)

    def test_receivable_statuses(self):
        assert RECEIVABLE_STATUSES == {S.SENT, S.PARTIALLY_RECEIVED}


class TestTransition:
    def test_draft_to_received_rejected(self, machine):
        po = _po(S.DRAFT)
        with pytest.raises(InvalidTransitionError) as exc:
            machine.transition(po, S.RECEIVED)
        assert exc.value.details["from"] == "DRAFT"
        assert exc.value.details["to"] == "RECEIVED"
        assert po.status == S.DRAFT

    def test_sent_to_partially_received(self, machine):
        po = machine.transition(_po(S.SENT), S.PARTIALLY_RECEIVED)
        assert po.status == S.PARTIALLY_RECEIVED

    def test_approve_records_approver(self, machine):
        now = datetime(2026, 10, 19, 9, 0, tzinfo=UTC)
        po = machine.transition(_po(S.PENDING_APPROVAL), S.APPROVED, "EMP-9", now=now)
        assert po.approved_by_employee_id == "EMP-9"
        assert po.approved_at == now
        assert po.updated_at == now

    def test_anonymous_approval_leaves_approver_unset(self, machine):
        po = machine.transition(_po(S.PENDING_APPROVAL), S.APPROVED)
        assert po.approved_at is not None
        assert po.approved_by_employee_id is None

    def test_send_sets_sent_at(self, machine):
        po = machine.transition(_po(S.APPROVED), S.SENT)
        assert po.sent_at is not None

    def test_received_sets_received_date(self, machine):
        po = machine.transition(_po(S.SENT), S.RECEIVED)
        assert po.received_date is not None

    def test_full_lifecycle(self, machine):
        po = _po(S.DRAFT)
        for target in (S.PENDING_APPROVAL, S.DRAFT, S.PENDING_APPROVAL, S.APPROVED, S.SENT):
            machine.transition(po, target)
        assert po.status == S.SENT

    def test_cancelled_is_terminal(self, machine):
        po = machine.transition(_po(S.DRAFT), S.CANCELLED)
        with pytest.raises(InvalidTransitionError):
            machine.transition(po, S.DRAFT)


class TestDeriveStatusAfterReceipt:
    def test_all_lines_complete(self):
        po = _po(S.SENT, [("10", "10"), ("5", "5")])
        assert PurchaseOrderStateMachine.derive_status_after_receipt(po) == S.RECEIVED

    def test_some_received(self):
        po = _po(S.SENT, [("10", "10"), ("5", "0")])
        assert PurchaseOrderStateMachine.derive_status_after_receipt(po) == S.PARTIALLY_RECEIVED

    def test_nothing_received_keeps_status(self):
        po = _po(S.SENT, [("10", "0")])
        assert PurchaseOrderStateMachine.derive_status_after_receipt(po) == S.SENT

    def test_outside_receivable_statuses(self):
        with pytest.raises(InvalidPOStateError):
            PurchaseOrderStateMachine.derive_status_after_receipt(_po(S.APPROVED))


class TestEnsureStatus:
    def test_allowed(self):
        PurchaseOrderStateMachine.ensure_status(_po(S.SENT), RECEIVABLE_STATUSES, "receive")

    def test_rejected(self):
        with pytest.raises(InvalidPOStateError) as exc:
            PurchaseOrderStateMachine.ensure_status(_po(S.DRAFT), RECEIVABLE_STATUSES, "receive")
        assert exc.value.details["allowed"] == ["PARTIALLY_RECEIVED", "SENT"]
