"""Tests for status change, update and delete of purchase orders."""

from decimal import Decimal

import pytest

from rms_procurement.application.dto.requests import (
    FullUpdateRequest,
    PurchaseOrderLineRequest,
    StatusActionRequest,
)
from rms_procurement.application.use_cases import (
    ChangePurchaseOrderStatusUseCase,
    DeletePurchaseOrderUseCase,
    UpdatePurchaseOrderUseCase,
)
from rms_procurement.core.entities import PurchaseOrderStatus
from rms_procurement.core.exceptions import (
    InvalidPOStateError,
    InvalidTransitionError,
    PurchaseOrderNotFoundError,
)


@pytest.fixture
def draft_po(sent_purchase_order):
    sent_purchase_order.status = PurchaseOrderStatus.DRAFT
    return sent_purchase_order


@pytest.fixture
def wired_uow(fake_uow, draft_po, inventory_item):
    fake_uow.purchase_orders.get.return_value = draft_po
    fake_uow.purchase_orders.update.side_effect = lambda po: po
    fake_uow.purchase_orders.replace_items.side_effect = lambda po: po
    fake_uow.inventory.get_item.return_value = inventory_item
    fake_uow.goods_receipts.count_for_po.return_value = 0
    return fake_uow


class TestChangePurchaseOrderStatusUseCase:
    async def test_submit(self, uow_factory, wired_uow):
        use_case = ChangePurchaseOrderStatusUseCase(uow_factory=uow_factory)
        result = await use_case.execute(7, StatusActionRequest(action="submit"))
        assert result.previous_status == PurchaseOrderStatus.DRAFT
        assert result.purchase_order.status == PurchaseOrderStatus.PENDING_APPROVAL
        wired_uow.purchase_orders.update.assert_awaited_once()

    async def test_approve_then_send(self, uow_factory, wired_uow, draft_po):
        use_case = ChangePurchaseOrderStatusUseCase(uow_factory=uow_factory)
        draft_po.status = PurchaseOrderStatus.PENDING_APPROVAL

        result = await use_case.approve(7, "EMP-2")
        assert result.purchase_order.approved_by_employee_id == "EMP-2"

        result = await use_case.send(7)
        assert result.purchase_order.status == PurchaseOrderStatus.SENT
        assert result.purchase_order.sent_at is not None

    async def test_invalid_action_for_status(self, uow_factory, wired_uow):
        use_case = ChangePurchaseOrderStatusUseCase(uow_factory=uow_factory)
        with pytest.raises(InvalidTransitionError):
            await use_case.send(7)
        wired_uow.purchase_orders.update.assert_not_called()
        assert wired_uow.rolled_back

    async def test_cancel_partially_received_rejected(self, uow_factory, wired_uow, draft_po):
        draft_po.status = PurchaseOrderStatus.PARTIALLY_RECEIVED
        use_case = ChangePurchaseOrderStatusUseCase(uow_factory=uow_factory)
        with pytest.raises(InvalidTransitionError):
            await use_case.cancel(7)

    async def test_unknown_order(self, uow_factory, wired_uow):
        wired_uow.purchase_orders.get.return_value = None
        use_case = ChangePurchaseOrderStatusUseCase(uow_factory=uow_factory)
        with pytest.raises(PurchaseOrderNotFoundError):
            await use_case.submit(1)


class TestUpdatePurchaseOrderUseCase:
    async def test_replace_lines_recomputes_totals(self, uow_factory, wired_uow):
        use_case = UpdatePurchaseOrderUseCase(uow_factory=uow_factory)
        update = FullUpdateRequest(
            items=[
                PurchaseOrderLineRequest(
                    inventory_item_id=1, quantity=Decimal("4"), unit_price=Decimal("2.5")
                )
            ],
            tax_rate=Decimal("20"),
            notes="call before delivery",
        )

        result = await use_case.execute(7, update)
        po = result.purchase_order
        assert po.subtotal == Decimal("10")
        assert po.tax_amount == Decimal("2")
        assert po.total == Decimal("12")
        assert po.notes == "call before delivery"
        wired_uow.purchase_orders.replace_items.assert_awaited_once()

    async def test_header_only_keeps_lines(self, uow_factory, wired_uow):
        use_case = UpdatePurchaseOrderUseCase(uow_factory=uow_factory)
        result = await use_case.execute(7, FullUpdateRequest(notes="n"))
        assert len(result.purchase_order.items) == 1
        wired_uow.purchase_orders.replace_items.assert_not_called()

    async def test_sent_order_not_editable(self, uow_factory, wired_uow, draft_po):
        draft_po.status = PurchaseOrderStatus.SENT
        use_case = UpdatePurchaseOrderUseCase(uow_factory=uow_factory)
        with pytest.raises(InvalidPOStateError):
            await use_case.execute(7, FullUpdateRequest(notes="late change"))

    async def test_status_action_delegates(self, uow_factory, wired_uow):
        use_case = UpdatePurchaseOrderUseCase(uow_factory=uow_factory)
        result = await use_case.execute(7, StatusActionRequest(action="cancel"))
        assert result.purchase_order.status == PurchaseOrderStatus.CANCELLED


class TestDeletePurchaseOrderUseCase:
    async def test_delete_draft(self, uow_factory, wired_uow):
        await DeletePurchaseOrderUseCase(uow_factory=uow_factory).execute(7)
        wired_uow.purchase_orders.delete.assert_awaited_once_with(7)

    async def test_non_draft_rejected(self, uow_factory, wired_uow, draft_po):
        draft_po.status = PurchaseOrderStatus.APPROVED
        with pytest.raises(InvalidPOStateError):
            await DeletePurchaseOrderUseCase(uow_factory=uow_factory).execute(7)
        wired_uow.purchase_orders.delete.assert_not_called()

    async def test_draft_with_receipts_rejected(self, uow_factory, wired_uow):
        wired_uow.goods_receipts.count_for_po.return_value = 1
        with pytest.raises(InvalidPOStateError):
            await DeletePurchaseOrderUseCase(uow_factory=uow_factory).execute(7)
