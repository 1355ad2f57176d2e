"""End-to-end goods receipt tests on a real SQLite database."""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from rms_procurement.application.use_cases import (
    GetPurchaseOrderUseCase,
    VerifyLedgerUseCase,
)
from rms_procurement.core.entities import MovementType, PurchaseOrderStatus
from rms_procurement.core.exceptions import (
    InvalidPOStateError,
    InvalidTransitionError,
    OverReceiptError,
)
from rms_procurement.core.services import (
    GoodsReceiptProcessor,
    PurchaseOrderStateMachine,
    ReceiptLine,
)
from rms_procurement.infrastructure.storage.sqlite import (
    SQLiteGoodsReceiptStore,
    SQLiteInventoryStore,
    SQLitePurchaseOrderStore,
    SQLiteStockBatchStore,
    get_unit_of_work,
)


@pytest.fixture
def processor(initialized_db):
    return GoodsReceiptProcessor(get_unit_of_work, timeout_seconds=10)


def _line(po, index: int, qty: str, **kwargs) -> ReceiptLine:
    return ReceiptLine(
        purchase_order_item_id=po.items[index].id,
        quantity_received=Decimal(qty),
        **kwargs,
    )


class TestReceiveFullOrder:
    async def test_single_receipt_completes_order(self, processor, make_item, make_purchase_order):
        item = await make_item()
        po = await make_purchase_order([(item, "50", "10")])

        result = await processor.receive_goods(po.id, "EMP-1", [_line(po, 0, "50")])

        assert result.purchase_order.status == PurchaseOrderStatus.RECEIVED
        assert result.receipt.grn_number.startswith("GRN-")
        assert result.receipt.grn_number.endswith("-0001")

        stored_item = await SQLiteInventoryStore().get_item(item.id)
        assert stored_item.current_stock == Decimal("50")
        assert stored_item.average_cost == Decimal("10")
        assert stored_item.last_cost == Decimal("10")

        movements = await SQLiteInventoryStore().get_all_movements(item.id)
        assert len(movements) == 1
        assert movements[0].movement_type == MovementType.PURCHASE
        assert movements[0].total_cost == Decimal("500")
        assert movements[0].reference_type == "PO"
        assert movements[0].reference_id == str(po.id)

        stored_po = await SQLitePurchaseOrderStore().get(po.id)
        assert stored_po.status == PurchaseOrderStatus.RECEIVED
        assert stored_po.received_date is not None
        assert stored_po.items[0].received_qty == Decimal("50")

    async def test_two_partial_receipts(self, processor, make_item, make_purchase_order):
        item = await make_item()
        po = await make_purchase_order([(item, "50", "10")])

        first = await processor.receive_goods(po.id, "EMP-1", [_line(po, 0, "20")])
        assert first.purchase_order.status == PurchaseOrderStatus.PARTIALLY_RECEIVED

        second = await processor.receive_goods(po.id, "EMP-2", [_line(po, 0, "30")])
        assert second.purchase_order.status == PurchaseOrderStatus.RECEIVED
        assert first.receipt.grn_number != second.receipt.grn_number
        assert second.receipt.grn_number.endswith("-0002")

        assert await SQLiteGoodsReceiptStore().count_for_po(po.id) == 2
        stored_item = await SQLiteInventoryStore().get_item(item.id)
        assert stored_item.current_stock == Decimal("50")

    async def test_wac_across_orders(self, processor, make_item, make_purchase_order):
        item = await make_item()
        first = await make_purchase_order([(item, "10", "100")])
        second = await make_purchase_order([(item, "10", "120")], po_number="PO-2026-0002")

        await processor.receive_goods(first.id, "EMP-1", [_line(first, 0, "10")])
        await processor.receive_goods(second.id, "EMP-1", [_line(second, 0, "10")])

        stored_item = await SQLiteInventoryStore().get_item(item.id)
        assert stored_item.current_stock == Decimal("20")
        assert stored_item.average_cost == Decimal("110")

    async def test_batch_recorded(self, processor, make_item, make_purchase_order):
        item = await make_item(track_batch=True)
        po = await make_purchase_order([(item, "5", "3")])

        await processor.receive_goods(
            po.id,
            "EMP-1",
            [_line(po, 0, "5", batch_number="LOT-9", expiry_date=date(2026, 11, 30))],
        )

        batches = await SQLiteStockBatchStore().list_batches(item.id)
        assert len(batches) == 1
        assert batches[0].batch_number == "LOT-9"
        assert batches[0].unit_cost == Decimal("3")


class TestAtomicity:
    async def test_over_receipt_on_second_line_writes_nothing(
        self, processor, make_item, make_purchase_order
    ):
        flour = await make_item(sku="FLOUR")
        sugar = await make_item(sku="SUGAR")
        po = await make_purchase_order([(flour, "10", "1"), (sugar, "5", "2")])

        with pytest.raises(OverReceiptError):
            await processor.receive_goods(
                po.id, "EMP-1", [_line(po, 0, "10"), _line(po, 1, "6")]
            )

        store = SQLiteInventoryStore()
        assert (await store.get_item(flour.id)).current_stock == Decimal("0")
        assert await store.get_all_movements(flour.id) == []
        assert await SQLiteGoodsReceiptStore().count_for_po(po.id) == 0
        stored_po = await SQLitePurchaseOrderStore().get(po.id)
        assert stored_po.status == PurchaseOrderStatus.SENT
        assert all(line.received_qty == Decimal("0") for line in stored_po.items)

    async def test_failed_receipt_does_not_consume_grn_number(
        self, processor, make_item, make_purchase_order
    ):
        item = await make_item()
        po = await make_purchase_order([(item, "10", "1")])

        with pytest.raises(OverReceiptError):
            await processor.receive_goods(po.id, "EMP-1", [_line(po, 0, "11")])
        result = await processor.receive_goods(po.id, "EMP-1", [_line(po, 0, "10")])

        assert result.receipt.grn_number.endswith("-0001")

    async def test_received_order_rejects_more(self, processor, make_item, make_purchase_order):
        po = await make_purchase_order([(await make_item(), "1", "1")])
        await processor.receive_goods(po.id, "EMP-1", [_line(po, 0, "1")])

        with pytest.raises(InvalidPOStateError):
            await processor.receive_goods(po.id, "EMP-1", [_line(po, 0, "1")])

    async def test_concurrent_receipts_never_exceed_order(
        self, processor, make_item, make_purchase_order
    ):
        item = await make_item()
        po = await make_purchase_order([(item, "10", "1")])

        results = await asyncio.gather(
            processor.receive_goods(po.id, "EMP-1", [_line(po, 0, "6")]),
            processor.receive_goods(po.id, "EMP-2", [_line(po, 0, "6")]),
            return_exceptions=True,
        )

        succeeded = [r for r in results if not isinstance(r, BaseException)]
        assert len(succeeded) == 1
        assert isinstance(next(r for r in results if isinstance(r, BaseException)), OverReceiptError)
        stored_item = await SQLiteInventoryStore().get_item(item.id)
        assert stored_item.current_stock == Decimal("6")


class TestLedgerConsistency:
    async def test_stock_equals_sum_of_movements(self, processor, make_item, make_purchase_order):
        item = await make_item()
        po = await make_purchase_order([(item, "30", "7.5")])
        for qty in ("10", "5", "15"):
            await processor.receive_goods(po.id, "EMP-1", [_line(po, 0, qty)])

        movements = await SQLiteInventoryStore().get_all_movements(item.id)
        stored_item = await SQLiteInventoryStore().get_item(item.id)
        assert sum(m.quantity for m in movements) == stored_item.current_stock

        verification = await VerifyLedgerUseCase().execute(item.id)
        assert verification.consistent


class TestReadsAndWorkflow:
    async def test_get_purchase_order_is_idempotent(self, processor, make_item, make_purchase_order):
        po = await make_purchase_order([(await make_item(), "5", "1")])
        await processor.receive_goods(po.id, "EMP-1", [_line(po, 0, "2")])

        use_case = GetPurchaseOrderUseCase()
        first = use_case.to_response(await use_case.execute(po.id))
        second = use_case.to_response(await use_case.execute(po.id))
        assert first == second
        assert len(first.receipts) == 1

    async def test_draft_cannot_jump_to_received(self, make_item, make_purchase_order):
        po = await make_purchase_order([(await make_item(), "1", "1")], status=PurchaseOrderStatus.DRAFT)
        with pytest.raises(InvalidTransitionError):
            PurchaseOrderStateMachine().transition(po, PurchaseOrderStatus.RECEIVED)
