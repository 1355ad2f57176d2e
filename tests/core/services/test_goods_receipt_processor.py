"""Tests for GoodsReceiptProcessor with an in-memory unit of work."""

import asyncio
from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from rms_procurement.core.entities import (
    PurchaseOrderItem,
    PurchaseOrderStatus,
)
from rms_procurement.core.exceptions import (
    InvalidPOStateError,
    InvalidQuantityError,
    LineNotFoundError,
    MissingFieldsError,
    OverReceiptError,
    PurchaseOrderNotFoundError,
    TransactionFailedError,
)
from rms_procurement.core.services import (
    GoodsReceiptProcessor,
    ReceiptLine,
    format_grn_number,
)


@pytest.fixture
def wired_uow(fake_uow, sent_purchase_order, inventory_item):
    """Fake unit of work whose stores behave like the SQLite ones for one order."""
    uow = fake_uow
    uow.purchase_orders.get.return_value = sent_purchase_order
    uow.purchase_orders.update.side_effect = lambda po: po
    uow.sequences.next_value.return_value = 1
    uow.goods_receipts.create.side_effect = lambda receipt: receipt.model_copy(update={"id": 100})
    uow.inventory.get_item.return_value = inventory_item
    uow.inventory.update_item.side_effect = lambda item: item
    uow.inventory.add_movement.side_effect = lambda m: m.model_copy(update={"id": 200})
    uow.batches.add_batch.side_effect = lambda b: b.model_copy(update={"id": 300})

    def increment(line_id, quantity):
        line = sent_purchase_order.get_item(line_id)
        return line.received_qty + quantity

    uow.purchase_orders.increment_received_qty.side_effect = increment
    return uow


@pytest.fixture
def processor(uow_factory, wired_uow):
    return GoodsReceiptProcessor(uow_factory, timeout_seconds=5)


class TestFormatGrnNumber:
    def test_format(self):
        assert format_grn_number(datetime(2026, 3, 5, tzinfo=UTC), 7) == "GRN-202603-0007"

    def test_wide_sequence(self):
        assert format_grn_number(datetime(2026, 3, 5, tzinfo=UTC), 12345) == "GRN-202603-12345"


class TestReceiveGoods:
    async def test_full_receipt(self, processor, wired_uow, inventory_item):
        result = await processor.receive_goods(
            7, "EMP-1", [ReceiptLine(purchase_order_item_id=11, quantity_received=Decimal("50"))]
        )

        assert result.receipt.id == 100
        assert result.receipt.grn_number.startswith("GRN-")
        assert result.receipt.grn_number.endswith("-0001")
        assert result.purchase_order.status == PurchaseOrderStatus.RECEIVED
        assert result.purchase_order.received_date is not None
        assert result.purchase_order.items[0].received_qty == Decimal("50")

        assert inventory_item.current_stock == Decimal("50")
        assert inventory_item.average_cost == Decimal("10")
        assert len(result.movements) == 1
        movement = result.movements[0]
        assert movement.total_cost == Decimal("500")
        assert movement.reference_id == "7"
        assert movement.notes == f"Received via {result.receipt.grn_number}"
        assert wired_uow.committed

    async def test_partial_receipt(self, processor, wired_uow):
        result = await processor.receive_goods(
            7, "EMP-1", [ReceiptLine(purchase_order_item_id=11, quantity_received=Decimal("20"))]
        )
        assert result.purchase_order.status == PurchaseOrderStatus.PARTIALLY_RECEIVED

    async def test_receipt_uses_order_price(self, processor, wired_uow):
        wired_uow.purchase_orders.get.return_value.items[0].unit_price = Decimal("12.5")
        result = await processor.receive_goods(
            7, "EMP-1", [ReceiptLine(purchase_order_item_id=11, quantity_received=Decimal("2"))]
        )
        assert result.movements[0].unit_cost == Decimal("12.5")

    async def test_batch_recorded_for_tracked_item(self, processor, inventory_item):
        inventory_item.track_batch = True
        result = await processor.receive_goods(
            7,
            "EMP-1",
            [
                ReceiptLine(
                    purchase_order_item_id=11,
                    quantity_received=Decimal("5"),
                    batch_number="LOT-1",
                )
            ],
        )
        assert [b.id for b in result.batches] == [300]

    async def test_grn_sequence_keyed_by_month(self, processor, wired_uow):
        await processor.receive_goods(
            7, "EMP-1", [ReceiptLine(purchase_order_item_id=11, quantity_received=Decimal("1"))]
        )
        name, period = wired_uow.sequences.next_value.await_args.args
        assert name == "GRN"
        assert len(period) == 6 and period.isdigit()


class TestReceiveGoodsValidation:
    async def test_missing_employee_and_items(self, processor, uow_factory):
        with pytest.raises(MissingFieldsError) as exc:
            await processor.receive_goods(7, "  ", [])
        assert exc.value.details["fields"] == ["received_by_employee_id", "items"]
        uow_factory.assert_not_called()

    async def test_unknown_order(self, processor, wired_uow):
        wired_uow.purchase_orders.get.return_value = None
        with pytest.raises(PurchaseOrderNotFoundError):
            await processor.receive_goods(
                99, "EMP-1", [ReceiptLine(purchase_order_item_id=11, quantity_received=Decimal("1"))]
            )
        assert wired_uow.rolled_back

    @pytest.mark.parametrize(
        "status",
        [
            PurchaseOrderStatus.DRAFT,
            PurchaseOrderStatus.APPROVED,
            PurchaseOrderStatus.RECEIVED,
            PurchaseOrderStatus.CANCELLED,
        ],
    )
    async def test_order_not_receivable(self, processor, sent_purchase_order, status):
        sent_purchase_order.status = status
        with pytest.raises(InvalidPOStateError):
            await processor.receive_goods(
                7, "EMP-1", [ReceiptLine(purchase_order_item_id=11, quantity_received=Decimal("1"))]
            )

    async def test_foreign_line(self, processor, wired_uow):
        with pytest.raises(LineNotFoundError):
            await processor.receive_goods(
                7, "EMP-1", [ReceiptLine(purchase_order_item_id=999, quantity_received=Decimal("1"))]
            )
        wired_uow.goods_receipts.create.assert_not_called()

    async def test_zero_quantity(self, processor, wired_uow):
        with pytest.raises(InvalidQuantityError):
            await processor.receive_goods(
                7, "EMP-1", [ReceiptLine(purchase_order_item_id=11, quantity_received=Decimal("0"))]
            )
        wired_uow.inventory.update_item.assert_not_called()

    async def test_over_receipt(self, processor, sent_purchase_order, wired_uow):
        sent_purchase_order.items[0].received_qty = Decimal("40")
        with pytest.raises(OverReceiptError) as exc:
            await processor.receive_goods(
                7, "EMP-1", [ReceiptLine(purchase_order_item_id=11, quantity_received=Decimal("11"))]
            )
        assert exc.value.details["already_received"] == "40"
        wired_uow.sequences.next_value.assert_not_called()

    async def test_repeated_line_is_summed(self, processor, wired_uow):
        lines = [
            ReceiptLine(purchase_order_item_id=11, quantity_received=Decimal("30")),
            ReceiptLine(purchase_order_item_id=11, quantity_received=Decimal("30")),
        ]
        with pytest.raises(OverReceiptError) as exc:
            await processor.receive_goods(7, "EMP-1", lines)
        assert exc.value.details["requested"] == "60"

    async def test_later_line_failure_writes_nothing(self, processor, sent_purchase_order, wired_uow):
        sent_purchase_order.items.append(
            PurchaseOrderItem(
                id=12,
                purchase_order_id=7,
                inventory_item_id=2,
                quantity=Decimal("5"),
                unit_price=Decimal("1"),
            )
        )
        lines = [
            ReceiptLine(purchase_order_item_id=11, quantity_received=Decimal("10")),
            ReceiptLine(purchase_order_item_id=12, quantity_received=Decimal("6")),
        ]
        with pytest.raises(OverReceiptError):
            await processor.receive_goods(7, "EMP-1", lines)
        wired_uow.inventory.update_item.assert_not_called()
        wired_uow.goods_receipts.create.assert_not_called()


class TestReceiveGoodsFailures:
    async def test_unexpected_error_becomes_transaction_failed(self, processor, wired_uow):
        wired_uow.inventory.add_movement.side_effect = RuntimeError("disk I/O error")
        with pytest.raises(TransactionFailedError) as exc:
            await processor.receive_goods(
                7, "EMP-1", [ReceiptLine(purchase_order_item_id=11, quantity_received=Decimal("1"))]
            )
        assert "disk I/O error" in exc.value.details["error"]
        assert wired_uow.rolled_back
        assert not wired_uow.committed

    async def test_timeout_rolls_back(self, wired_uow):
        async def slow_get(po_id):
            await asyncio.sleep(1)

        wired_uow.purchase_orders.get.side_effect = slow_get
        processor = GoodsReceiptProcessor(MagicMock(return_value=wired_uow), timeout_seconds=0.01)

        with pytest.raises(TransactionFailedError) as exc:
            await processor.receive_goods(
                7, "EMP-1", [ReceiptLine(purchase_order_item_id=11, quantity_received=Decimal("1"))]
            )
        assert "timed out" in exc.value.details["error"]
        assert wired_uow.rolled_back
