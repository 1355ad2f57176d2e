"""Tests for InventoryLedger and weighted average cost."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from rms_procurement.core.entities import InventoryItem, MovementType, StockMovement
from rms_procurement.core.exceptions import InvalidQuantityError, InventoryItemNotFoundError
from rms_procurement.core.services import InventoryLedger, weighted_average_cost


def _movement(qty: str, cost: str) -> StockMovement:
    return StockMovement(
        inventory_item_id=1,
        movement_type=MovementType.PURCHASE if Decimal(qty) > 0 else MovementType.CONSUMPTION,
        quantity=Decimal(qty),
        unit_cost=Decimal(cost),
        total_cost=Decimal(qty) * Decimal(cost),
    )


@pytest.fixture
def mock_inventory_store():
    store = AsyncMock()
    store.update_item.side_effect = lambda item: item
    store.add_movement.side_effect = lambda movement: movement.model_copy(update={"id": 1})
    return store


@pytest.fixture
def ledger(mock_inventory_store):
    return InventoryLedger(mock_inventory_store)


class TestWeightedAverageCost:
    def test_first_receipt_takes_unit_cost(self):
        assert weighted_average_cost(Decimal("0"), Decimal("0"), Decimal("10"), Decimal("100")) == Decimal("100")

    def test_blends_existing_stock(self):
        avg = weighted_average_cost(Decimal("10"), Decimal("100"), Decimal("10"), Decimal("120"))
        assert avg == Decimal("110")

    def test_quantized_half_up(self):
        avg = weighted_average_cost(Decimal("1"), Decimal("1"), Decimal("2"), Decimal("2"))
        assert avg == Decimal("1.666667")
        assert avg.as_tuple().exponent == -6


class TestApplyReceipt:
    async def test_two_receipts_average(self, ledger, mock_inventory_store, inventory_item):
        mock_inventory_store.get_item.return_value = inventory_item

        item, first = await ledger.apply_receipt(1, Decimal("10"), Decimal("100"), "EMP-1", "7")
        assert item.current_stock == Decimal("10")
        assert item.average_cost == Decimal("100")

        item, second = await ledger.apply_receipt(1, Decimal("10"), Decimal("120"), "EMP-1", "7")
        assert item.current_stock == Decimal("20")
        assert item.average_cost == Decimal("110")
        assert item.last_cost == Decimal("120")
        assert second.total_cost == Decimal("1200")

    async def test_movement_fields(self, ledger, mock_inventory_store, inventory_item):
        mock_inventory_store.get_item.return_value = inventory_item

        _, movement = await ledger.apply_receipt(
            1, Decimal("50"), Decimal("10"), "EMP-1", "7", notes="Received via GRN-202610-0001"
        )
        assert movement.movement_type == MovementType.PURCHASE
        assert movement.quantity == Decimal("50")
        assert movement.total_cost == Decimal("500")
        assert movement.reference_type == "PO"
        assert movement.reference_id == "7"
        assert movement.performed_by_employee_id == "EMP-1"
        assert movement.notes == "Received via GRN-202610-0001"
        mock_inventory_store.update_item.assert_awaited_once()
        mock_inventory_store.add_movement.assert_awaited_once()

    async def test_zero_cost_allowed(self, ledger, mock_inventory_store, inventory_item):
        mock_inventory_store.get_item.return_value = inventory_item
        item, _ = await ledger.apply_receipt(1, Decimal("5"), Decimal("0"), None, None)
        assert item.average_cost == Decimal("0")

    @pytest.mark.parametrize("qty", ["0", "-1"])
    async def test_non_positive_quantity(self, ledger, mock_inventory_store, qty):
        with pytest.raises(InvalidQuantityError):
            await ledger.apply_receipt(1, Decimal(qty), Decimal("1"), None, None)
        mock_inventory_store.get_item.assert_not_called()

    async def test_negative_cost(self, ledger):
        with pytest.raises(InvalidQuantityError):
            await ledger.apply_receipt(1, Decimal("1"), Decimal("-0.01"), None, None)

    async def test_unknown_item(self, ledger, mock_inventory_store):
        mock_inventory_store.get_item.return_value = None
        with pytest.raises(InventoryItemNotFoundError):
            await ledger.apply_receipt(99, Decimal("1"), Decimal("1"), None, None)
        mock_inventory_store.add_movement.assert_not_called()


class TestReplay:
    def test_replay_matches_incremental(self):
        state = InventoryLedger.replay([_movement("10", "100"), _movement("10", "120")])
        assert state.current_stock == Decimal("20")
        assert state.average_cost == Decimal("110")
        assert state.last_cost == Decimal("120")
        assert state.movement_count == 2

    def test_outbound_keeps_average(self):
        state = InventoryLedger.replay([_movement("10", "100"), _movement("-4", "100")])
        assert state.current_stock == Decimal("6")
        assert state.average_cost == Decimal("100")

    def test_empty(self):
        state = InventoryLedger.replay([])
        assert state.current_stock == Decimal("0")
        assert state.movement_count == 0


class TestVerifyItem:
    async def test_consistent(self, ledger, mock_inventory_store, inventory_item):
        inventory_item.current_stock = Decimal("20")
        inventory_item.average_cost = Decimal("110")
        mock_inventory_store.get_item.return_value = inventory_item
        mock_inventory_store.get_all_movements.return_value = [
            _movement("10", "100"),
            _movement("10", "120"),
        ]

        result = await ledger.verify_item(1)
        assert result.consistent
        assert result.mismatches == []

    async def test_stock_mismatch(self, ledger, mock_inventory_store, inventory_item):
        inventory_item.current_stock = Decimal("25")
        inventory_item.average_cost = Decimal("100")
        mock_inventory_store.get_item.return_value = inventory_item
        mock_inventory_store.get_all_movements.return_value = [_movement("20", "100")]

        result = await ledger.verify_item(1)
        assert not result.consistent
        assert result.mismatches == ["current_stock"]

    async def test_unknown_item(self, ledger, mock_inventory_store):
        mock_inventory_store.get_item.return_value = None
        with pytest.raises(InventoryItemNotFoundError):
            await ledger.verify_item(5)
