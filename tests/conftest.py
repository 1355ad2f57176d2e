"""Pytest configuration and fixtures."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from rms_procurement.core.entities import (
    InventoryItem,
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderStatus,
)


@pytest.fixture
def inventory_item() -> InventoryItem:
    """Flour in outlet OUT-1, empty stock."""
    return InventoryItem(
        id=1,
        outlet_id="OUT-1",
        sku="FLOUR-25",
        name="Flour 25kg",
        unit_of_measure="kg",
    )


@pytest.fixture
def sent_purchase_order() -> PurchaseOrder:
    """SENT order for 50 units of item 1 at 10.00."""
    return PurchaseOrder(
        id=7,
        po_number="PO-2026-0001",
        supplier_id="SUP-1",
        outlet_id="OUT-1",
        status=PurchaseOrderStatus.SENT,
        items=[
            PurchaseOrderItem(
                id=11,
                purchase_order_id=7,
                inventory_item_id=1,
                quantity=Decimal("50"),
                unit_price=Decimal("10.00"),
            )
        ],
    )


class FakeUnitOfWork:
    """In-memory stand-in for SQLiteUnitOfWork with AsyncMock stores."""

    def __init__(self):
        self.inventory = AsyncMock()
        self.batches = AsyncMock()
        self.purchase_orders = AsyncMock()
        self.goods_receipts = AsyncMock()
        self.sequences = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.committed = True
        else:
            self.rolled_back = True


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(fake_uow: FakeUnitOfWork) -> MagicMock:
    return MagicMock(return_value=fake_uow)
