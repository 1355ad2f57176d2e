"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

import rms_procurement.infrastructure.storage.sqlite.connection as conn_module
from rms_procurement.core.entities import (
    InventoryItem,
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderStatus,
)
from rms_procurement.infrastructure.storage.sqlite import (
    SQLiteInventoryStore,
    SQLitePurchaseOrderStore,
    close_pool,
)
from rms_procurement.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
def mock_settings(temp_db_path: Path):
    """Mock settings with temp database path."""
    mock = MagicMock()
    mock.storage.db_path = temp_db_path
    mock.storage.pool_size = 2
    mock.storage.busy_timeout = 5000
    return mock


@pytest.fixture
async def initialized_db(temp_db_path: Path, mock_settings) -> AsyncGenerator[Path, None]:
    """Migrated temporary database with the global pool pointed at it."""
    await initialize_database(temp_db_path, create_backup_before=False)

    conn_module._pool = None
    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        try:
            yield temp_db_path
        finally:
            await close_pool()


@pytest.fixture
def make_item(initialized_db):
    """Factory storing an inventory item."""

    async def create_item(
        sku: str = "FLOUR-25",
        outlet_id: str = "OUT-1",
        track_batch: bool = False,
        reorder_point: str | None = None,
    ) -> InventoryItem:
        return await SQLiteInventoryStore().create_item(
            InventoryItem(
                outlet_id=outlet_id,
                sku=sku,
                name=sku.title(),
                unit_of_measure="kg",
                track_batch=track_batch,
                reorder_point=Decimal(reorder_point) if reorder_point else None,
            )
        )

    return create_item


@pytest.fixture
def make_purchase_order(initialized_db):
    """Factory storing an order from (item, quantity, unit_price) lines."""

    async def create_purchase_order(
        lines: list[tuple[InventoryItem, str, str]],
        status: PurchaseOrderStatus = PurchaseOrderStatus.SENT,
        po_number: str = "PO-2026-0001",
    ) -> PurchaseOrder:
        return await SQLitePurchaseOrderStore().create(
            PurchaseOrder(
                po_number=po_number,
                supplier_id="SUP-1",
                outlet_id="OUT-1",
                status=status,
                items=[
                    PurchaseOrderItem(
                        inventory_item_id=item.id,
                        quantity=Decimal(qty),
                        unit_price=Decimal(price),
                    )
                    for item, qty, price in lines
                ],
            )
        )

    return create_purchase_order
