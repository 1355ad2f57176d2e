"""Abstract interfaces for inventory and stock batch storage."""

from abc import ABC, abstractmethod
from datetime import date, datetime

from rms_procurement.core.entities.inventory import (
    InventoryItem,
    MovementType,
    StockBatch,
    StockMovement,
)


class IInventoryStore(ABC):
    """Interface for inventory item and stock movement persistence.

    Stock movements are append-only: there is no update or delete.
    """

    @abstractmethod
    async def create_item(self, item: InventoryItem) -> InventoryItem:
        """Create a new inventory item."""
        pass

    @abstractmethod
    async def get_item(self, item_id: int) -> InventoryItem | None:
        """Get inventory item by ID."""
        pass

    @abstractmethod
    async def get_item_by_sku(self, outlet_id: str, sku: str) -> InventoryItem | None:
        """Get inventory item by outlet and SKU."""
        pass

    @abstractmethod
    async def update_item(self, item: InventoryItem) -> InventoryItem:
        """Update stock and cost fields of an inventory item."""
        pass

    @abstractmethod
    async def list_items(
        self,
        outlet_id: str | None = None,
        low_stock_only: bool = False,
        limit: int = 100,
        offset: int = 0,
    ) -> list[InventoryItem]:
        """List active inventory items, optionally only those at or below reorder point."""
        pass

    @abstractmethod
    async def add_movement(self, movement: StockMovement) -> StockMovement:
        """Append a stock movement."""
        pass

    @abstractmethod
    async def get_movements(
        self,
        inventory_item_id: int,
        start: datetime | None = None,
        end: datetime | None = None,
        movement_type: MovementType | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[StockMovement]:
        """Get movements for an inventory item, newest first."""
        pass

    @abstractmethod
    async def get_all_movements(self, inventory_item_id: int) -> list[StockMovement]:
        """Get every movement for an inventory item in the order it was written."""
        pass

    @abstractmethod
    async def list_outlet_movements(
        self,
        outlet_id: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[StockMovement]:
        """Get movements for all items of an outlet, newest first."""
        pass


class IStockBatchStore(ABC):
    """Interface for stock batch (lot) persistence."""

    @abstractmethod
    async def add_batch(self, batch: StockBatch) -> StockBatch:
        """Insert a batch row."""
        pass

    @abstractmethod
    async def list_batches(self, inventory_item_id: int) -> list[StockBatch]:
        """List batches for an item, earliest expiry first."""
        pass

    @abstractmethod
    async def list_expiring(
        self, on_or_before: date, outlet_id: str | None = None
    ) -> list[StockBatch]:
        """List batches expiring on or before the given date."""
        pass
