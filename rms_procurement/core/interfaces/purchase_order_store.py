"""Abstract interfaces for purchase order and goods receipt storage."""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal

from rms_procurement.core.entities.goods_receipt import GoodsReceipt
from rms_procurement.core.entities.purchase_order import (
    PurchaseOrder,
    PurchaseOrderStatus,
)


class IPurchaseOrderStore(ABC):
    """Interface for purchase order persistence."""

    @abstractmethod
    async def create(self, po: PurchaseOrder) -> PurchaseOrder:
        """Insert a purchase order with its lines."""
        pass

    @abstractmethod
    async def get(self, po_id: int) -> PurchaseOrder | None:
        """Get a purchase order with its lines."""
        pass

    @abstractmethod
    async def update(self, po: PurchaseOrder) -> PurchaseOrder:
        """Update header fields (status, totals, dates, notes)."""
        pass

    @abstractmethod
    async def replace_items(self, po: PurchaseOrder) -> PurchaseOrder:
        """Replace all lines of a purchase order."""
        pass

    @abstractmethod
    async def increment_received_qty(self, line_id: int, quantity: Decimal) -> Decimal:
        """Add to a line's received quantity and return the new value."""
        pass

    @abstractmethod
    async def delete(self, po_id: int) -> bool:
        """Delete a purchase order and its lines."""
        pass

    @abstractmethod
    async def list_orders(
        self,
        outlet_id: str | None = None,
        supplier_id: str | None = None,
        status: PurchaseOrderStatus | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[PurchaseOrder]:
        """List purchase orders, newest first."""
        pass


class IGoodsReceiptStore(ABC):
    """Interface for goods receipt persistence. Receipts are never updated."""

    @abstractmethod
    async def create(self, receipt: GoodsReceipt) -> GoodsReceipt:
        """Insert a goods receipt header with its lines."""
        pass

    @abstractmethod
    async def list_for_po(self, po_id: int) -> list[GoodsReceipt]:
        """List receipts of a purchase order, newest first."""
        pass

    @abstractmethod
    async def count_for_po(self, po_id: int) -> int:
        """Count receipts recorded against a purchase order."""
        pass


class ISequenceStore(ABC):
    """Interface for named, per-period document counters."""

    @abstractmethod
    async def next_value(self, name: str, period: str) -> int:
        """Atomically increment and return the counter for (name, period)."""
        pass
