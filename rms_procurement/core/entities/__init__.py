"""Core domain entities."""

from rms_procurement.core.entities.common import ZERO, utcnow
from rms_procurement.core.entities.goods_receipt import GoodsReceipt, GoodsReceiptItem
from rms_procurement.core.entities.inventory import (
    InventoryItem,
    MovementType,
    StockBatch,
    StockMovement,
)
from rms_procurement.core.entities.purchase_order import (
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderStatus,
)

__all__ = [
    # Inventory entities
    "InventoryItem",
    "StockMovement",
    "StockBatch",
    "MovementType",
    # Purchase order entities
    "PurchaseOrder",
    "PurchaseOrderItem",
    "PurchaseOrderStatus",
    # Goods receipt entities
    "GoodsReceipt",
    "GoodsReceiptItem",
    # Helpers
    "ZERO",
    "utcnow",
]
