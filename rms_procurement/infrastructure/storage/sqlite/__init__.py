"""SQLite storage implementations."""

from rms_procurement.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from rms_procurement.infrastructure.storage.sqlite.inventory_store import (
    SQLiteInventoryStore,
    SQLiteStockBatchStore,
)
from rms_procurement.infrastructure.storage.sqlite.purchase_order_store import (
    SQLiteGoodsReceiptStore,
    SQLitePurchaseOrderStore,
    SQLiteSequenceStore,
)
from rms_procurement.infrastructure.storage.sqlite.unit_of_work import (
    SQLiteUnitOfWork,
    get_unit_of_work,
)

# Singleton instances (unbound: each call uses its own pooled connection)
_inventory_store: SQLiteInventoryStore | None = None
_batch_store: SQLiteStockBatchStore | None = None
_purchase_order_store: SQLitePurchaseOrderStore | None = None
_goods_receipt_store: SQLiteGoodsReceiptStore | None = None


async def get_inventory_store() -> SQLiteInventoryStore:
    """Get singleton inventory store instance."""
    global _inventory_store
    if _inventory_store is None:
        _inventory_store = SQLiteInventoryStore()
    return _inventory_store


async def get_batch_store() -> SQLiteStockBatchStore:
    """Get singleton stock batch store instance."""
    global _batch_store
    if _batch_store is None:
        _batch_store = SQLiteStockBatchStore()
    return _batch_store


async def get_purchase_order_store() -> SQLitePurchaseOrderStore:
    """Get singleton purchase order store instance."""
    global _purchase_order_store
    if _purchase_order_store is None:
        _purchase_order_store = SQLitePurchaseOrderStore()
    return _purchase_order_store


async def get_goods_receipt_store() -> SQLiteGoodsReceiptStore:
    """Get singleton goods receipt store instance."""
    global _goods_receipt_store
    if _goods_receipt_store is None:
        _goods_receipt_store = SQLiteGoodsReceiptStore()
    return _goods_receipt_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteInventoryStore",
    "SQLiteStockBatchStore",
    "SQLitePurchaseOrderStore",
    "SQLiteGoodsReceiptStore",
    "SQLiteSequenceStore",
    # Unit of work
    "SQLiteUnitOfWork",
    "get_unit_of_work",
    # Factory functions
    "get_inventory_store",
    "get_batch_store",
    "get_purchase_order_store",
    "get_goods_receipt_store",
]
