"""Core interfaces (ports) for dependency injection."""

from rms_procurement.core.interfaces.inventory_store import IInventoryStore, IStockBatchStore
from rms_procurement.core.interfaces.purchase_order_store import (
    IGoodsReceiptStore,
    IPurchaseOrderStore,
    ISequenceStore,
)
from rms_procurement.core.interfaces.unit_of_work import IUnitOfWork

__all__ = [
    # Storage interfaces
    "IInventoryStore",
    "IStockBatchStore",
    "IPurchaseOrderStore",
    "IGoodsReceiptStore",
    "ISequenceStore",
    # Transactions
    "IUnitOfWork",
]
