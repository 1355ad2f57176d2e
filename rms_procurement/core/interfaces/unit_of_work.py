"""Abstract unit of work spanning every store touched by one business operation."""

from abc import ABC, abstractmethod

from rms_procurement.core.interfaces.inventory_store import IInventoryStore, IStockBatchStore
from rms_procurement.core.interfaces.purchase_order_store import (
    IGoodsReceiptStore,
    IPurchaseOrderStore,
    ISequenceStore,
)


class IUnitOfWork(ABC):
    """
    One atomic transaction.

    Usage:
        async with uow:
            await uow.inventory.update_item(item)
            await uow.purchase_orders.update(po)

    Leaving the block normally commits; any exception (including
    cancellation) rolls everything back.
    """

    inventory: IInventoryStore
    batches: IStockBatchStore
    purchase_orders: IPurchaseOrderStore
    goods_receipts: IGoodsReceiptStore
    sequences: ISequenceStore

    @abstractmethod
    async def __aenter__(self) -> "IUnitOfWork":
        pass

    @abstractmethod
    async def __aexit__(self, exc_type, exc, tb) -> None:
        pass
