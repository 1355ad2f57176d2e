"""SQLite unit of work: every store bound to one write-locked transaction."""

from contextlib import AsyncExitStack

from rms_procurement.config import get_logger
from rms_procurement.core.interfaces.unit_of_work import IUnitOfWork
from rms_procurement.infrastructure.storage.sqlite.connection import ConnectionPool, get_pool
from rms_procurement.infrastructure.storage.sqlite.inventory_store import (
    SQLiteInventoryStore,
    SQLiteStockBatchStore,
)
from rms_procurement.infrastructure.storage.sqlite.purchase_order_store import (
    SQLiteGoodsReceiptStore,
    SQLitePurchaseOrderStore,
    SQLiteSequenceStore,
)

logger = get_logger(__name__)


class SQLiteUnitOfWork(IUnitOfWork):
    """
    Opens BEGIN IMMEDIATE on one pooled connection and binds all stores to it.

    Holding SQLite's write lock from the first read means rows loaded for
    validation cannot change before commit. Instances are single-use.
    """

    def __init__(self, pool: ConnectionPool | None = None, immediate: bool = True):
        self._pool = pool
        self._immediate = immediate
        self._stack: AsyncExitStack | None = None

    async def __aenter__(self) -> "SQLiteUnitOfWork":
        pool = self._pool or await get_pool()
        stack = AsyncExitStack()
        conn = await stack.enter_async_context(pool.transaction(immediate=self._immediate))
        self._stack = stack

        self.inventory = SQLiteInventoryStore(conn)
        self.batches = SQLiteStockBatchStore(conn)
        self.purchase_orders = SQLitePurchaseOrderStore(conn)
        self.goods_receipts = SQLiteGoodsReceiptStore(conn)
        self.sequences = SQLiteSequenceStore(conn)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        stack, self._stack = self._stack, None
        if stack is None:
            return
        # Re-raise inside the pool transaction so it rolls back
        await stack.__aexit__(exc_type, exc, tb)
        if exc_type is not None:
            logger.info("unit_of_work_rolled_back", error=type(exc).__name__)


def get_unit_of_work() -> SQLiteUnitOfWork:
    """New unit of work on the global pool."""
    return SQLiteUnitOfWork()
