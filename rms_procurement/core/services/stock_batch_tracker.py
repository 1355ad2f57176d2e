"""Lot tracking for batch-managed inventory items."""

from datetime import date, datetime, timedelta
from decimal import Decimal

from rms_procurement.config import get_logger
from rms_procurement.core.entities.common import utcnow
from rms_procurement.core.entities.inventory import InventoryItem, StockBatch
from rms_procurement.core.interfaces.inventory_store import IStockBatchStore

logger = get_logger(__name__)


class StockBatchTracker:
    """
    Records batches received for items with batch tracking enabled.

    Batch numbers are not unique per item: receiving the same batch number
    twice creates two rows.
    """

    def __init__(self, batch_store: IStockBatchStore):
        self._batch_store = batch_store

    async def record_batch(
        self,
        item: InventoryItem,
        batch_number: str | None,
        quantity: Decimal,
        expiry_date: date | None,
        unit_cost: Decimal,
        received_date: datetime | None = None,
    ) -> StockBatch | None:
        """Create a batch row, or return None when the item is not tracked or no batch was given."""
        if not item.track_batch or not batch_number or not batch_number.strip():
            return None

        batch = StockBatch(
            inventory_item_id=item.id,  # type: ignore[arg-type]
            batch_number=batch_number.strip(),
            quantity=quantity,
            received_date=received_date or utcnow(),
            expiry_date=expiry_date,
            unit_cost=unit_cost,
        )
        batch = await self._batch_store.add_batch(batch)
        logger.info(
            "stock_batch_recorded",
            batch_id=batch.id,
            item_id=item.id,
            batch_number=batch.batch_number,
            quantity=quantity,
            expiry_date=expiry_date,
        )
        return batch

    async def list_batches(self, inventory_item_id: int) -> list[StockBatch]:
        return await self._batch_store.list_batches(inventory_item_id)

    async def list_expiring(
        self,
        within_days: int,
        today: date | None = None,
        outlet_id: str | None = None,
    ) -> list[StockBatch]:
        """Batches whose expiry date falls within the next `within_days` days (or has passed)."""
        today = today or utcnow().date()
        return await self._batch_store.list_expiring(
            today + timedelta(days=within_days), outlet_id=outlet_id
        )
