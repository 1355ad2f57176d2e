"""Inventory item use cases: create, get and list."""

from dataclasses import dataclass

from rms_procurement.application.dto.mappers import item_to_response
from rms_procurement.application.dto.requests import CreateInventoryItemRequest
from rms_procurement.application.dto.responses import (
    InventoryItemListResponse,
    InventoryItemResponse,
)
from rms_procurement.application.services import clamp_page_size
from rms_procurement.config import get_logger
from rms_procurement.core.entities import InventoryItem, utcnow
from rms_procurement.core.exceptions import DuplicateSkuError, InventoryItemNotFoundError
from rms_procurement.core.interfaces import IInventoryStore

logger = get_logger(__name__)


class _InventoryUseCase:
    def __init__(self, inventory_store: IInventoryStore | None = None):
        self._inventory_store = inventory_store

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from rms_procurement.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store


@dataclass
class CreateInventoryItemResult:
    inventory_item: InventoryItem


class CreateInventoryItemUseCase(_InventoryUseCase):
    """Create an inventory item. Stock starts at zero and only grows through receipts."""

    async def execute(self, request: CreateInventoryItemRequest) -> CreateInventoryItemResult:
        store = await self._get_inventory_store()
        sku = request.sku.strip()

        if await store.get_item_by_sku(request.outlet_id, sku) is not None:
            raise DuplicateSkuError(request.outlet_id, sku)

        now = utcnow()
        item = InventoryItem(
            outlet_id=request.outlet_id,
            sku=sku,
            name=request.name.strip(),
            unit_of_measure=request.unit_of_measure.strip(),
            reorder_point=request.reorder_point,
            track_batch=request.track_batch,
            created_at=now,
            updated_at=now,
        )
        item = await store.create_item(item)
        return CreateInventoryItemResult(inventory_item=item)

    def to_response(self, result: CreateInventoryItemResult) -> InventoryItemResponse:
        return item_to_response(result.inventory_item)


class GetInventoryItemUseCase(_InventoryUseCase):
    async def execute(self, item_id: int) -> InventoryItem:
        store = await self._get_inventory_store()
        item = await store.get_item(item_id)
        if item is None:
            raise InventoryItemNotFoundError(item_id)
        return item


class ListInventoryItemsUseCase(_InventoryUseCase):
    """List active items of an outlet, optionally only those at or below reorder point."""

    async def execute(
        self,
        outlet_id: str | None = None,
        low_stock_only: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[InventoryItem]:
        store = await self._get_inventory_store()
        return await store.list_items(
            outlet_id=outlet_id,
            low_stock_only=low_stock_only,
            limit=clamp_page_size(limit),
            offset=offset,
        )

    def to_response(self, items: list[InventoryItem]) -> InventoryItemListResponse:
        return InventoryItemListResponse(
            items=[item_to_response(i) for i in items],
            total=len(items),
        )
