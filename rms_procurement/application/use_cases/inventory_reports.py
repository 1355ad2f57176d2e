"""
Read-only inventory reports.

Valuation, stock movement history, movement summaries, ledger
verification and batch listings. None of these write.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from rms_procurement.application.dto.mappers import (
    batch_to_response,
    item_to_response,
    movement_to_response,
)
from rms_procurement.application.dto.requests import StockMovementQuery
from rms_procurement.application.dto.responses import (
    InventoryValuationResponse,
    LedgerVerificationResponse,
    MovementSummaryResponse,
    MovementTypeSummaryResponse,
    StockBatchListResponse,
    StockMovementListResponse,
)
from rms_procurement.application.services import clamp_page_size
from rms_procurement.config import get_logger, get_settings
from rms_procurement.core.entities import (
    InventoryItem,
    MovementType,
    StockBatch,
    StockMovement,
    ZERO,
    utcnow,
)
from rms_procurement.core.exceptions import InventoryItemNotFoundError, ValidationError
from rms_procurement.core.interfaces import IInventoryStore, IStockBatchStore
from rms_procurement.core.services import (
    InventoryLedger,
    LedgerVerification,
    StockBatchTracker,
)

logger = get_logger(__name__)

RECENT_MOVEMENTS = 20

# Large enough to load every active item of an outlet for valuation
_ALL_ITEMS = 1_000_000


def parse_movement_type(value: str | None) -> MovementType | None:
    if not value:
        return None
    try:
        return MovementType(value.upper())
    except ValueError:
        raise ValidationError(
            "movement_type",
            f"must be one of {', '.join(t.value for t in MovementType)}",
            value=value,
        ) from None


class _ReportUseCase:
    def __init__(
        self,
        inventory_store: IInventoryStore | None = None,
        batch_store: IStockBatchStore | None = None,
    ):
        self._inventory_store = inventory_store
        self._batch_store = batch_store

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from rms_procurement.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def _get_batch_store(self) -> IStockBatchStore:
        if self._batch_store is None:
            from rms_procurement.infrastructure.storage.sqlite import get_batch_store

            self._batch_store = await get_batch_store()
        return self._batch_store

    async def _require_item(self, item_id: int) -> InventoryItem:
        store = await self._get_inventory_store()
        item = await store.get_item(item_id)
        if item is None:
            raise InventoryItemNotFoundError(item_id)
        return item


# --- Valuation ---


@dataclass
class InventoryValuation:
    outlet_id: str | None
    items: list[InventoryItem]
    total_value: Decimal
    low_stock_count: int
    out_of_stock_count: int


class GetInventoryValuationUseCase(_ReportUseCase):
    """Stock value of an outlet: Σ current_stock × average_cost."""

    async def execute(self, outlet_id: str | None = None) -> InventoryValuation:
        store = await self._get_inventory_store()
        items = await store.list_items(outlet_id=outlet_id, limit=_ALL_ITEMS)
        valuation = InventoryValuation(
            outlet_id=outlet_id,
            items=items,
            total_value=sum((i.total_value for i in items), ZERO),
            low_stock_count=sum(1 for i in items if i.is_low_stock),
            out_of_stock_count=sum(1 for i in items if i.is_out_of_stock),
        )
        logger.info(
            "inventory_valuation_computed",
            outlet_id=outlet_id,
            items=len(items),
            total_value=valuation.total_value,
        )
        return valuation

    def to_response(self, valuation: InventoryValuation) -> InventoryValuationResponse:
        return InventoryValuationResponse(
            outlet_id=valuation.outlet_id,
            total_items=len(valuation.items),
            total_value=valuation.total_value,
            low_stock_count=valuation.low_stock_count,
            out_of_stock_count=valuation.out_of_stock_count,
            items=[item_to_response(i) for i in valuation.items],
        )


# --- Movements ---


class GetStockMovementsUseCase(_ReportUseCase):
    """Stock movements of one item, newest first, filtered by date range and type."""

    async def execute(self, item_id: int, query: StockMovementQuery) -> list[StockMovement]:
        await self._require_item(item_id)
        store = await self._get_inventory_store()
        return await store.get_movements(
            item_id,
            start=query.start,
            end=query.end,
            movement_type=parse_movement_type(query.movement_type),
            limit=clamp_page_size(query.limit),
            offset=query.offset,
        )

    def to_response(
        self, item_id: int, movements: list[StockMovement], query: StockMovementQuery
    ) -> StockMovementListResponse:
        return StockMovementListResponse(
            inventory_item_id=item_id,
            movements=[movement_to_response(m) for m in movements],
            limit=clamp_page_size(query.limit),
            offset=query.offset,
        )


@dataclass
class MovementTypeTotals:
    count: int = 0
    total_quantity: Decimal = ZERO
    total_cost: Decimal = ZERO


@dataclass
class MovementSummary:
    outlet_id: str | None
    start: datetime | None
    end: datetime | None
    total_movements: int
    by_type: dict[MovementType, MovementTypeTotals] = field(default_factory=dict)
    recent: list[StockMovement] = field(default_factory=list)


class GetMovementSummaryUseCase(_ReportUseCase):
    """Movements of an outlet grouped by type (count, Σ|quantity|, Σ cost) plus the latest entries."""

    async def execute(
        self,
        outlet_id: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> MovementSummary:
        store = await self._get_inventory_store()
        movements = await store.list_outlet_movements(outlet_id, start=start, end=end)

        by_type: dict[MovementType, MovementTypeTotals] = {}
        for m in movements:
            totals = by_type.setdefault(m.movement_type, MovementTypeTotals())
            totals.count += 1
            totals.total_quantity += abs(m.quantity)
            totals.total_cost += m.total_cost

        return MovementSummary(
            outlet_id=outlet_id,
            start=start,
            end=end,
            total_movements=len(movements),
            by_type=by_type,
            recent=movements[:RECENT_MOVEMENTS],
        )

    def to_response(self, summary: MovementSummary) -> MovementSummaryResponse:
        return MovementSummaryResponse(
            outlet_id=summary.outlet_id,
            start=summary.start,
            end=summary.end,
            total_movements=summary.total_movements,
            by_type=[
                MovementTypeSummaryResponse(
                    movement_type=movement_type.value,
                    count=totals.count,
                    total_quantity=totals.total_quantity,
                    total_cost=totals.total_cost,
                )
                for movement_type, totals in sorted(
                    summary.by_type.items(), key=lambda kv: kv[0].value
                )
            ],
            recent=[movement_to_response(m) for m in summary.recent],
        )


# --- Ledger verification ---


class VerifyLedgerUseCase(_ReportUseCase):
    """Replay an item's movements and compare with its stored stock and cost."""

    async def execute(self, item_id: int) -> LedgerVerification:
        ledger = InventoryLedger(await self._get_inventory_store())
        return await ledger.verify_item(item_id)

    def to_response(self, verification: LedgerVerification) -> LedgerVerificationResponse:
        return LedgerVerificationResponse(
            inventory_item_id=verification.inventory_item_id,
            consistent=verification.consistent,
            movement_count=verification.replayed.movement_count,
            stored_stock=verification.stored.current_stock,
            replayed_stock=verification.replayed.current_stock,
            stored_average_cost=verification.stored.average_cost,
            replayed_average_cost=verification.replayed.average_cost,
            mismatches=verification.mismatches,
        )


# --- Batches ---


class ListBatchesUseCase(_ReportUseCase):
    """Lots of one item, earliest expiry first."""

    async def execute(self, item_id: int) -> list[StockBatch]:
        await self._require_item(item_id)
        tracker = StockBatchTracker(await self._get_batch_store())
        return await tracker.list_batches(item_id)

    def to_response(self, batches: list[StockBatch], today: date | None = None) -> StockBatchListResponse:
        today = today or utcnow().date()
        return StockBatchListResponse(
            batches=[batch_to_response(b, today) for b in batches],
            total=len(batches),
        )


class ListExpiringBatchesUseCase(_ReportUseCase):
    """Lots expiring within a number of days, including ones already expired."""

    async def execute(
        self,
        within_days: int | None = None,
        outlet_id: str | None = None,
        today: date | None = None,
    ) -> list[StockBatch]:
        if within_days is None:
            within_days = get_settings().procurement.expiring_batch_days
        tracker = StockBatchTracker(await self._get_batch_store())
        return await tracker.list_expiring(within_days, today=today, outlet_id=outlet_id)

    def to_response(self, batches: list[StockBatch], today: date | None = None) -> StockBatchListResponse:
        today = today or utcnow().date()
        return StockBatchListResponse(
            batches=[batch_to_response(b, today) for b in batches],
            total=len(batches),
        )
