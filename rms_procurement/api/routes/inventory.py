"""Inventory item, stock movement and batch endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from rms_procurement.api.dependencies import (
    get_create_inventory_item_use_case,
    get_expiring_batches_use_case,
    get_get_inventory_item_use_case,
    get_list_batches_use_case,
    get_list_inventory_items_use_case,
    get_stock_movements_use_case,
    get_verify_ledger_use_case,
)
from rms_procurement.application.dto.mappers import item_to_response
from rms_procurement.application.dto.requests import (
    CreateInventoryItemRequest,
    StockMovementQuery,
)
from rms_procurement.application.dto.responses import (
    ErrorResponse,
    InventoryItemListResponse,
    InventoryItemResponse,
    LedgerVerificationResponse,
    StockBatchListResponse,
    StockMovementListResponse,
)
from rms_procurement.application.use_cases import (
    CreateInventoryItemUseCase,
    GetInventoryItemUseCase,
    GetStockMovementsUseCase,
    ListBatchesUseCase,
    ListExpiringBatchesUseCase,
    ListInventoryItemsUseCase,
    VerifyLedgerUseCase,
)

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


# --- Items ---


@router.post(
    "/items",
    response_model=InventoryItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_item(
    request: CreateInventoryItemRequest,
    use_case: CreateInventoryItemUseCase = Depends(get_create_inventory_item_use_case),
) -> InventoryItemResponse:
    """Create an inventory item with zero stock."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("/items", response_model=InventoryItemListResponse)
async def list_items(
    outlet_id: str | None = None,
    low_stock_only: bool = False,
    limit: int = Query(default=50, ge=1),
    offset: int = Query(default=0, ge=0),
    use_case: ListInventoryItemsUseCase = Depends(get_list_inventory_items_use_case),
) -> InventoryItemListResponse:
    """List active inventory items."""
    items = await use_case.execute(
        outlet_id=outlet_id,
        low_stock_only=low_stock_only,
        limit=limit,
        offset=offset,
    )
    return use_case.to_response(items)


@router.get(
    "/items/{item_id}",
    response_model=InventoryItemResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_item(
    item_id: int,
    use_case: GetInventoryItemUseCase = Depends(get_get_inventory_item_use_case),
) -> InventoryItemResponse:
    item = await use_case.execute(item_id)
    return item_to_response(item)


@router.get(
    "/items/{item_id}/movements",
    response_model=StockMovementListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_movements(
    item_id: int,
    start: datetime | None = None,
    end: datetime | None = None,
    movement_type: str | None = None,
    limit: int = Query(default=50, ge=1),
    offset: int = Query(default=0, ge=0),
    use_case: GetStockMovementsUseCase = Depends(get_stock_movements_use_case),
) -> StockMovementListResponse:
    """Stock movement history of an item, newest first."""
    query = StockMovementQuery(
        start=start,
        end=end,
        movement_type=movement_type,
        limit=limit,
        offset=offset,
    )
    movements = await use_case.execute(item_id, query)
    return use_case.to_response(item_id, movements, query)


@router.get(
    "/items/{item_id}/batches",
    response_model=StockBatchListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_batches(
    item_id: int,
    use_case: ListBatchesUseCase = Depends(get_list_batches_use_case),
) -> StockBatchListResponse:
    batches = await use_case.execute(item_id)
    return use_case.to_response(batches)


@router.get(
    "/items/{item_id}/verify",
    response_model=LedgerVerificationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def verify_ledger(
    item_id: int,
    use_case: VerifyLedgerUseCase = Depends(get_verify_ledger_use_case),
) -> LedgerVerificationResponse:
    """
    Replay the item's movements and compare with the stored stock level.

    A consistent item has current_stock equal to the sum of its movements.
    """
    verification = await use_case.execute(item_id)
    return use_case.to_response(verification)


# --- Batches ---


@router.get("/batches/expiring", response_model=StockBatchListResponse)
async def get_expiring_batches(
    days: int | None = Query(default=None, ge=0),
    outlet_id: str | None = None,
    use_case: ListExpiringBatchesUseCase = Depends(get_expiring_batches_use_case),
) -> StockBatchListResponse:
    """Lots expiring within the given number of days."""
    batches = await use_case.execute(within_days=days, outlet_id=outlet_id)
    return use_case.to_response(batches)
