"""Inventory reporting endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends

from rms_procurement.api.dependencies import (
    get_movement_summary_use_case,
    get_valuation_use_case,
)
from rms_procurement.application.dto.responses import (
    InventoryValuationResponse,
    MovementSummaryResponse,
)
from rms_procurement.application.use_cases import (
    GetInventoryValuationUseCase,
    GetMovementSummaryUseCase,
)

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/inventory/valuation", response_model=InventoryValuationResponse)
async def inventory_valuation(
    outlet_id: str | None = None,
    use_case: GetInventoryValuationUseCase = Depends(get_valuation_use_case),
) -> InventoryValuationResponse:
    """Stock value at weighted average cost."""
    valuation = await use_case.execute(outlet_id)
    return use_case.to_response(valuation)


@router.get("/inventory/movements", response_model=MovementSummaryResponse)
async def movement_summary(
    outlet_id: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    use_case: GetMovementSummaryUseCase = Depends(get_movement_summary_use_case),
) -> MovementSummaryResponse:
    """Movements grouped by type over a date range."""
    summary = await use_case.execute(outlet_id, start=start, end=end)
    return use_case.to_response(summary)
