"""Purchase order and goods receipt endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response, status

from rms_procurement.api.dependencies import (
    get_change_status_use_case,
    get_create_purchase_order_use_case,
    get_delete_purchase_order_use_case,
    get_get_purchase_order_use_case,
    get_list_purchase_orders_use_case,
    get_receive_goods_use_case,
    get_update_purchase_order_use_case,
)
from rms_procurement.application.dto.requests import (
    CreatePurchaseOrderRequest,
    FullUpdateRequest,
    ListPurchaseOrdersRequest,
    ReceiveGoodsRequest,
    StatusActionRequest,
)
from rms_procurement.application.dto.responses import (
    ErrorResponse,
    PurchaseOrderListResponse,
    PurchaseOrderResponse,
    ReceiveGoodsResponse,
)
from rms_procurement.application.use_cases import (
    ChangePurchaseOrderStatusUseCase,
    CreatePurchaseOrderUseCase,
    DeletePurchaseOrderUseCase,
    GetPurchaseOrderUseCase,
    ListPurchaseOrdersUseCase,
    ReceiveGoodsUseCase,
    UpdatePurchaseOrderUseCase,
)

router = APIRouter(prefix="/api/purchase-orders", tags=["purchase-orders"])


@router.post(
    "",
    response_model=PurchaseOrderResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_purchase_order(
    request: CreatePurchaseOrderRequest,
    use_case: CreatePurchaseOrderUseCase = Depends(get_create_purchase_order_use_case),
) -> PurchaseOrderResponse:
    """Create a DRAFT purchase order."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("", response_model=PurchaseOrderListResponse)
async def list_purchase_orders(
    outlet_id: str | None = None,
    supplier_id: str | None = None,
    po_status: str | None = Query(default=None, alias="status"),
    start: datetime | None = None,
    end: datetime | None = None,
    limit: int = Query(default=50, ge=1),
    offset: int = Query(default=0, ge=0),
    use_case: ListPurchaseOrdersUseCase = Depends(get_list_purchase_orders_use_case),
) -> PurchaseOrderListResponse:
    """List purchase orders, newest first."""
    request = ListPurchaseOrdersRequest(
        outlet_id=outlet_id,
        supplier_id=supplier_id,
        status=po_status,
        start=start,
        end=end,
        limit=limit,
        offset=offset,
    )
    orders = await use_case.execute(request)
    return use_case.to_response(orders, request)


@router.get(
    "/{po_id}",
    response_model=PurchaseOrderResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_purchase_order(
    po_id: int,
    use_case: GetPurchaseOrderUseCase = Depends(get_get_purchase_order_use_case),
) -> PurchaseOrderResponse:
    """Get a purchase order with its lines and goods receipts."""
    result = await use_case.execute(po_id)
    return use_case.to_response(result)


@router.put(
    "/{po_id}",
    response_model=PurchaseOrderResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_purchase_order(
    po_id: int,
    request: FullUpdateRequest,
    use_case: UpdatePurchaseOrderUseCase = Depends(get_update_purchase_order_use_case),
) -> PurchaseOrderResponse:
    """Replace lines, tax rate, expected date or notes of a DRAFT or PENDING_APPROVAL order."""
    result = await use_case.execute(po_id, request)
    return use_case.to_response(result)


@router.patch(
    "/{po_id}/status",
    response_model=PurchaseOrderResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def change_purchase_order_status(
    po_id: int,
    request: StatusActionRequest,
    use_case: ChangePurchaseOrderStatusUseCase = Depends(get_change_status_use_case),
) -> PurchaseOrderResponse:
    """Submit, approve, return to draft, send or cancel an order."""
    result = await use_case.execute(po_id, request)
    return use_case.to_response(result)


@router.delete(
    "/{po_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_purchase_order(
    po_id: int,
    use_case: DeletePurchaseOrderUseCase = Depends(get_delete_purchase_order_use_case),
) -> Response:
    """Delete a DRAFT order without receipts."""
    await use_case.execute(po_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{po_id}/receive",
    response_model=ReceiveGoodsResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def receive_goods(
    po_id: int,
    request: ReceiveGoodsRequest,
    use_case: ReceiveGoodsUseCase = Depends(get_receive_goods_use_case),
) -> ReceiveGoodsResponse:
    """
    Receive goods against a SENT or PARTIALLY_RECEIVED order.

    Creates the goods receipt note, adds stock at the order price, records
    batches and advances the order status in one transaction.
    """
    result = await use_case.execute(po_id, request)
    return use_case.to_response(result)
