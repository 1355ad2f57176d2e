"""List Purchase Orders Use Case."""

from rms_procurement.application.dto.mappers import purchase_order_to_response
from rms_procurement.application.dto.requests import ListPurchaseOrdersRequest
from rms_procurement.application.dto.responses import PurchaseOrderListResponse
from rms_procurement.application.services import clamp_page_size
from rms_procurement.core.entities import PurchaseOrder, PurchaseOrderStatus
from rms_procurement.core.exceptions import ValidationError
from rms_procurement.core.interfaces import IPurchaseOrderStore


def parse_status(value: str | None) -> PurchaseOrderStatus | None:
    if not value:
        return None
    try:
        return PurchaseOrderStatus(value.upper())
    except ValueError:
        raise ValidationError(
            "status",
            f"must be one of {', '.join(s.value for s in PurchaseOrderStatus)}",
            value=value,
        ) from None


class ListPurchaseOrdersUseCase:
    """List purchase orders with outlet, supplier, status and date filters."""

    def __init__(self, purchase_order_store: IPurchaseOrderStore | None = None):
        self._purchase_order_store = purchase_order_store

    async def _get_purchase_order_store(self) -> IPurchaseOrderStore:
        if self._purchase_order_store is None:
            from rms_procurement.infrastructure.storage.sqlite import get_purchase_order_store

            self._purchase_order_store = await get_purchase_order_store()
        return self._purchase_order_store

    async def execute(self, request: ListPurchaseOrdersRequest) -> list[PurchaseOrder]:
        store = await self._get_purchase_order_store()
        return await store.list_orders(
            outlet_id=request.outlet_id,
            supplier_id=request.supplier_id,
            status=parse_status(request.status),
            start=request.start,
            end=request.end,
            limit=clamp_page_size(request.limit),
            offset=request.offset,
        )

    def to_response(
        self, orders: list[PurchaseOrder], request: ListPurchaseOrdersRequest
    ) -> PurchaseOrderListResponse:
        return PurchaseOrderListResponse(
            purchase_orders=[purchase_order_to_response(po) for po in orders],
            limit=clamp_page_size(request.limit),
            offset=request.offset,
        )
