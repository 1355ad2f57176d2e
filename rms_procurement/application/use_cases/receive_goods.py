"""Receive Goods Use Case: atomic GRN, ledger and order update."""

from rms_procurement.application.dto.mappers import (
    batch_to_response,
    movement_to_response,
    purchase_order_to_response,
    receipt_to_response,
)
from rms_procurement.application.dto.requests import ReceiveGoodsRequest
from rms_procurement.application.dto.responses import ReceiveGoodsResponse
from rms_procurement.config import get_logger
from rms_procurement.core.services import (
    GoodsReceiptProcessor,
    ReceiptLine,
    ReceiveGoodsResult,
)

logger = get_logger(__name__)


class ReceiveGoodsUseCase:
    """Receive a delivery against a SENT or PARTIALLY_RECEIVED purchase order."""

    def __init__(self, processor: GoodsReceiptProcessor | None = None):
        self._processor = processor

    def _get_processor(self) -> GoodsReceiptProcessor:
        if self._processor is None:
            from rms_procurement.application.services import get_goods_receipt_processor

            self._processor = get_goods_receipt_processor()
        return self._processor

    async def execute(self, po_id: int, request: ReceiveGoodsRequest) -> ReceiveGoodsResult:
        """Execute receive goods use case."""
        lines = [
            ReceiptLine(
                purchase_order_item_id=line.purchase_order_item_id,
                quantity_received=line.quantity_received,
                batch_number=line.batch_number,
                expiry_date=line.expiry_date,
            )
            for line in request.items
        ]
        return await self._get_processor().receive_goods(
            po_id=po_id,
            received_by_employee_id=request.received_by_employee_id or "",
            items=lines,
            notes=request.notes,
        )

    def to_response(self, result: ReceiveGoodsResult) -> ReceiveGoodsResponse:
        """Convert result to API response."""
        return ReceiveGoodsResponse(
            receipt=receipt_to_response(result.receipt),
            purchase_order=purchase_order_to_response(result.purchase_order),
            movements=[movement_to_response(m) for m in result.movements],
            batches=[batch_to_response(b) for b in result.batches],
        )
