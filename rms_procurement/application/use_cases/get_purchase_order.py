"""Get Purchase Order Use Case: order with lines and goods receipts."""

from dataclasses import dataclass, field

from rms_procurement.application.dto.mappers import purchase_order_to_response
from rms_procurement.application.dto.responses import PurchaseOrderResponse
from rms_procurement.config import get_logger
from rms_procurement.core.entities import GoodsReceipt, PurchaseOrder
from rms_procurement.core.exceptions import PurchaseOrderNotFoundError
from rms_procurement.core.interfaces import IGoodsReceiptStore, IPurchaseOrderStore

logger = get_logger(__name__)


@dataclass
class GetPurchaseOrderResult:
    purchase_order: PurchaseOrder
    receipts: list[GoodsReceipt] = field(default_factory=list)


class GetPurchaseOrderUseCase:
    """Read a purchase order together with its receipts. Read-only."""

    def __init__(
        self,
        purchase_order_store: IPurchaseOrderStore | None = None,
        goods_receipt_store: IGoodsReceiptStore | None = None,
    ):
        self._purchase_order_store = purchase_order_store
        self._goods_receipt_store = goods_receipt_store

    async def _get_purchase_order_store(self) -> IPurchaseOrderStore:
        if self._purchase_order_store is None:
            from rms_procurement.infrastructure.storage.sqlite import get_purchase_order_store

            self._purchase_order_store = await get_purchase_order_store()
        return self._purchase_order_store

    async def _get_goods_receipt_store(self) -> IGoodsReceiptStore:
        if self._goods_receipt_store is None:
            from rms_procurement.infrastructure.storage.sqlite import get_goods_receipt_store

            self._goods_receipt_store = await get_goods_receipt_store()
        return self._goods_receipt_store

    async def execute(self, po_id: int) -> GetPurchaseOrderResult:
        po_store = await self._get_purchase_order_store()
        po = await po_store.get(po_id)
        if po is None:
            raise PurchaseOrderNotFoundError(po_id)

        receipt_store = await self._get_goods_receipt_store()
        receipts = await receipt_store.list_for_po(po_id)
        return GetPurchaseOrderResult(purchase_order=po, receipts=receipts)

    def to_response(self, result: GetPurchaseOrderResult) -> PurchaseOrderResponse:
        """Convert result to API response."""
        return purchase_order_to_response(result.purchase_order, result.receipts)
