"""Application use cases."""

from rms_procurement.application.use_cases.change_purchase_order_status import (
    ACTION_TARGETS,
    ChangePurchaseOrderStatusUseCase,
    ChangeStatusResult,
)
from rms_procurement.application.use_cases.create_purchase_order import (
    CreatePurchaseOrderResult,
    CreatePurchaseOrderUseCase,
)
from rms_procurement.application.use_cases.delete_purchase_order import (
    DeletePurchaseOrderUseCase,
)
from rms_procurement.application.use_cases.get_purchase_order import (
    GetPurchaseOrderResult,
    GetPurchaseOrderUseCase,
)
from rms_procurement.application.use_cases.inventory_items import (
    CreateInventoryItemUseCase,
    GetInventoryItemUseCase,
    ListInventoryItemsUseCase,
)
from rms_procurement.application.use_cases.inventory_reports import (
    GetInventoryValuationUseCase,
    GetMovementSummaryUseCase,
    GetStockMovementsUseCase,
    ListBatchesUseCase,
    ListExpiringBatchesUseCase,
    VerifyLedgerUseCase,
)
from rms_procurement.application.use_cases.list_purchase_orders import (
    ListPurchaseOrdersUseCase,
)
from rms_procurement.application.use_cases.receive_goods import ReceiveGoodsUseCase
from rms_procurement.application.use_cases.update_purchase_order import (
    UpdatePurchaseOrderResult,
    UpdatePurchaseOrderUseCase,
)

__all__ = [
    # Purchase orders
    "CreatePurchaseOrderUseCase",
    "CreatePurchaseOrderResult",
    "UpdatePurchaseOrderUseCase",
    "UpdatePurchaseOrderResult",
    "ChangePurchaseOrderStatusUseCase",
    "ChangeStatusResult",
    "ACTION_TARGETS",
    "DeletePurchaseOrderUseCase",
    "GetPurchaseOrderUseCase",
    "GetPurchaseOrderResult",
    "ListPurchaseOrdersUseCase",
    # Receiving
    "ReceiveGoodsUseCase",
    # Inventory
    "CreateInventoryItemUseCase",
    "GetInventoryItemUseCase",
    "ListInventoryItemsUseCase",
    # Reports
    "GetInventoryValuationUseCase",
    "GetStockMovementsUseCase",
    "GetMovementSummaryUseCase",
    "VerifyLedgerUseCase",
    "ListBatchesUseCase",
    "ListExpiringBatchesUseCase",
]
