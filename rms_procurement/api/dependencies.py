"""
Dependency injection container for FastAPI.

Provides use case instances to route handlers. Tests replace these
through app.dependency_overrides.
"""

from rms_procurement.application.use_cases import (
    ChangePurchaseOrderStatusUseCase,
    CreateInventoryItemUseCase,
    CreatePurchaseOrderUseCase,
    DeletePurchaseOrderUseCase,
    GetInventoryItemUseCase,
    GetInventoryValuationUseCase,
    GetMovementSummaryUseCase,
    GetPurchaseOrderUseCase,
    GetStockMovementsUseCase,
    ListBatchesUseCase,
    ListExpiringBatchesUseCase,
    ListInventoryItemsUseCase,
    ListPurchaseOrdersUseCase,
    ReceiveGoodsUseCase,
    UpdatePurchaseOrderUseCase,
    VerifyLedgerUseCase,
)


# Purchase order use cases
def get_create_purchase_order_use_case() -> CreatePurchaseOrderUseCase:
    return CreatePurchaseOrderUseCase()


def get_update_purchase_order_use_case() -> UpdatePurchaseOrderUseCase:
    return UpdatePurchaseOrderUseCase()


def get_change_status_use_case() -> ChangePurchaseOrderStatusUseCase:
    return ChangePurchaseOrderStatusUseCase()


def get_delete_purchase_order_use_case() -> DeletePurchaseOrderUseCase:
    return DeletePurchaseOrderUseCase()


def get_get_purchase_order_use_case() -> GetPurchaseOrderUseCase:
    return GetPurchaseOrderUseCase()


def get_list_purchase_orders_use_case() -> ListPurchaseOrdersUseCase:
    return ListPurchaseOrdersUseCase()


def get_receive_goods_use_case() -> ReceiveGoodsUseCase:
    """Receive goods use case wired to the shared GoodsReceiptProcessor."""
    return ReceiveGoodsUseCase()


# Inventory use cases
def get_create_inventory_item_use_case() -> CreateInventoryItemUseCase:
    return CreateInventoryItemUseCase()


def get_get_inventory_item_use_case() -> GetInventoryItemUseCase:
    return GetInventoryItemUseCase()


def get_list_inventory_items_use_case() -> ListInventoryItemsUseCase:
    return ListInventoryItemsUseCase()


def get_stock_movements_use_case() -> GetStockMovementsUseCase:
    return GetStockMovementsUseCase()


def get_list_batches_use_case() -> ListBatchesUseCase:
    return ListBatchesUseCase()


def get_expiring_batches_use_case() -> ListExpiringBatchesUseCase:
    return ListExpiringBatchesUseCase()


def get_verify_ledger_use_case() -> VerifyLedgerUseCase:
    return VerifyLedgerUseCase()


# Report use cases
def get_valuation_use_case() -> GetInventoryValuationUseCase:
    return GetInventoryValuationUseCase()


def get_movement_summary_use_case() -> GetMovementSummaryUseCase:
    return GetMovementSummaryUseCase()
