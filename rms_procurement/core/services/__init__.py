"""
Core business logic services.

Layer-pure services that depend only on:
- rms_procurement/core/entities/*
- rms_procurement/core/interfaces/*
- rms_procurement/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from rms_procurement.core.services.goods_receipt_processor import (
    GoodsReceiptProcessor,
    ReceiptLine,
    ReceiveGoodsResult,
    format_grn_number,
)
from rms_procurement.core.services.inventory_ledger import (
    COST_QUANTUM,
    InventoryLedger,
    LedgerState,
    LedgerVerification,
    weighted_average_cost,
)
from rms_procurement.core.services.purchase_order_state_machine import (
    ALLOWED_TRANSITIONS,
    EDITABLE_STATUSES,
    RECEIVABLE_STATUSES,
    PurchaseOrderStateMachine,
)
from rms_procurement.core.services.stock_batch_tracker import StockBatchTracker

__all__ = [
    # Ledger
    "InventoryLedger",
    "LedgerState",
    "LedgerVerification",
    "COST_QUANTUM",
    "weighted_average_cost",
    # Batches
    "StockBatchTracker",
    # Workflow
    "PurchaseOrderStateMachine",
    "ALLOWED_TRANSITIONS",
    "RECEIVABLE_STATUSES",
    "EDITABLE_STATUSES",
    # Receiving
    "GoodsReceiptProcessor",
    "ReceiptLine",
    "ReceiveGoodsResult",
    "format_grn_number",
]
