"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from rms_procurement.application.dto.requests import (
    CreateInventoryItemRequest,
    CreatePurchaseOrderRequest,
    FullUpdateRequest,
    ListPurchaseOrdersRequest,
    PurchaseOrderLineRequest,
    PurchaseOrderUpdate,
    ReceiveGoodsLineRequest,
    ReceiveGoodsRequest,
    StatusActionRequest,
    StockMovementQuery,
)
from rms_procurement.application.dto.responses import (
    ErrorResponse,
    GoodsReceiptResponse,
    HealthResponse,
    InventoryItemListResponse,
    InventoryItemResponse,
    InventoryValuationResponse,
    LedgerVerificationResponse,
    MovementSummaryResponse,
    PurchaseOrderListResponse,
    PurchaseOrderResponse,
    ReceiveGoodsResponse,
    StockBatchListResponse,
    StockMovementListResponse,
)

__all__ = [
    # Requests
    "CreatePurchaseOrderRequest",
    "PurchaseOrderLineRequest",
    "FullUpdateRequest",
    "StatusActionRequest",
    "PurchaseOrderUpdate",
    "ListPurchaseOrdersRequest",
    "ReceiveGoodsRequest",
    "ReceiveGoodsLineRequest",
    "CreateInventoryItemRequest",
    "StockMovementQuery",
    # Responses
    "PurchaseOrderResponse",
    "PurchaseOrderListResponse",
    "GoodsReceiptResponse",
    "ReceiveGoodsResponse",
    "InventoryItemResponse",
    "InventoryItemListResponse",
    "StockMovementListResponse",
    "StockBatchListResponse",
    "LedgerVerificationResponse",
    "InventoryValuationResponse",
    "MovementSummaryResponse",
    "HealthResponse",
    "ErrorResponse",
]
