"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.

Quantities and money are Decimal and serialize as strings in JSON.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from rms_procurement.core.entities.common import utcnow


class ComponentHealthResponse(BaseModel):
    """Dependency health status."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ComponentHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. OVER_RECEIPT)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    details: dict[str, Any] = Field(default_factory=dict, description="Structured error context")
    timestamp: datetime = Field(default_factory=utcnow)


# --- Inventory ---


class InventoryItemResponse(BaseModel):
    """Inventory item response DTO."""

    id: int
    outlet_id: str
    sku: str
    name: str
    unit_of_measure: str
    current_stock: Decimal
    average_cost: Decimal
    last_cost: Decimal | None = None
    reorder_point: Decimal | None = None
    track_batch: bool
    is_active: bool
    total_value: Decimal
    is_low_stock: bool
    created_at: datetime
    updated_at: datetime


class InventoryItemListResponse(BaseModel):
    items: list[InventoryItemResponse]
    total: int


class StockMovementResponse(BaseModel):
    """Stock movement response DTO."""

    id: int
    inventory_item_id: int
    movement_type: str
    quantity: Decimal
    unit_cost: Decimal
    total_cost: Decimal
    reference_type: str | None = None
    reference_id: str | None = None
    performed_by_employee_id: str | None = None
    notes: str | None = None
    created_at: datetime


class StockMovementListResponse(BaseModel):
    inventory_item_id: int
    movements: list[StockMovementResponse]
    limit: int
    offset: int


class StockBatchResponse(BaseModel):
    """Stock batch (lot) response DTO."""

    id: int
    inventory_item_id: int
    batch_number: str
    quantity: Decimal
    received_date: datetime
    expiry_date: date | None = None
    unit_cost: Decimal
    is_expired: bool = False


class StockBatchListResponse(BaseModel):
    batches: list[StockBatchResponse]
    total: int


class LedgerVerificationResponse(BaseModel):
    """Stored item state compared with its replayed movement ledger."""

    inventory_item_id: int
    consistent: bool
    movement_count: int
    stored_stock: Decimal
    replayed_stock: Decimal
    stored_average_cost: Decimal
    replayed_average_cost: Decimal
    mismatches: list[str] = Field(default_factory=list)


# --- Purchase Orders ---


class PurchaseOrderItemResponse(BaseModel):
    """Purchase order line response DTO."""

    id: int
    inventory_item_id: int
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal
    line_total: Decimal
    received_qty: Decimal
    remaining_qty: Decimal


class GoodsReceiptItemResponse(BaseModel):
    id: int
    purchase_order_item_id: int
    quantity_received: Decimal
    batch_number: str | None = None
    expiry_date: date | None = None


class GoodsReceiptResponse(BaseModel):
    """Goods receipt note (GRN) response DTO."""

    id: int
    grn_number: str
    purchase_order_id: int
    received_by_employee_id: str
    received_date: datetime
    notes: str | None = None
    items: list[GoodsReceiptItemResponse]


class PurchaseOrderResponse(BaseModel):
    """Purchase order response DTO. `receipts` is filled on single-order reads."""

    id: int
    po_number: str
    supplier_id: str
    outlet_id: str
    status: str
    expected_date: date | None = None
    tax_rate: Decimal
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal
    notes: str | None = None
    approved_by_employee_id: str | None = None
    approved_at: datetime | None = None
    sent_at: datetime | None = None
    received_date: datetime | None = None
    items: list[PurchaseOrderItemResponse]
    receipts: list[GoodsReceiptResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class PurchaseOrderListResponse(BaseModel):
    purchase_orders: list[PurchaseOrderResponse]
    limit: int
    offset: int


class ReceiveGoodsResponse(BaseModel):
    """Result of a goods receipt."""

    receipt: GoodsReceiptResponse
    purchase_order: PurchaseOrderResponse
    movements: list[StockMovementResponse]
    batches: list[StockBatchResponse] = Field(default_factory=list)


# --- Reports ---


class InventoryValuationResponse(BaseModel):
    """Stock value of an outlet at average cost."""

    outlet_id: str | None = None
    total_items: int
    total_value: Decimal
    low_stock_count: int
    out_of_stock_count: int
    items: list[InventoryItemResponse]


class MovementTypeSummaryResponse(BaseModel):
    movement_type: str
    count: int
    total_quantity: Decimal = Field(..., description="Sum of absolute quantities")
    total_cost: Decimal


class MovementSummaryResponse(BaseModel):
    """Movements of an outlet grouped by type, with the most recent entries."""

    outlet_id: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    total_movements: int
    by_type: list[MovementTypeSummaryResponse]
    recent: list[StockMovementResponse]
