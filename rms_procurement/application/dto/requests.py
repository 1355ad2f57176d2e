"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.

Receipt and purchase-order payloads leave business rules (required
fields, positive quantities) to the use cases so callers get the domain
error codes (MISSING_FIELDS, INVALID_QUANTITY) rather than a generic 422.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, Field

# --- Purchase Orders ---


class PurchaseOrderLineRequest(BaseModel):
    """One ordered line."""

    inventory_item_id: int = Field(..., description="Inventory item to order")
    quantity: Decimal = Field(..., description="Quantity ordered (> 0)")
    unit_price: Decimal = Field(..., description="Price per unit (>= 0)")
    tax_rate: Decimal = Field(default=Decimal("0"), description="Line tax rate in percent")


class CreatePurchaseOrderRequest(BaseModel):
    """Request to create a DRAFT purchase order."""

    supplier_id: str | None = Field(default=None, description="Supplier identifier")
    outlet_id: str | None = Field(default=None, description="Receiving outlet identifier")
    items: list[PurchaseOrderLineRequest] = Field(
        default_factory=list,
        description="Ordered lines (at least one)",
    )
    tax_rate: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Tax rate in percent applied to the subtotal",
    )
    expected_date: date | None = Field(default=None, description="Expected delivery date")
    notes: str | None = Field(default=None, description="Free-form notes")


class FullUpdateRequest(BaseModel):
    """Replace editable fields of a DRAFT or PENDING_APPROVAL order.

    Omitted fields are left unchanged; `items`, when given, replaces all lines.
    """

    kind: Literal["full"] = "full"
    items: list[PurchaseOrderLineRequest] | None = Field(
        default=None, description="New set of lines"
    )
    tax_rate: Decimal | None = Field(default=None, ge=0, description="Tax rate in percent")
    expected_date: date | None = Field(default=None, description="Expected delivery date")
    notes: str | None = Field(default=None, description="Free-form notes")


StatusAction = Literal["submit", "approve", "return_to_draft", "send", "cancel"]


class StatusActionRequest(BaseModel):
    """Move an order through its workflow."""

    kind: Literal["status"] = "status"
    action: StatusAction = Field(..., description="Workflow action")
    employee_id: str | None = Field(
        default=None,
        description="Employee performing the action (recorded as approver on approve)",
    )


PurchaseOrderUpdate = Annotated[
    FullUpdateRequest | StatusActionRequest,
    Field(discriminator="kind"),
]


class ListPurchaseOrdersRequest(BaseModel):
    """Filters for listing purchase orders."""

    outlet_id: str | None = None
    supplier_id: str | None = None
    status: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    limit: int = Field(default=50, ge=1)
    offset: int = Field(default=0, ge=0)


# --- Goods Receipts ---


class ReceiveGoodsLineRequest(BaseModel):
    """Quantity received against one order line."""

    purchase_order_item_id: int = Field(..., description="Purchase order line ID")
    quantity_received: Decimal = Field(..., description="Quantity received (> 0)")
    batch_number: str | None = Field(default=None, description="Supplier lot number")
    expiry_date: date | None = Field(default=None, description="Lot expiry date")


class ReceiveGoodsRequest(BaseModel):
    """Request to receive goods against a purchase order."""

    received_by_employee_id: str | None = Field(
        default=None, description="Employee receiving the delivery"
    )
    items: list[ReceiveGoodsLineRequest] = Field(
        default_factory=list, description="Lines received"
    )
    notes: str | None = Field(default=None, description="Delivery notes")


# --- Inventory ---


class CreateInventoryItemRequest(BaseModel):
    """Request to create an inventory item with zero stock."""

    outlet_id: str = Field(..., min_length=1, description="Outlet identifier")
    sku: str = Field(..., min_length=1, description="Stock keeping unit, unique per outlet")
    name: str = Field(..., min_length=1, description="Item name")
    unit_of_measure: str = Field(..., min_length=1, description="e.g. kg, l, pcs")
    reorder_point: Decimal | None = Field(default=None, ge=0, description="Low stock threshold")
    track_batch: bool = Field(default=False, description="Record lots on receipt")


class StockMovementQuery(BaseModel):
    """Filters for an item's stock movements."""

    start: datetime | None = None
    end: datetime | None = None
    movement_type: str | None = None
    limit: int = Field(default=50, ge=1)
    offset: int = Field(default=0, ge=0)
