"""Goods receipt (GRN) domain entities.

A goods receipt is the audit record of one physical delivery against a
purchase order. It is written once and never changed.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from rms_procurement.core.entities.common import ZERO, utcnow


class GoodsReceiptItem(BaseModel):
    """Quantity received against one purchase order line."""

    id: int | None = None
    goods_receipt_id: int | None = None
    purchase_order_item_id: int  # FK → purchase_order_items.id
    quantity_received: Decimal
    batch_number: str | None = None
    expiry_date: date | None = None


class GoodsReceipt(BaseModel):
    """Goods Receipt Note header with its lines."""

    id: int | None = None
    grn_number: str
    purchase_order_id: int  # FK → purchase_orders.id
    received_by_employee_id: str
    received_date: datetime = Field(default_factory=utcnow)
    notes: str | None = None
    items: list[GoodsReceiptItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def total_quantity(self) -> Decimal:
        return sum((i.quantity_received for i in self.items), ZERO)
