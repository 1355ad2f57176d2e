"""Purchase order domain entities."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from rms_procurement.core.entities.common import ZERO, utcnow

HUNDRED = Decimal("100")


class PurchaseOrderStatus(str, Enum):
    """Purchase order lifecycle states."""

    DRAFT = "DRAFT"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"
    SENT = "SENT"
    PARTIALLY_RECEIVED = "PARTIALLY_RECEIVED"
    RECEIVED = "RECEIVED"
    CANCELLED = "CANCELLED"


class PurchaseOrderItem(BaseModel):
    """A single ordered line on a purchase order."""

    id: int | None = None
    purchase_order_id: int | None = None
    inventory_item_id: int  # FK → inventory_items.id
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal = ZERO  # percent
    line_total: Decimal = ZERO  # quantity * unit_price
    received_qty: Decimal = ZERO

    @model_validator(mode="after")
    def compute_line(self) -> "PurchaseOrderItem":
        self.line_total = self.quantity * self.unit_price
        return self

    @property
    def remaining_qty(self) -> Decimal:
        return self.quantity - self.received_qty

    @property
    def is_fully_received(self) -> bool:
        return self.received_qty >= self.quantity


class PurchaseOrder(BaseModel):
    """A commitment to buy a set of items from one supplier for one outlet."""

    id: int | None = None
    po_number: str | None = None
    supplier_id: str
    outlet_id: str
    status: PurchaseOrderStatus = PurchaseOrderStatus.DRAFT
    expected_date: date | None = None
    tax_rate: Decimal = ZERO  # percent applied to the subtotal
    subtotal: Decimal = ZERO
    tax_amount: Decimal = ZERO
    total: Decimal = ZERO
    notes: str | None = None
    approved_by_employee_id: str | None = None
    approved_at: datetime | None = None
    sent_at: datetime | None = None
    received_date: datetime | None = None
    items: list[PurchaseOrderItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def compute_totals(self) -> "PurchaseOrder":
        """Compute subtotal, tax_amount and total from the lines."""
        return self.recalculate_totals()

    def recalculate_totals(self) -> "PurchaseOrder":
        if self.items:
            self.subtotal = sum((i.line_total for i in self.items), ZERO)
        self.tax_amount = self.subtotal * self.tax_rate / HUNDRED
        self.total = self.subtotal + self.tax_amount
        return self

    def get_item(self, item_id: int) -> PurchaseOrderItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None
