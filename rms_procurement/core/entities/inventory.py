"""Inventory domain entities."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from rms_procurement.core.entities.common import ZERO, utcnow


class MovementType(str, Enum):
    """Types of stock movements.

    Only PURCHASE is written by this service; the others are carried so the
    ledger can hold movements recorded by consumption, waste and transfer
    modules.
    """

    PURCHASE = "PURCHASE"
    CONSUMPTION = "CONSUMPTION"
    WASTE = "WASTE"
    ADJUSTMENT = "ADJUSTMENT"
    TRANSFER = "TRANSFER"


class InventoryItem(BaseModel):
    """A stocked ingredient or product with running weighted average cost."""

    id: int | None = None
    outlet_id: str
    sku: str
    name: str
    unit_of_measure: str
    current_stock: Decimal = ZERO
    average_cost: Decimal = ZERO  # Weighted Average Cost
    last_cost: Decimal | None = None
    reorder_point: Decimal | None = None
    track_batch: bool = False
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def total_value(self) -> Decimal:
        """Inventory value = current_stock * average_cost."""
        return self.current_stock * self.average_cost

    @property
    def is_low_stock(self) -> bool:
        if self.reorder_point is None:
            return False
        return self.current_stock <= self.reorder_point

    @property
    def is_out_of_stock(self) -> bool:
        return self.current_stock <= ZERO


class StockMovement(BaseModel):
    """One immutable ledger entry. Quantity is signed, positive for inbound."""

    id: int | None = None
    inventory_item_id: int  # FK → inventory_items.id
    movement_type: MovementType
    quantity: Decimal
    unit_cost: Decimal = ZERO
    total_cost: Decimal = ZERO
    reference_type: str | None = None  # e.g. "PO"
    reference_id: str | None = None
    performed_by_employee_id: str | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def is_inbound(self) -> bool:
        return self.quantity > ZERO


class StockBatch(BaseModel):
    """A lot received together, tracked for expiry and traceability."""

    id: int | None = None
    inventory_item_id: int  # FK → inventory_items.id
    batch_number: str
    quantity: Decimal
    received_date: datetime = Field(default_factory=utcnow)
    expiry_date: date | None = None
    unit_cost: Decimal = ZERO
    created_at: datetime = Field(default_factory=utcnow)

    def is_expired(self, today: date) -> bool:
        return self.expiry_date is not None and self.expiry_date < today
