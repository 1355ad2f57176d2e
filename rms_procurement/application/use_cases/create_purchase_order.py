"""Create Purchase Order Use Case: DRAFT order with numbered header and priced lines."""

from dataclasses import dataclass
from datetime import datetime

from rms_procurement.application.dto.mappers import purchase_order_to_response
from rms_procurement.application.dto.requests import (
    CreatePurchaseOrderRequest,
    PurchaseOrderLineRequest,
)
from rms_procurement.application.dto.responses import PurchaseOrderResponse
from rms_procurement.application.services import UnitOfWorkFactory
from rms_procurement.config import get_logger
from rms_procurement.core.entities import (
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderStatus,
    ZERO,
    utcnow,
)
from rms_procurement.core.exceptions import (
    InvalidQuantityError,
    InventoryItemNotFoundError,
    MissingFieldsError,
    ValidationError,
)
from rms_procurement.core.interfaces import IInventoryStore, IUnitOfWork

logger = get_logger(__name__)

PO_SEQUENCE = "PO"


def format_po_number(created: datetime, seq: int) -> str:
    """PO-{YYYY}-{seq:04d}"""
    return f"PO-{created:%Y}-{seq:04d}"


def validate_lines(lines: list[PurchaseOrderLineRequest]) -> None:
    """Reject empty orders, non-positive quantities and negative prices."""
    if not lines:
        raise MissingFieldsError(["items"])
    for i, line in enumerate(lines):
        if line.quantity <= ZERO:
            raise InvalidQuantityError(f"items[{i}].quantity", line.quantity)
        if line.unit_price < ZERO:
            raise InvalidQuantityError(
                f"items[{i}].unit_price",
                line.unit_price,
                message="must be greater than or equal to 0",
            )
        if line.tax_rate < ZERO:
            raise InvalidQuantityError(
                f"items[{i}].tax_rate",
                line.tax_rate,
                message="must be greater than or equal to 0",
            )


async def build_items(
    inventory: IInventoryStore,
    outlet_id: str,
    lines: list[PurchaseOrderLineRequest],
) -> list[PurchaseOrderItem]:
    """Turn request lines into order lines, checking each item exists in the outlet."""
    items = []
    for i, line in enumerate(lines):
        inv_item = await inventory.get_item(line.inventory_item_id)
        if inv_item is None:
            raise InventoryItemNotFoundError(line.inventory_item_id)
        if inv_item.outlet_id != outlet_id:
            raise ValidationError(
                f"items[{i}].inventory_item_id",
                f"item belongs to outlet '{inv_item.outlet_id}', not '{outlet_id}'",
                value=line.inventory_item_id,
            )
        items.append(
            PurchaseOrderItem(
                inventory_item_id=line.inventory_item_id,
                quantity=line.quantity,
                unit_price=line.unit_price,
                tax_rate=line.tax_rate,
            )
        )
    return items


@dataclass
class CreatePurchaseOrderResult:
    """Result of creating a purchase order."""

    purchase_order: PurchaseOrder


class CreatePurchaseOrderUseCase:
    """Create a DRAFT purchase order."""

    def __init__(self, uow_factory: UnitOfWorkFactory | None = None):
        self._uow_factory = uow_factory

    def _new_uow(self) -> IUnitOfWork:
        if self._uow_factory is None:
            from rms_procurement.application.services import get_unit_of_work_factory

            self._uow_factory = get_unit_of_work_factory()
        return self._uow_factory()

    async def execute(self, request: CreatePurchaseOrderRequest) -> CreatePurchaseOrderResult:
        """Execute create purchase order use case."""
        missing = [
            name
            for name, value in (
                ("supplier_id", request.supplier_id),
                ("outlet_id", request.outlet_id),
            )
            if not value or not value.strip()
        ]
        if not request.items:
            missing.append("items")
        if missing:
            raise MissingFieldsError(missing)
        validate_lines(request.items)

        logger.info(
            "create_purchase_order_started",
            supplier_id=request.supplier_id,
            outlet_id=request.outlet_id,
            lines=len(request.items),
        )

        now = utcnow()
        async with self._new_uow() as uow:
            items = await build_items(uow.inventory, request.outlet_id, request.items)  # type: ignore[arg-type]
            seq = await uow.sequences.next_value(PO_SEQUENCE, f"{now:%Y}")
            po = PurchaseOrder(
                po_number=format_po_number(now, seq),
                supplier_id=request.supplier_id,  # type: ignore[arg-type]
                outlet_id=request.outlet_id,  # type: ignore[arg-type]
                status=PurchaseOrderStatus.DRAFT,
                expected_date=request.expected_date,
                tax_rate=request.tax_rate,
                notes=request.notes,
                items=items,
                created_at=now,
                updated_at=now,
            )
            po = await uow.purchase_orders.create(po)

        logger.info(
            "create_purchase_order_complete",
            po_id=po.id,
            po_number=po.po_number,
            total=str(po.total),
        )
        return CreatePurchaseOrderResult(purchase_order=po)

    def to_response(self, result: CreatePurchaseOrderResult) -> PurchaseOrderResponse:
        """Convert result to API response."""
        return purchase_order_to_response(result.purchase_order)
