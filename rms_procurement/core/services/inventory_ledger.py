"""
Inventory ledger service.

Owns the stock and weighted average cost (WAC) of inventory items and
appends the immutable stock movements that explain them. The service runs
on whatever store it is given; goods receipts hand it the inventory store
of their unit of work so the item update and the movement append commit
together.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from rms_procurement.config import get_logger
from rms_procurement.core.entities.common import ZERO, utcnow
from rms_procurement.core.entities.inventory import (
    InventoryItem,
    MovementType,
    StockMovement,
)
from rms_procurement.core.exceptions import (
    InvalidQuantityError,
    InventoryItemNotFoundError,
)
from rms_procurement.core.interfaces.inventory_store import IInventoryStore

logger = get_logger(__name__)

# Average cost precision
COST_QUANTUM = Decimal("0.000001")


def weighted_average_cost(
    current_stock: Decimal,
    average_cost: Decimal,
    quantity: Decimal,
    unit_cost: Decimal,
) -> Decimal:
    """(stock * avg + qty * cost) / (stock + qty), quantized to COST_QUANTUM."""
    total_qty = current_stock + quantity
    if total_qty <= ZERO:
        return unit_cost.quantize(COST_QUANTUM, rounding=ROUND_HALF_UP)
    value = current_stock * average_cost + quantity * unit_cost
    return (value / total_qty).quantize(COST_QUANTUM, rounding=ROUND_HALF_UP)


@dataclass
class LedgerState:
    """Stock and cost position of one item."""

    current_stock: Decimal = ZERO
    average_cost: Decimal = ZERO
    last_cost: Decimal | None = None
    movement_count: int = 0


@dataclass
class LedgerVerification:
    """Stored item state compared with the state replayed from its movements."""

    inventory_item_id: int
    stored: LedgerState
    replayed: LedgerState
    mismatches: list[str] = field(default_factory=list)

    @property
    def consistent(self) -> bool:
        return not self.mismatches


class InventoryLedger:
    """Applies inbound stock to inventory items and records the movements."""

    def __init__(self, inventory_store: IInventoryStore):
        self._inventory_store = inventory_store

    async def apply_receipt(
        self,
        inventory_item_id: int,
        quantity_received: Decimal,
        unit_cost: Decimal,
        performed_by: str | None,
        reference_id: str | None,
        notes: str | None = None,
        reference_type: str = "PO",
    ) -> tuple[InventoryItem, StockMovement]:
        """
        Receive stock into an item at a unit cost.

        Recomputes the weighted average cost, sets last cost, increments
        stock and appends one PURCHASE movement.

        Raises:
            InvalidQuantityError: If quantity <= 0 or unit cost < 0.
            InventoryItemNotFoundError: If the item does not exist.
        """
        if quantity_received <= ZERO:
            raise InvalidQuantityError("quantity_received", quantity_received)
        if unit_cost < ZERO:
            raise InvalidQuantityError(
                "unit_cost", unit_cost, message="must be greater than or equal to 0"
            )

        item = await self._inventory_store.get_item(inventory_item_id)
        if item is None:
            raise InventoryItemNotFoundError(inventory_item_id)

        old_stock = item.current_stock
        old_avg = item.average_cost

        item.average_cost = weighted_average_cost(
            old_stock, old_avg, quantity_received, unit_cost
        )
        item.current_stock = old_stock + quantity_received
        item.last_cost = unit_cost
        item.updated_at = utcnow()
        item = await self._inventory_store.update_item(item)

        movement = StockMovement(
            inventory_item_id=inventory_item_id,
            movement_type=MovementType.PURCHASE,
            quantity=quantity_received,
            unit_cost=unit_cost,
            total_cost=quantity_received * unit_cost,
            reference_type=reference_type,
            reference_id=reference_id,
            performed_by_employee_id=performed_by,
            notes=notes,
        )
        movement = await self._inventory_store.add_movement(movement)

        logger.info(
            "stock_receipt_applied",
            item_id=inventory_item_id,
            quantity=quantity_received,
            unit_cost=unit_cost,
            old_stock=old_stock,
            new_stock=item.current_stock,
            old_avg=old_avg,
            new_avg=item.average_cost,
        )
        return item, movement

    @staticmethod
    def replay(movements: list[StockMovement]) -> LedgerState:
        """
        Rebuild an item's stock and cost from its movements, oldest first.

        Inbound movements apply the weighted average formula; outbound
        movements reduce stock at the current average.
        """
        state = LedgerState()
        for movement in movements:
            if movement.quantity > ZERO:
                state.average_cost = weighted_average_cost(
                    state.current_stock,
                    state.average_cost,
                    movement.quantity,
                    movement.unit_cost,
                )
                state.last_cost = movement.unit_cost
            state.current_stock += movement.quantity
            state.movement_count += 1
        return state

    async def verify_item(self, inventory_item_id: int) -> LedgerVerification:
        """Compare an item's stored stock and cost with its replayed ledger."""
        item = await self._inventory_store.get_item(inventory_item_id)
        if item is None:
            raise InventoryItemNotFoundError(inventory_item_id)

        movements = await self._inventory_store.get_all_movements(inventory_item_id)
        replayed = self.replay(movements)
        stored = LedgerState(
            current_stock=item.current_stock,
            average_cost=item.average_cost,
            last_cost=item.last_cost,
            movement_count=len(movements),
        )

        mismatches = []
        if stored.current_stock != replayed.current_stock:
            mismatches.append("current_stock")
        if stored.average_cost != replayed.average_cost:
            mismatches.append("average_cost")
        if stored.current_stock < ZERO:
            mismatches.append("negative_stock")

        verification = LedgerVerification(
            inventory_item_id=inventory_item_id,
            stored=stored,
            replayed=replayed,
            mismatches=mismatches,
        )
        if mismatches:
            logger.warning(
                "ledger_mismatch",
                item_id=inventory_item_id,
                mismatches=mismatches,
                stored_stock=stored.current_stock,
                replayed_stock=replayed.current_stock,
            )
        return verification
