"""
Goods receipt processor.

Receiving goods is the only operation that adds stock. One call validates
the request against the purchase order, writes the goods receipt note
(GRN), applies every line to the ledger, records batches, advances the
order lines and derives the new order status, all inside one
write-locked unit of work. Either everything commits or nothing does.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from rms_procurement.config import get_logger
from rms_procurement.core.entities.common import ZERO, utcnow
from rms_procurement.core.entities.goods_receipt import GoodsReceipt, GoodsReceiptItem
from rms_procurement.core.entities.inventory import InventoryItem, StockBatch, StockMovement
from rms_procurement.core.entities.purchase_order import PurchaseOrder, PurchaseOrderItem
from rms_procurement.core.exceptions import (
    InvalidQuantityError,
    LineNotFoundError,
    MissingFieldsError,
    OverReceiptError,
    PurchaseOrderNotFoundError,
    RMSError,
    TransactionFailedError,
)
from rms_procurement.core.interfaces.unit_of_work import IUnitOfWork
from rms_procurement.core.services.inventory_ledger import InventoryLedger
from rms_procurement.core.services.purchase_order_state_machine import (
    RECEIVABLE_STATUSES,
    PurchaseOrderStateMachine,
)
from rms_procurement.core.services.stock_batch_tracker import StockBatchTracker

logger = get_logger(__name__)

GRN_SEQUENCE = "GRN"


def format_grn_number(received: datetime, seq: int) -> str:
    """GRN-{YYYY}{MM}-{seq:04d}"""
    return f"GRN-{received:%Y%m}-{seq:04d}"


@dataclass
class ReceiptLine:
    """One requested receipt line."""

    purchase_order_item_id: int
    quantity_received: Decimal
    batch_number: str | None = None
    expiry_date: date | None = None


@dataclass
class ReceiveGoodsResult:
    """Everything written by one receipt."""

    receipt: GoodsReceipt
    purchase_order: PurchaseOrder
    movements: list[StockMovement] = field(default_factory=list)
    batches: list[StockBatch] = field(default_factory=list)
    items: list[InventoryItem] = field(default_factory=list)


class GoodsReceiptProcessor:
    """Orchestrates the atomic goods receipt transaction."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        timeout_seconds: float | None = None,
        state_machine: PurchaseOrderStateMachine | None = None,
    ):
        self._uow_factory = uow_factory
        self._timeout_seconds = timeout_seconds
        self._state_machine = state_machine or PurchaseOrderStateMachine()

    async def receive_goods(
        self,
        po_id: int,
        received_by_employee_id: str,
        items: list[ReceiptLine],
        notes: str | None = None,
    ) -> ReceiveGoodsResult:
        """
        Receive goods against a purchase order.

        Raises:
            MissingFieldsError: No employee id or no lines.
            PurchaseOrderNotFoundError: Unknown purchase order.
            InvalidPOStateError: Order is not SENT or PARTIALLY_RECEIVED.
            LineNotFoundError: A line does not belong to the order.
            InvalidQuantityError: A quantity is not positive.
            OverReceiptError: A line would exceed its ordered quantity.
            ConcurrencyConflictError: The write lock could not be obtained.
            TransactionFailedError: Anything else went wrong; nothing was written.
        """
        missing = []
        if not received_by_employee_id or not received_by_employee_id.strip():
            missing.append("received_by_employee_id")
        if not items:
            missing.append("items")
        if missing:
            raise MissingFieldsError(missing)

        logger.info(
            "goods_receipt_started",
            po_id=po_id,
            employee_id=received_by_employee_id,
            lines=len(items),
        )

        try:
            async with asyncio.timeout(self._timeout_seconds):
                async with self._uow_factory() as uow:
                    result = await self._receive(
                        uow, po_id, received_by_employee_id, items, notes
                    )
        except RMSError as e:
            logger.warning("goods_receipt_rejected", po_id=po_id, code=e.code)
            raise
        except TimeoutError as e:
            logger.error(
                "goods_receipt_timeout", po_id=po_id, timeout=self._timeout_seconds
            )
            raise TransactionFailedError(
                "receive_goods", f"timed out after {self._timeout_seconds}s"
            ) from e
        except Exception as e:
            logger.error("goods_receipt_failed", po_id=po_id, error=str(e))
            raise TransactionFailedError("receive_goods", str(e)) from e

        logger.info(
            "goods_receipt_created",
            po_id=po_id,
            grn_number=result.receipt.grn_number,
            receipt_id=result.receipt.id,
            po_status=result.purchase_order.status.value,
            movements=len(result.movements),
            batches=len(result.batches),
        )
        return result

    async def _receive(
        self,
        uow: IUnitOfWork,
        po_id: int,
        employee_id: str,
        lines: list[ReceiptLine],
        notes: str | None,
    ) -> ReceiveGoodsResult:
        po = await uow.purchase_orders.get(po_id)
        if po is None:
            raise PurchaseOrderNotFoundError(po_id)
        self._state_machine.ensure_status(po, RECEIVABLE_STATUSES, "receive goods against")
        matched = self._validate_lines(po, lines)

        now = utcnow()
        seq = await uow.sequences.next_value(GRN_SEQUENCE, f"{now:%Y%m}")
        receipt = GoodsReceipt(
            grn_number=format_grn_number(now, seq),
            purchase_order_id=po_id,
            received_by_employee_id=employee_id,
            received_date=now,
            notes=notes,
            items=[
                GoodsReceiptItem(
                    purchase_order_item_id=line.purchase_order_item_id,
                    quantity_received=line.quantity_received,
                    batch_number=line.batch_number,
                    expiry_date=line.expiry_date,
                )
                for line in lines
            ],
            created_at=now,
        )
        receipt = await uow.goods_receipts.create(receipt)

        ledger = InventoryLedger(uow.inventory)
        tracker = StockBatchTracker(uow.batches)
        result = ReceiveGoodsResult(receipt=receipt, purchase_order=po)

        for line, po_line in matched:
            item, movement = await ledger.apply_receipt(
                po_line.inventory_item_id,
                line.quantity_received,
                po_line.unit_price,
                performed_by=employee_id,
                reference_id=str(po_id),
                notes=f"Received via {receipt.grn_number}",
            )
            result.movements.append(movement)
            result.items.append(item)

            batch = await tracker.record_batch(
                item,
                line.batch_number,
                line.quantity_received,
                line.expiry_date,
                po_line.unit_price,
                received_date=now,
            )
            if batch is not None:
                result.batches.append(batch)

            po_line.received_qty = await uow.purchase_orders.increment_received_qty(
                po_line.id, line.quantity_received  # type: ignore[arg-type]
            )

        new_status = self._state_machine.derive_status_after_receipt(po)
        if new_status != po.status:
            self._state_machine.transition(po, new_status, employee_id, now=now)
        po.updated_at = now
        await uow.purchase_orders.update(po)

        return result

    @staticmethod
    def _validate_lines(
        po: PurchaseOrder, lines: list[ReceiptLine]
    ) -> list[tuple[ReceiptLine, PurchaseOrderItem]]:
        """Check every line before anything is written. Repeated lines are summed."""
        requested: dict[int, Decimal] = {}
        matched = []
        for line in lines:
            po_line = po.get_item(line.purchase_order_item_id)
            if po_line is None:
                raise LineNotFoundError(po.id, line.purchase_order_item_id)  # type: ignore[arg-type]
            if line.quantity_received <= ZERO:
                raise InvalidQuantityError("quantity_received", line.quantity_received)

            total = requested.get(line.purchase_order_item_id, ZERO) + line.quantity_received
            if po_line.received_qty + total > po_line.quantity:
                raise OverReceiptError(
                    line_id=line.purchase_order_item_id,
                    ordered=po_line.quantity,
                    already_received=po_line.received_qty,
                    requested=total,
                )
            requested[line.purchase_order_item_id] = total
            matched.append((line, po_line))
        return matched
