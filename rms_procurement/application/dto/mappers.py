"""Entity → response DTO conversion shared by the use cases."""

from datetime import date

from rms_procurement.application.dto.responses import (
    GoodsReceiptItemResponse,
    GoodsReceiptResponse,
    InventoryItemResponse,
    PurchaseOrderItemResponse,
    PurchaseOrderResponse,
    StockBatchResponse,
    StockMovementResponse,
)
from rms_procurement.core.entities import (
    GoodsReceipt,
    InventoryItem,
    PurchaseOrder,
    StockBatch,
    StockMovement,
)


def item_to_response(item: InventoryItem) -> InventoryItemResponse:
    return InventoryItemResponse(
        id=item.id,  # type: ignore[arg-type]
        outlet_id=item.outlet_id,
        sku=item.sku,
        name=item.name,
        unit_of_measure=item.unit_of_measure,
        current_stock=item.current_stock,
        average_cost=item.average_cost,
        last_cost=item.last_cost,
        reorder_point=item.reorder_point,
        track_batch=item.track_batch,
        is_active=item.is_active,
        total_value=item.total_value,
        is_low_stock=item.is_low_stock,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def movement_to_response(movement: StockMovement) -> StockMovementResponse:
    return StockMovementResponse(
        id=movement.id,  # type: ignore[arg-type]
        inventory_item_id=movement.inventory_item_id,
        movement_type=movement.movement_type.value,
        quantity=movement.quantity,
        unit_cost=movement.unit_cost,
        total_cost=movement.total_cost,
        reference_type=movement.reference_type,
        reference_id=movement.reference_id,
        performed_by_employee_id=movement.performed_by_employee_id,
        notes=movement.notes,
        created_at=movement.created_at,
    )


def batch_to_response(batch: StockBatch, today: date | None = None) -> StockBatchResponse:
    return StockBatchResponse(
        id=batch.id,  # type: ignore[arg-type]
        inventory_item_id=batch.inventory_item_id,
        batch_number=batch.batch_number,
        quantity=batch.quantity,
        received_date=batch.received_date,
        expiry_date=batch.expiry_date,
        unit_cost=batch.unit_cost,
        is_expired=batch.is_expired(today) if today else False,
    )


def receipt_to_response(receipt: GoodsReceipt) -> GoodsReceiptResponse:
    return GoodsReceiptResponse(
        id=receipt.id,  # type: ignore[arg-type]
        grn_number=receipt.grn_number,
        purchase_order_id=receipt.purchase_order_id,
        received_by_employee_id=receipt.received_by_employee_id,
        received_date=receipt.received_date,
        notes=receipt.notes,
        items=[
            GoodsReceiptItemResponse(
                id=line.id,  # type: ignore[arg-type]
                purchase_order_item_id=line.purchase_order_item_id,
                quantity_received=line.quantity_received,
                batch_number=line.batch_number,
                expiry_date=line.expiry_date,
            )
            for line in receipt.items
        ],
    )


def purchase_order_to_response(
    po: PurchaseOrder, receipts: list[GoodsReceipt] | None = None
) -> PurchaseOrderResponse:
    return PurchaseOrderResponse(
        id=po.id,  # type: ignore[arg-type]
        po_number=po.po_number or "",
        supplier_id=po.supplier_id,
        outlet_id=po.outlet_id,
        status=po.status.value,
        expected_date=po.expected_date,
        tax_rate=po.tax_rate,
        subtotal=po.subtotal,
        tax_amount=po.tax_amount,
        total=po.total,
        notes=po.notes,
        approved_by_employee_id=po.approved_by_employee_id,
        approved_at=po.approved_at,
        sent_at=po.sent_at,
        received_date=po.received_date,
        items=[
            PurchaseOrderItemResponse(
                id=line.id,  # type: ignore[arg-type]
                inventory_item_id=line.inventory_item_id,
                quantity=line.quantity,
                unit_price=line.unit_price,
                tax_rate=line.tax_rate,
                line_total=line.line_total,
                received_qty=line.received_qty,
                remaining_qty=line.remaining_qty,
            )
            for line in po.items
        ],
        receipts=[receipt_to_response(r) for r in receipts or []],
        created_at=po.created_at,
        updated_at=po.updated_at,
    )
