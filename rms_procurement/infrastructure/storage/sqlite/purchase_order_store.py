"""SQLite implementation of purchase order, goods receipt and sequence storage."""

from datetime import datetime
from decimal import Decimal

import aiosqlite

from rms_procurement.config import get_logger
from rms_procurement.core.entities.goods_receipt import GoodsReceipt, GoodsReceiptItem
from rms_procurement.core.entities.purchase_order import (
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderStatus,
)
from rms_procurement.core.interfaces.purchase_order_store import (
    IGoodsReceiptStore,
    IPurchaseOrderStore,
    ISequenceStore,
)
from rms_procurement.infrastructure.storage.sqlite.base import (
    SQLiteStore,
    dec,
    iso,
    now_or,
    to_date,
    to_datetime,
    to_decimal,
)

logger = get_logger(__name__)


class SQLitePurchaseOrderStore(SQLiteStore, IPurchaseOrderStore):
    """SQLite implementation of purchase order storage."""

    async def create(self, po: PurchaseOrder) -> PurchaseOrder:
        """Insert a purchase order header and its lines."""
        async with self._write() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO purchase_orders (
                    po_number, supplier_id, outlet_id, status, expected_date,
                    tax_rate, subtotal, tax_amount, total, notes,
                    approved_by_employee_id, approved_at, sent_at,
                    received_date, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    po.po_number,
                    po.supplier_id,
                    po.outlet_id,
                    po.status.value,
                    iso(po.expected_date),
                    dec(po.tax_rate),
                    dec(po.subtotal),
                    dec(po.tax_amount),
                    dec(po.total),
                    po.notes,
                    po.approved_by_employee_id,
                    iso(po.approved_at),
                    iso(po.sent_at),
                    iso(po.received_date),
                    iso(po.created_at),
                    iso(po.updated_at),
                ),
            )
            po.id = cursor.lastrowid
            await self._insert_items(conn, po)
            logger.info(
                "purchase_order_created",
                po_id=po.id,
                po_number=po.po_number,
                lines=len(po.items),
                total=str(po.total),
            )
            return po

    async def get(self, po_id: int) -> PurchaseOrder | None:
        """Get a purchase order with its lines."""
        async with self._read() as conn:
            cursor = await conn.execute(
                "SELECT * FROM purchase_orders WHERE id = ?", (po_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            items = await self._load_items(conn, [po_id])
            return self._row_to_purchase_order(row, items.get(po_id, []))

    async def update(self, po: PurchaseOrder) -> PurchaseOrder:
        """Update header fields. Lines are handled by replace_items and increment_received_qty."""
        async with self._write() as conn:
            await conn.execute(
                """
                UPDATE purchase_orders SET
                    status = ?,
                    expected_date = ?,
                    tax_rate = ?,
                    subtotal = ?,
                    tax_amount = ?,
                    total = ?,
                    notes = ?,
                    approved_by_employee_id = ?,
                    approved_at = ?,
                    sent_at = ?,
                    received_date = ?,
                    updated_at = ?
                WHERE id = ?
                """,
                (
                    po.status.value,
                    iso(po.expected_date),
                    dec(po.tax_rate),
                    dec(po.subtotal),
                    dec(po.tax_amount),
                    dec(po.total),
                    po.notes,
                    po.approved_by_employee_id,
                    iso(po.approved_at),
                    iso(po.sent_at),
                    iso(po.received_date),
                    iso(po.updated_at),
                    po.id,
                ),
            )
            return po

    async def replace_items(self, po: PurchaseOrder) -> PurchaseOrder:
        async with self._write() as conn:
            await conn.execute(
                "DELETE FROM purchase_order_items WHERE purchase_order_id = ?", (po.id,)
            )
            await self._insert_items(conn, po)
            logger.info("purchase_order_items_replaced", po_id=po.id, lines=len(po.items))
            return po

    async def increment_received_qty(self, line_id: int, quantity: Decimal) -> Decimal:
        """Read-modify-write of a line's received quantity.

        Callers must hold the write lock (SQLiteUnitOfWork) so the read and
        the update cannot interleave with another receipt.
        """
        async with self._write() as conn:
            cursor = await conn.execute(
                "SELECT received_qty FROM purchase_order_items WHERE id = ?", (line_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                raise LookupError(f"purchase_order_items row {line_id} disappeared")
            new_qty = to_decimal(row["received_qty"]) + quantity
            await conn.execute(
                "UPDATE purchase_order_items SET received_qty = ? WHERE id = ?",
                (dec(new_qty), line_id),
            )
            return new_qty

    async def delete(self, po_id: int) -> bool:
        async with self._write() as conn:
            cursor = await conn.execute(
                "DELETE FROM purchase_orders WHERE id = ?", (po_id,)
            )
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info("purchase_order_deleted", po_id=po_id)
            return deleted

    async def list_orders(
        self,
        outlet_id: str | None = None,
        supplier_id: str | None = None,
        status: PurchaseOrderStatus | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[PurchaseOrder]:
        query = "SELECT * FROM purchase_orders WHERE 1 = 1"
        params: list = []
        if outlet_id:
            query += " AND outlet_id = ?"
            params.append(outlet_id)
        if supplier_id:
            query += " AND supplier_id = ?"
            params.append(supplier_id)
        if status:
            query += " AND status = ?"
            params.append(status.value)
        if start:
            query += " AND created_at >= ?"
            params.append(iso(start))
        if end:
            query += " AND created_at <= ?"
            params.append(iso(end))
        query += " ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with self._read() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            items = await self._load_items(conn, [row["id"] for row in rows])
            return [
                self._row_to_purchase_order(row, items.get(row["id"], []))
                for row in rows
            ]

    @staticmethod
    async def _insert_items(conn: aiosqlite.Connection, po: PurchaseOrder) -> None:
        for line_no, item in enumerate(po.items, start=1):
            item.purchase_order_id = po.id
            cursor = await conn.execute(
                """
                INSERT INTO purchase_order_items (
                    purchase_order_id, inventory_item_id, line_no, quantity,
                    unit_price, tax_rate, line_total, received_qty
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    po.id,
                    item.inventory_item_id,
                    line_no,
                    dec(item.quantity),
                    dec(item.unit_price),
                    dec(item.tax_rate),
                    dec(item.line_total),
                    dec(item.received_qty),
                ),
            )
            item.id = cursor.lastrowid

    @staticmethod
    async def _load_items(
        conn: aiosqlite.Connection, po_ids: list[int]
    ) -> dict[int, list[PurchaseOrderItem]]:
        if not po_ids:
            return {}
        placeholders = ",".join("?" * len(po_ids))
        cursor = await conn.execute(
            f"""
            SELECT * FROM purchase_order_items
            WHERE purchase_order_id IN ({placeholders})
            ORDER BY purchase_order_id, line_no, id
            """,
            po_ids,
        )
        grouped: dict[int, list[PurchaseOrderItem]] = {}
        for row in await cursor.fetchall():
            grouped.setdefault(row["purchase_order_id"], []).append(
                PurchaseOrderItem(
                    id=row["id"],
                    purchase_order_id=row["purchase_order_id"],
                    inventory_item_id=row["inventory_item_id"],
                    quantity=to_decimal(row["quantity"]),
                    unit_price=to_decimal(row["unit_price"]),
                    tax_rate=to_decimal(row["tax_rate"]),
                    received_qty=to_decimal(row["received_qty"]),
                )
            )
        return grouped

    @staticmethod
    def _row_to_purchase_order(
        row: aiosqlite.Row, items: list[PurchaseOrderItem]
    ) -> PurchaseOrder:
        po = PurchaseOrder(
            id=row["id"],
            po_number=row["po_number"],
            supplier_id=row["supplier_id"],
            outlet_id=row["outlet_id"],
            status=PurchaseOrderStatus(row["status"]),
            expected_date=to_date(row["expected_date"]),
            tax_rate=to_decimal(row["tax_rate"]),
            subtotal=to_decimal(row["subtotal"]),
            notes=row["notes"],
            approved_by_employee_id=row["approved_by_employee_id"],
            approved_at=to_datetime(row["approved_at"]),
            sent_at=to_datetime(row["sent_at"]),
            received_date=to_datetime(row["received_date"]),
            items=items,
            created_at=now_or(row["created_at"]),
            updated_at=now_or(row["updated_at"]),
        )
        # Stored totals win over recomputation
        po.tax_amount = to_decimal(row["tax_amount"])
        po.total = to_decimal(row["total"])
        return po


class SQLiteGoodsReceiptStore(SQLiteStore, IGoodsReceiptStore):
    """SQLite implementation of goods receipt storage. Insert and read only."""

    async def create(self, receipt: GoodsReceipt) -> GoodsReceipt:
        async with self._write() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO goods_receipts (
                    grn_number, purchase_order_id, received_by_employee_id,
                    received_date, notes, created_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    receipt.grn_number,
                    receipt.purchase_order_id,
                    receipt.received_by_employee_id,
                    iso(receipt.received_date),
                    receipt.notes,
                    iso(receipt.created_at),
                ),
            )
            receipt.id = cursor.lastrowid

            for item in receipt.items:
                item.goods_receipt_id = receipt.id
                cursor = await conn.execute(
                    """
                    INSERT INTO goods_receipt_items (
                        goods_receipt_id, purchase_order_item_id,
                        quantity_received, batch_number, expiry_date
                    ) VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        receipt.id,
                        item.purchase_order_item_id,
                        dec(item.quantity_received),
                        item.batch_number,
                        iso(item.expiry_date),
                    ),
                )
                item.id = cursor.lastrowid

            return receipt

    async def list_for_po(self, po_id: int) -> list[GoodsReceipt]:
        async with self._read() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM goods_receipts
                WHERE purchase_order_id = ?
                ORDER BY received_date DESC, id DESC
                """,
                (po_id,),
            )
            headers = await cursor.fetchall()
            if not headers:
                return []

            ids = [row["id"] for row in headers]
            placeholders = ",".join("?" * len(ids))
            cursor = await conn.execute(
                f"""
                SELECT * FROM goods_receipt_items
                WHERE goods_receipt_id IN ({placeholders})
                ORDER BY id
                """,
                ids,
            )
            lines: dict[int, list[GoodsReceiptItem]] = {}
            for row in await cursor.fetchall():
                lines.setdefault(row["goods_receipt_id"], []).append(
                    GoodsReceiptItem(
                        id=row["id"],
                        goods_receipt_id=row["goods_receipt_id"],
                        purchase_order_item_id=row["purchase_order_item_id"],
                        quantity_received=to_decimal(row["quantity_received"]),
                        batch_number=row["batch_number"],
                        expiry_date=to_date(row["expiry_date"]),
                    )
                )

            return [
                GoodsReceipt(
                    id=row["id"],
                    grn_number=row["grn_number"],
                    purchase_order_id=row["purchase_order_id"],
                    received_by_employee_id=row["received_by_employee_id"],
                    received_date=now_or(row["received_date"]),
                    notes=row["notes"],
                    items=lines.get(row["id"], []),
                    created_at=now_or(row["created_at"]),
                )
                for row in headers
            ]

    async def count_for_po(self, po_id: int) -> int:
        async with self._read() as conn:
            cursor = await conn.execute(
                "SELECT COUNT(*) FROM goods_receipts WHERE purchase_order_id = ?",
                (po_id,),
            )
            row = await cursor.fetchone()
            return row[0] if row else 0


class SQLiteSequenceStore(SQLiteStore, ISequenceStore):
    """Per-period counters in document_sequences."""

    async def next_value(self, name: str, period: str) -> int:
        async with self._write() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO document_sequences (name, period, last_value)
                VALUES (?, ?, 1)
                ON CONFLICT (name, period) DO UPDATE SET last_value = last_value + 1
                RETURNING last_value
                """,
                (name, period),
            )
            row = await cursor.fetchone()
            await cursor.close()
            return row[0]
