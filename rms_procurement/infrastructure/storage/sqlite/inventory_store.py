"""SQLite implementation of inventory, stock movement and batch storage."""

from datetime import date, datetime

import aiosqlite

from rms_procurement.config import get_logger
from rms_procurement.core.entities.inventory import (
    InventoryItem,
    MovementType,
    StockBatch,
    StockMovement,
)
from rms_procurement.core.exceptions import DuplicateSkuError
from rms_procurement.core.interfaces.inventory_store import IInventoryStore, IStockBatchStore
from rms_procurement.infrastructure.storage.sqlite.base import (
    SQLiteStore,
    dec,
    iso,
    now_or,
    to_date,
    to_decimal,
)

logger = get_logger(__name__)


class SQLiteInventoryStore(SQLiteStore, IInventoryStore):
    """SQLite implementation of inventory item and stock movement storage."""

    async def create_item(self, item: InventoryItem) -> InventoryItem:
        """Create a new inventory item. A taken (outlet_id, sku) raises DuplicateSkuError."""
        async with self._write() as conn:
            try:
                cursor = await self._insert_item(conn, item)
            except aiosqlite.IntegrityError as e:
                raise DuplicateSkuError(item.outlet_id, item.sku) from e
            item.id = cursor.lastrowid
            logger.info(
                "inventory_item_created",
                item_id=item.id,
                outlet_id=item.outlet_id,
                sku=item.sku,
            )
            return item

    @staticmethod
    async def _insert_item(conn: aiosqlite.Connection, item: InventoryItem) -> aiosqlite.Cursor:
        return await conn.execute(
            """
            INSERT INTO inventory_items (
                outlet_id, sku, name, unit_of_measure, current_stock,
                average_cost, last_cost, reorder_point, track_batch,
                is_active, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                item.outlet_id,
                item.sku,
                item.name,
                item.unit_of_measure,
                dec(item.current_stock),
                dec(item.average_cost),
                dec(item.last_cost),
                dec(item.reorder_point),
                int(item.track_batch),
                int(item.is_active),
                iso(item.created_at),
                iso(item.updated_at),
            ),
        )

    async def get_item(self, item_id: int) -> InventoryItem | None:
        async with self._read() as conn:
            cursor = await conn.execute(
                "SELECT * FROM inventory_items WHERE id = ?", (item_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_inventory_item(row) if row else None

    async def get_item_by_sku(self, outlet_id: str, sku: str) -> InventoryItem | None:
        async with self._read() as conn:
            cursor = await conn.execute(
                "SELECT * FROM inventory_items WHERE outlet_id = ? AND sku = ?",
                (outlet_id, sku),
            )
            row = await cursor.fetchone()
            return self._row_to_inventory_item(row) if row else None

    async def update_item(self, item: InventoryItem) -> InventoryItem:
        """Update stock and cost fields."""
        async with self._write() as conn:
            await conn.execute(
                """
                UPDATE inventory_items SET
                    current_stock = ?,
                    average_cost = ?,
                    last_cost = ?,
                    updated_at = ?
                WHERE id = ?
                """,
                (
                    dec(item.current_stock),
                    dec(item.average_cost),
                    dec(item.last_cost),
                    iso(item.updated_at),
                    item.id,
                ),
            )
            return item

    async def list_items(
        self,
        outlet_id: str | None = None,
        low_stock_only: bool = False,
        limit: int = 100,
        offset: int = 0,
    ) -> list[InventoryItem]:
        """List active items by name.

        Stock is TEXT, so the low-stock filter is applied after loading.
        """
        query = "SELECT * FROM inventory_items WHERE is_active = 1"
        params: list = []
        if outlet_id:
            query += " AND outlet_id = ?"
            params.append(outlet_id)
        if low_stock_only:
            query += " AND reorder_point IS NOT NULL"
        query += " ORDER BY name, id"

        async with self._read() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()

        items = [self._row_to_inventory_item(row) for row in rows]
        if low_stock_only:
            items = [i for i in items if i.is_low_stock]
        return items[offset : offset + limit]

    async def add_movement(self, movement: StockMovement) -> StockMovement:
        """Append a stock movement."""
        async with self._write() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO stock_movements (
                    inventory_item_id, movement_type, quantity, unit_cost,
                    total_cost, reference_type, reference_id,
                    performed_by_employee_id, notes, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    movement.inventory_item_id,
                    movement.movement_type.value,
                    dec(movement.quantity),
                    dec(movement.unit_cost),
                    dec(movement.total_cost),
                    movement.reference_type,
                    movement.reference_id,
                    movement.performed_by_employee_id,
                    movement.notes,
                    iso(movement.created_at),
                ),
            )
            movement.id = cursor.lastrowid
            logger.info(
                "stock_movement_recorded",
                movement_id=movement.id,
                item_id=movement.inventory_item_id,
                type=movement.movement_type,
                qty=movement.quantity,
            )
            return movement

    async def get_movements(
        self,
        inventory_item_id: int,
        start: datetime | None = None,
        end: datetime | None = None,
        movement_type: MovementType | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[StockMovement]:
        """Movements for an item, newest first."""
        query = "SELECT * FROM stock_movements WHERE inventory_item_id = ?"
        params: list = [inventory_item_id]
        if start:
            query += " AND created_at >= ?"
            params.append(iso(start))
        if end:
            query += " AND created_at <= ?"
            params.append(iso(end))
        if movement_type:
            query += " AND movement_type = ?"
            params.append(movement_type.value)
        query += " ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with self._read() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_movement(row) for row in rows]

    async def get_all_movements(self, inventory_item_id: int) -> list[StockMovement]:
        async with self._read() as conn:
            cursor = await conn.execute(
                "SELECT * FROM stock_movements WHERE inventory_item_id = ? ORDER BY id",
                (inventory_item_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_movement(row) for row in rows]

    async def list_outlet_movements(
        self,
        outlet_id: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[StockMovement]:
        query = """
            SELECT m.* FROM stock_movements m
            JOIN inventory_items i ON i.id = m.inventory_item_id
            WHERE 1 = 1
        """
        params: list = []
        if outlet_id:
            query += " AND i.outlet_id = ?"
            params.append(outlet_id)
        if start:
            query += " AND m.created_at >= ?"
            params.append(iso(start))
        if end:
            query += " AND m.created_at <= ?"
            params.append(iso(end))
        query += " ORDER BY m.created_at DESC, m.id DESC"

        async with self._read() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_movement(row) for row in rows]

    @staticmethod
    def _row_to_inventory_item(row: aiosqlite.Row) -> InventoryItem:
        return InventoryItem(
            id=row["id"],
            outlet_id=row["outlet_id"],
            sku=row["sku"],
            name=row["name"],
            unit_of_measure=row["unit_of_measure"],
            current_stock=to_decimal(row["current_stock"]),
            average_cost=to_decimal(row["average_cost"]),
            last_cost=to_decimal(row["last_cost"], default=None),
            reorder_point=to_decimal(row["reorder_point"], default=None),
            track_batch=bool(row["track_batch"]),
            is_active=bool(row["is_active"]),
            created_at=now_or(row["created_at"]),
            updated_at=now_or(row["updated_at"]),
        )

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> StockMovement:
        return StockMovement(
            id=row["id"],
            inventory_item_id=row["inventory_item_id"],
            movement_type=MovementType(row["movement_type"]),
            quantity=to_decimal(row["quantity"]),
            unit_cost=to_decimal(row["unit_cost"]),
            total_cost=to_decimal(row["total_cost"]),
            reference_type=row["reference_type"],
            reference_id=row["reference_id"],
            performed_by_employee_id=row["performed_by_employee_id"],
            notes=row["notes"],
            created_at=now_or(row["created_at"]),
        )


class SQLiteStockBatchStore(SQLiteStore, IStockBatchStore):
    """SQLite implementation of stock batch storage."""

    async def add_batch(self, batch: StockBatch) -> StockBatch:
        async with self._write() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO stock_batches (
                    inventory_item_id, batch_number, quantity, received_date,
                    expiry_date, unit_cost, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    batch.inventory_item_id,
                    batch.batch_number,
                    dec(batch.quantity),
                    iso(batch.received_date),
                    iso(batch.expiry_date),
                    dec(batch.unit_cost),
                    iso(batch.created_at),
                ),
            )
            batch.id = cursor.lastrowid
            return batch

    async def list_batches(self, inventory_item_id: int) -> list[StockBatch]:
        async with self._read() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM stock_batches
                WHERE inventory_item_id = ?
                ORDER BY expiry_date IS NULL, expiry_date, id
                """,
                (inventory_item_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_batch(row) for row in rows]

    async def list_expiring(
        self, on_or_before: date, outlet_id: str | None = None
    ) -> list[StockBatch]:
        query = """
            SELECT b.* FROM stock_batches b
            JOIN inventory_items i ON i.id = b.inventory_item_id
            WHERE b.expiry_date IS NOT NULL AND b.expiry_date <= ?
        """
        params: list = [on_or_before.isoformat()]
        if outlet_id:
            query += " AND i.outlet_id = ?"
            params.append(outlet_id)
        query += " ORDER BY b.expiry_date, b.id"

        async with self._read() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_batch(row) for row in rows]

    @staticmethod
    def _row_to_batch(row: aiosqlite.Row) -> StockBatch:
        return StockBatch(
            id=row["id"],
            inventory_item_id=row["inventory_item_id"],
            batch_number=row["batch_number"],
            quantity=to_decimal(row["quantity"]),
            received_date=now_or(row["received_date"]),
            expiry_date=to_date(row["expiry_date"]),
            unit_cost=to_decimal(row["unit_cost"]),
            created_at=now_or(row["created_at"]),
        )
