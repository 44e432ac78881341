"""
SQLite implementation of the order store.

Provides lightweight, embedded persistence for orders using SQLite.
Suitable for development, testing, and single-node deployments.

SQLite-specific adaptations:
- Decimals stored as TEXT (exact string form, never a float)
- Datetimes stored as TEXT (ISO 8601 format)
- Ids assigned by AUTOINCREMENT and read back through ``lastrowid``
- Positional parameters (?) instead of named parameters
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from orderservice.exceptions import OrderNotFoundError, OrderStoreError
from orderservice.models import Order, OrderItem, OrderStatus
from orderservice.observability import Tracer, create_tracer
from orderservice.observability.attributes import (
    ATTR_ACCOUNT_ID,
    ATTR_DB_OPERATION,
    ATTR_DB_SYSTEM,
    ATTR_ITEM_COUNT,
    ATTR_ORDER_ID,
    ATTR_ORDER_STATUS,
    ATTR_RESULT_COUNT,
)

if TYPE_CHECKING:
    import aiosqlite

_ORDER_COLUMNS = (
    "id, account_id, total_amount, shipping_address, payment_id, status, created_at, updated_at"
)
_ITEM_COLUMNS = "order_id, product_id, quantity, price"


class SQLiteOrderStore:
    """
    SQLite implementation of OrderStore.

    Every ``save()`` writes the order row and its item rows and commits
    once; any failure rolls the whole write back.

    Requirements:
        - Tables created from ``get_schema(backend="sqlite")``

    Example:
        >>> import aiosqlite
        >>> from orderservice.migrations import get_schema
        >>> async with aiosqlite.connect("orders.db") as db:
        ...     await db.executescript(get_schema(backend="sqlite"))
        ...     store = SQLiteOrderStore(db)
        ...     saved = await store.save(order)
    """

    def __init__(
        self,
        connection: aiosqlite.Connection,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        """
        Initialize the SQLite store.

        Args:
            connection: aiosqlite database connection
            tracer: Optional tracer for tracing (if not provided, one will be created)
            enable_tracing: Whether to enable OpenTelemetry tracing (default True)
        """
        self._tracer = tracer or create_tracer(__name__, enable_tracing)
        self._enable_tracing = self._tracer.enabled
        self._connection = connection

    async def save(self, order: Order) -> Order:
        """Insert or update an order with its items in one transaction."""
        operation = "INSERT" if order.id is None else "UPDATE"
        with self._tracer.span(
            "orderservice.store.save",
            {
                ATTR_ORDER_ID: order.id if order.id is not None else -1,
                ATTR_ITEM_COUNT: len(order.items),
                ATTR_DB_SYSTEM: "sqlite",
                ATTR_DB_OPERATION: operation,
            },
        ):
            stored = order.model_copy(deep=True)
            try:
                if stored.id is None:
                    stored.id = await self._insert_order(stored)
                else:
                    await self._update_order(stored.id, stored)
                await self._replace_items(stored)
                await self._connection.commit()
            except Exception:
                await self._connection.rollback()
                raise
            return stored

    async def find_by_id(self, order_id: int) -> Order | None:
        """Get an order and its items by id."""
        with self._tracer.span(
            "orderservice.store.find_by_id",
            {
                ATTR_ORDER_ID: order_id,
                ATTR_DB_SYSTEM: "sqlite",
                ATTR_DB_OPERATION: "SELECT",
            },
        ):
            cursor = await self._connection.execute(
                f"SELECT {_ORDER_COLUMNS} FROM orders WHERE id = ?",  # nosec B608
                (order_id,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None

            items = await self._load_items([order_id])
            return self._row_to_order(row, items.get(order_id, []))

    async def find_by_account_id(self, account_id: str) -> list[Order]:
        """Get an account's orders in insertion order."""
        with self._tracer.span(
            "orderservice.store.find_by_account_id",
            {
                ATTR_ACCOUNT_ID: account_id,
                ATTR_DB_SYSTEM: "sqlite",
                ATTR_DB_OPERATION: "SELECT",
            },
        ) as span:
            orders = await self._select_orders("account_id = ?", (account_id,))
            if span:
                span.set_attribute(ATTR_RESULT_COUNT, len(orders))
            return orders

    async def find_by_account_id_and_status(
        self,
        account_id: str,
        status: OrderStatus,
    ) -> list[Order]:
        """Get an account's orders currently in ``status``."""
        with self._tracer.span(
            "orderservice.store.find_by_account_id_and_status",
            {
                ATTR_ACCOUNT_ID: account_id,
                ATTR_ORDER_STATUS: status.value,
                ATTR_DB_SYSTEM: "sqlite",
                ATTR_DB_OPERATION: "SELECT",
            },
        ):
            return await self._select_orders(
                "account_id = ? AND status = ?",
                (account_id, status.value),
            )

    async def _insert_order(self, order: Order) -> int:
        cursor = await self._connection.execute(
            """
            INSERT INTO orders (
                account_id, total_amount, shipping_address, payment_id,
                status, created_at, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                order.account_id,
                str(order.total_amount),
                order.shipping_address,
                order.payment_id,
                order.status.value,
                order.created_at.isoformat(),
                order.updated_at.isoformat(),
            ),
        )
        if cursor.lastrowid is None:
            raise OrderStoreError("SQLite did not return an id for the inserted order")
        return cursor.lastrowid

    async def _update_order(self, order_id: int, order: Order) -> None:
        # created_at and total_amount are fixed at creation
        cursor = await self._connection.execute(
            """
            UPDATE orders
            SET account_id = ?, shipping_address = ?, payment_id = ?,
                status = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                order.account_id,
                order.shipping_address,
                order.payment_id,
                order.status.value,
                order.updated_at.isoformat(),
                order_id,
            ),
        )
        if cursor.rowcount == 0:
            raise OrderNotFoundError(order_id)

    async def _replace_items(self, order: Order) -> None:
        await self._connection.execute("DELETE FROM order_items WHERE order_id = ?", (order.id,))
        for position, item in enumerate(order.items):
            item.order_id = order.id
            await self._connection.execute(
                """
                INSERT INTO order_items (
                    order_id, position, product_id, quantity, price, subtotal
                )
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    order.id,
                    position,
                    item.product_id,
                    item.quantity,
                    str(item.unit_price) if item.unit_price is not None else None,
                    str(item.subtotal),
                ),
            )

    async def _select_orders(self, where: str, params: tuple[Any, ...]) -> list[Order]:
        cursor = await self._connection.execute(
            f"SELECT {_ORDER_COLUMNS} FROM orders WHERE {where} ORDER BY id",  # nosec B608
            params,
        )
        rows = await cursor.fetchall()
        if not rows:
            return []

        items = await self._load_items([row[0] for row in rows])
        return [self._row_to_order(row, items.get(row[0], [])) for row in rows]

    async def _load_items(self, order_ids: list[int]) -> dict[int, list[OrderItem]]:
        placeholders = ",".join("?" * len(order_ids))
        cursor = await self._connection.execute(
            f"""
            SELECT {_ITEM_COLUMNS}
            FROM order_items
            WHERE order_id IN ({placeholders})
            ORDER BY order_id, position
            """,  # nosec B608 - placeholders only
            tuple(order_ids),
        )
        rows = await cursor.fetchall()

        grouped: dict[int, list[OrderItem]] = defaultdict(list)
        for row in rows:
            grouped[row[0]].append(self._row_to_item(row))
        return grouped

    def _row_to_order(self, row: Sequence[Any], items: list[OrderItem]) -> Order:
        """
        Convert an ``orders`` row to an Order.

        Args:
            row: Values in ``_ORDER_COLUMNS`` order (tuple or aiosqlite.Row)
            items: The order's items, already in position order
        """
        return Order(
            id=row[0],
            account_id=row[1],
            total_amount=Decimal(row[2]),
            shipping_address=row[3],
            payment_id=row[4],
            status=OrderStatus(row[5]),
            created_at=_parse_datetime(row[6]),
            updated_at=_parse_datetime(row[7]) if row[7] is not None else _parse_datetime(row[6]),
            items=items,
        )

    def _row_to_item(self, row: Sequence[Any]) -> OrderItem:
        return OrderItem(
            order_id=row[0],
            product_id=row[1],
            quantity=row[2],
            unit_price=Decimal(row[3]) if row[3] is not None else None,
        )

    def __repr__(self) -> str:
        return (
            f"SQLiteOrderStore("
            f"tracing={'enabled' if self._enable_tracing else 'disabled'})"
        )


def _parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
