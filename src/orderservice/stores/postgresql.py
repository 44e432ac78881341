"""
PostgreSQL implementation of the order store.

Provides production-ready persistence for orders using PostgreSQL's native
types (BIGSERIAL, NUMERIC, TIMESTAMP WITH TIME ZONE) through SQLAlchemy's
async engine.
"""

from collections import defaultdict
from collections.abc import Sequence
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

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
from orderservice.stores._connection import execute_with_connection

_ORDER_COLUMNS = (
    "id, account_id, total_amount, shipping_address, payment_id, status, created_at, updated_at"
)

_INSERT_ORDER = text("""
    INSERT INTO orders (
        account_id, total_amount, shipping_address, payment_id,
        status, created_at, updated_at
    )
    VALUES (
        :account_id, :total_amount, :shipping_address, :payment_id,
        :status, :created_at, :updated_at
    )
    RETURNING id
""")

# created_at and total_amount are fixed at creation
_UPDATE_ORDER = text("""
    UPDATE orders
    SET account_id = :account_id,
        shipping_address = :shipping_address,
        payment_id = :payment_id,
        status = :status,
        updated_at = :updated_at
    WHERE id = :id
""")

_DELETE_ITEMS = text("DELETE FROM order_items WHERE order_id = :order_id")

_INSERT_ITEM = text("""
    INSERT INTO order_items (order_id, position, product_id, quantity, price, subtotal)
    VALUES (:order_id, :position, :product_id, :quantity, :price, :subtotal)
""")

_SELECT_ITEMS = text("""
    SELECT order_id, product_id, quantity, price
    FROM order_items
    WHERE order_id = ANY(:order_ids)
    ORDER BY order_id, position
""")


class PostgreSQLOrderStore:
    """
    PostgreSQL implementation of OrderStore.

    Requirements:
        - Tables created from ``get_schema(backend="postgresql")``

    Example:
        >>> engine = create_async_engine("postgresql+asyncpg://localhost/orders")
        >>> store = PostgreSQLOrderStore(engine)
        >>> saved = await store.save(order)
        >>> await store.find_by_account_id(saved.account_id)

    Note:
        - With an AsyncEngine every ``save()`` runs in its own transaction
        - With an AsyncConnection the caller owns the transaction boundary
    """

    def __init__(
        self,
        conn: AsyncConnection | AsyncEngine,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        """
        Initialize the PostgreSQL store.

        Args:
            conn: Database connection or engine
            tracer: Optional tracer for tracing (if not provided, one will be created)
            enable_tracing: Whether to enable OpenTelemetry tracing (default True)
        """
        self._tracer = tracer or create_tracer(__name__, enable_tracing)
        self._enable_tracing = self._tracer.enabled
        self._conn = conn

    async def save(self, order: Order) -> Order:
        """Insert or update an order with its items in one transaction."""
        operation = "INSERT" if order.id is None else "UPDATE"
        with self._tracer.span(
            "orderservice.store.save",
            {
                ATTR_ORDER_ID: order.id if order.id is not None else -1,
                ATTR_ITEM_COUNT: len(order.items),
                ATTR_DB_SYSTEM: "postgresql",
                ATTR_DB_OPERATION: operation,
            },
        ):
            stored = order.model_copy(deep=True)
            params = {
                "account_id": stored.account_id,
                "shipping_address": stored.shipping_address,
                "payment_id": stored.payment_id,
                "status": stored.status.value,
                "updated_at": stored.updated_at,
            }

            async with execute_with_connection(self._conn, transactional=True) as conn:
                if stored.id is None:
                    result = await conn.execute(
                        _INSERT_ORDER,
                        {
                            **params,
                            "total_amount": stored.total_amount,
                            "created_at": stored.created_at,
                        },
                    )
                    new_id = result.scalar_one_or_none()
                    if new_id is None:
                        raise OrderStoreError("PostgreSQL did not return an id for the order")
                    stored.id = int(new_id)
                else:
                    result = await conn.execute(_UPDATE_ORDER, {**params, "id": stored.id})
                    if result.rowcount == 0:
                        raise OrderNotFoundError(stored.id)

                await conn.execute(_DELETE_ITEMS, {"order_id": stored.id})
                for position, item in enumerate(stored.items):
                    item.order_id = stored.id
                    await conn.execute(
                        _INSERT_ITEM,
                        {
                            "order_id": stored.id,
                            "position": position,
                            "product_id": item.product_id,
                            "quantity": item.quantity,
                            "price": item.unit_price,
                            "subtotal": item.subtotal,
                        },
                    )

            return stored

    async def find_by_id(self, order_id: int) -> Order | None:
        """Get an order and its items by id."""
        with self._tracer.span(
            "orderservice.store.find_by_id",
            {
                ATTR_ORDER_ID: order_id,
                ATTR_DB_SYSTEM: "postgresql",
                ATTR_DB_OPERATION: "SELECT",
            },
        ):
            orders = await self._select_orders("id = :id", {"id": order_id})
            return orders[0] if orders else None

    async def find_by_account_id(self, account_id: str) -> list[Order]:
        """Get an account's orders in insertion order."""
        with self._tracer.span(
            "orderservice.store.find_by_account_id",
            {
                ATTR_ACCOUNT_ID: account_id,
                ATTR_DB_SYSTEM: "postgresql",
                ATTR_DB_OPERATION: "SELECT",
            },
        ) as span:
            orders = await self._select_orders(
                "account_id = :account_id",
                {"account_id": account_id},
            )
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
                ATTR_DB_SYSTEM: "postgresql",
                ATTR_DB_OPERATION: "SELECT",
            },
        ):
            return await self._select_orders(
                "account_id = :account_id AND status = :status",
                {"account_id": account_id, "status": status.value},
            )

    async def _select_orders(self, where: str, params: dict[str, Any]) -> list[Order]:
        query = text(
            f"SELECT {_ORDER_COLUMNS} FROM orders WHERE {where} ORDER BY id"  # nosec B608
        )

        async with execute_with_connection(self._conn, transactional=False) as conn:
            result = await conn.execute(query, params)
            rows = result.fetchall()
            if not rows:
                return []

            item_result = await conn.execute(
                _SELECT_ITEMS,
                {"order_ids": [row[0] for row in rows]},
            )
            item_rows = item_result.fetchall()

        items: dict[int, list[OrderItem]] = defaultdict(list)
        for item_row in item_rows:
            items[item_row[0]].append(self._row_to_item(item_row))

        return [self._row_to_order(row, items.get(row[0], [])) for row in rows]

    def _row_to_order(self, row: Sequence[Any], items: list[OrderItem]) -> Order:
        return Order(
            id=row[0],
            account_id=row[1],
            total_amount=row[2],
            shipping_address=row[3],
            payment_id=row[4],
            status=OrderStatus(row[5]),
            created_at=row[6],
            updated_at=row[7] if row[7] is not None else row[6],
            items=items,
        )

    def _row_to_item(self, row: Sequence[Any]) -> OrderItem:
        return OrderItem(
            order_id=row[0],
            product_id=row[1],
            quantity=row[2],
            unit_price=row[3],
        )

    def __repr__(self) -> str:
        return (
            f"PostgreSQLOrderStore("
            f"tracing={'enabled' if self._enable_tracing else 'disabled'})"
        )
