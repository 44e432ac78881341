"""
In-memory implementation of the order store.

Provides a simple, fast store for testing and development.
All data is stored in memory and lost when the process terminates.
"""

import asyncio
import itertools

from orderservice.exceptions import OrderNotFoundError
from orderservice.models import Order, OrderStatus
from orderservice.observability import Tracer, create_tracer
from orderservice.observability.attributes import (
    ATTR_ACCOUNT_ID,
    ATTR_DB_OPERATION,
    ATTR_DB_SYSTEM,
    ATTR_ITEM_COUNT,
    ATTR_ORDER_ID,
    ATTR_ORDER_STATUS,
)


class InMemoryOrderStore:
    """
    In-memory implementation of OrderStore for testing.

    Orders are kept in a dictionary keyed by id. Ids are assigned from a
    counter starting at 1. Every read and write hands out deep copies, so
    callers can never observe or cause a half-written order.

    This implementation is safe for concurrent coroutines via asyncio.Lock.

    Example:
        >>> store = InMemoryOrderStore()
        >>> saved = await store.save(order)
        >>> await store.find_by_account_id(saved.account_id)

    Note:
        - Use ``clear()`` for test teardown
        - Account queries are O(n)
    """

    def __init__(
        self,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        """
        Initialize the in-memory store.

        Args:
            tracer: Optional tracer for tracing (if not provided, one will be created)
            enable_tracing: Whether to enable OpenTelemetry tracing (default True)
        """
        self._tracer = tracer or create_tracer(__name__, enable_tracing)
        self._enable_tracing = self._tracer.enabled
        self._orders: dict[int, Order] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    async def save(self, order: Order) -> Order:
        """Insert or update an order; see OrderStore.save."""
        operation = "INSERT" if order.id is None else "UPDATE"
        with self._tracer.span(
            "orderservice.store.save",
            {
                ATTR_ORDER_ID: order.id if order.id is not None else -1,
                ATTR_ITEM_COUNT: len(order.items),
                ATTR_DB_SYSTEM: "memory",
                ATTR_DB_OPERATION: operation,
            },
        ):
            async with self._lock:
                stored = order.model_copy(deep=True)
                if stored.id is None:
                    stored.id = next(self._ids)
                elif stored.id not in self._orders:
                    raise OrderNotFoundError(stored.id)

                for item in stored.items:
                    item.order_id = stored.id

                self._orders[stored.id] = stored
                return stored.model_copy(deep=True)

    async def find_by_id(self, order_id: int) -> Order | None:
        """Get an order by id; see OrderStore.find_by_id."""
        with self._tracer.span(
            "orderservice.store.find_by_id",
            {
                ATTR_ORDER_ID: order_id,
                ATTR_DB_SYSTEM: "memory",
                ATTR_DB_OPERATION: "SELECT",
            },
        ):
            async with self._lock:
                order = self._orders.get(order_id)
                if order is None:
                    return None
                return order.model_copy(deep=True)

    async def find_by_account_id(self, account_id: str) -> list[Order]:
        """Get an account's orders; see OrderStore.find_by_account_id."""
        with self._tracer.span(
            "orderservice.store.find_by_account_id",
            {
                ATTR_ACCOUNT_ID: account_id,
                ATTR_DB_SYSTEM: "memory",
                ATTR_DB_OPERATION: "SELECT",
            },
        ):
            async with self._lock:
                return [
                    order.model_copy(deep=True)
                    for order in self._orders.values()
                    if order.account_id == account_id
                ]

    async def find_by_account_id_and_status(
        self,
        account_id: str,
        status: OrderStatus,
    ) -> list[Order]:
        """Get an account's orders in a status; see OrderStore."""
        with self._tracer.span(
            "orderservice.store.find_by_account_id_and_status",
            {
                ATTR_ACCOUNT_ID: account_id,
                ATTR_ORDER_STATUS: status.value,
                ATTR_DB_SYSTEM: "memory",
                ATTR_DB_OPERATION: "SELECT",
            },
        ):
            async with self._lock:
                return [
                    order.model_copy(deep=True)
                    for order in self._orders.values()
                    if order.account_id == account_id and order.status == status
                ]

    async def clear(self) -> None:
        """Remove all orders and restart id assignment at 1."""
        async with self._lock:
            self._orders.clear()
            self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._orders)

    def __repr__(self) -> str:
        return (
            f"InMemoryOrderStore("
            f"orders={len(self._orders)}, "
            f"tracing={'enabled' if self._enable_tracing else 'disabled'})"
        )
