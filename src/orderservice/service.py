"""
Order service.

The single entry point for creating, reading and changing orders. It loads
orders from an OrderStore, applies the lifecycle rules, and writes the
result back with one ``save`` per mutation.
"""

import logging
from collections.abc import Sequence

from orderservice import lifecycle
from orderservice.clock import Clock, SystemClock
from orderservice.exceptions import OrderNotFoundError
from orderservice.models import Order, OrderItem, OrderStatus
from orderservice.observability import Tracer, create_tracer
from orderservice.observability.attributes import (
    ATTR_ACCOUNT_ID,
    ATTR_ITEM_COUNT,
    ATTR_ORDER_ID,
    ATTR_ORDER_STATUS,
    ATTR_RESULT_COUNT,
)
from orderservice.stores.interface import OrderStore

logger = logging.getLogger(__name__)


class OrderService:
    """
    Orchestrates order store calls around the lifecycle rules.

    The service raises typed errors (OrderNotFoundError,
    IllegalOrderStateError) and leaves formatting them to the caller.
    Request validation happens before the service is called.

    Example:
        >>> service = OrderService(InMemoryOrderStore())
        >>> order = await service.create_order(
        ...     account_id="acc-123",
        ...     items=[OrderItem(product_id="prod-1", quantity=2, unit_price=Decimal("29.99"))],
        ...     shipping_address="123 Main St",
        ... )
        >>> order.status
        <OrderStatus.PLACED: 'PLACED'>
        >>> await service.cancel_order(order.id)
    """

    def __init__(
        self,
        store: OrderStore,
        clock: Clock | None = None,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        """
        Initialize the service.

        Args:
            store: Persistence backend for orders
            clock: Source of ``created_at``/``updated_at`` (defaults to SystemClock)
            tracer: Optional tracer for tracing (if not provided, one will be created)
            enable_tracing: Whether to enable OpenTelemetry tracing (default True)
        """
        self._store = store
        self._clock = clock or SystemClock()
        self._tracer = tracer or create_tracer(__name__, enable_tracing)
        self._enable_tracing = self._tracer.enabled

    @property
    def store(self) -> OrderStore:
        return self._store

    async def create_order(
        self,
        account_id: str,
        items: Sequence[OrderItem],
        shipping_address: str,
        payment_method: str | None = None,
    ) -> Order:
        """
        Place a new order.

        Args:
            account_id: Account placing the order
            items: Line items; must be non-empty (checked at the API boundary)
            shipping_address: Delivery address
            payment_method: Payment reference, stored as ``payment_id``

        Returns:
            The persisted order in PLACED, with its store-assigned id
        """
        with self._tracer.span(
            "orderservice.service.create_order",
            {
                ATTR_ACCOUNT_ID: account_id,
                ATTR_ITEM_COUNT: len(items),
            },
        ):
            logger.info("Creating order for account: %s", account_id)

            now = self._clock.now()
            order = Order(
                account_id=account_id,
                items=[item.model_copy() for item in items],
                total_amount=lifecycle.compute_total(items),
                shipping_address=shipping_address,
                payment_id=payment_method,
                status=OrderStatus.PLACED,
                created_at=now,
                updated_at=now,
            )

            saved = await self._store.save(order)
            logger.info("Order created successfully with ID: %s", saved.id)
            return saved

    async def get_order_by_id(self, order_id: int) -> Order:
        """
        Fetch one order.

        Raises:
            OrderNotFoundError: If no order has this id
        """
        with self._tracer.span(
            "orderservice.service.get_order_by_id",
            {ATTR_ORDER_ID: order_id},
        ):
            logger.info("Fetching order with ID: %s", order_id)
            return await self._load(order_id)

    async def get_orders_by_account_id(
        self,
        account_id: str,
        status: OrderStatus | None = None,
    ) -> list[Order]:
        """
        Fetch all orders of an account, optionally only those in ``status``.

        Returns:
            Orders in store order; empty when the account has none
        """
        attributes: dict[str, str | int] = {ATTR_ACCOUNT_ID: account_id}
        if status is not None:
            attributes[ATTR_ORDER_STATUS] = status.value

        with self._tracer.span(
            "orderservice.service.get_orders_by_account_id",
            attributes,
        ) as span:
            logger.info("Fetching orders for account: %s", account_id)
            if status is None:
                orders = await self._store.find_by_account_id(account_id)
            else:
                orders = await self._store.find_by_account_id_and_status(account_id, status)

            if span:
                span.set_attribute(ATTR_RESULT_COUNT, len(orders))
            return orders

    async def cancel_order(self, order_id: int) -> Order:
        """
        Cancel an order that has not shipped or completed.

        Raises:
            OrderNotFoundError: If no order has this id
            IllegalOrderStateError: If the order is SHIPPED or COMPLETED;
                nothing is written in that case
        """
        with self._tracer.span(
            "orderservice.service.cancel_order",
            {ATTR_ORDER_ID: order_id},
        ):
            logger.info("Cancelling order with ID: %s", order_id)

            order = await self._load(order_id)
            lifecycle.cancel(order, self._clock.now())
            saved = await self._store.save(order)

            logger.info("Order %s cancelled successfully", order_id)
            return saved

    async def update_order_status(self, order_id: int, status: OrderStatus) -> Order:
        """
        Set an order's status, whatever its current status is.

        Raises:
            OrderNotFoundError: If no order has this id
        """
        with self._tracer.span(
            "orderservice.service.update_order_status",
            {
                ATTR_ORDER_ID: order_id,
                ATTR_ORDER_STATUS: status.value,
            },
        ):
            logger.info("Updating order %s status to %s", order_id, status.value)

            order = await self._load(order_id)
            lifecycle.update_status(order, status, self._clock.now())
            saved = await self._store.save(order)

            logger.info("Order %s status updated to %s", order_id, status.value)
            return saved

    async def _load(self, order_id: int) -> Order:
        order = await self._store.find_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def __repr__(self) -> str:
        return f"OrderService(store={self._store!r})"
