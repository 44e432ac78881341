"""Library exceptions for the orderservice package."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from orderservice.models import OrderStatus


class OrderServiceError(Exception):
    """Base exception for orderservice."""

    pass


class OrderNotFoundError(OrderServiceError):
    """Raised when an order id does not exist in the store."""

    def __init__(self, order_id: int) -> None:
        self.order_id = order_id
        super().__init__(f"Order not found with ID: {order_id}")


class IllegalOrderStateError(OrderServiceError):
    """
    Raised when a mutation conflicts with the order's current status.

    Cancelling an order that is already SHIPPED or COMPLETED is the only
    case today. The order is left unmodified when this is raised.

    Attributes:
        order_id: ID of the order, None if it was never persisted
        status: The status that blocked the operation
        operation: Name of the rejected operation (e.g. "cancel")
    """

    def __init__(
        self,
        order_id: int | None,
        status: OrderStatus,
        operation: str = "cancel",
    ) -> None:
        self.order_id = order_id
        self.status = status
        self.operation = operation
        super().__init__(f"Cannot {operation} order with status: {status.value}")


class OrderStoreError(OrderServiceError):
    """Raised when the persistence backend fails in an unexpected way."""

    pass
