"""
orderservice - order management with a small, explicit lifecycle.

Orders are created in PLACED, can be cancelled until they ship, and can be
moved to any status by an explicit status update. Persistence goes through
an OrderStore (in-memory, SQLite or PostgreSQL); the REST API lives in
``orderservice.api``.

Example:
    >>> from decimal import Decimal
    >>> from orderservice import InMemoryOrderStore, OrderItem, OrderService
    >>>
    >>> service = OrderService(InMemoryOrderStore())
    >>> order = await service.create_order(
    ...     account_id="acc-123",
    ...     items=[OrderItem(product_id="prod-1", quantity=2, unit_price=Decimal("29.99"))],
    ...     shipping_address="123 Main St, City, State 12345",
    ... )
    >>> order.total_amount
    Decimal('59.98')
"""

__version__ = "0.1.0"

from orderservice.clock import Clock, FixedClock, SystemClock
from orderservice.exceptions import (
    IllegalOrderStateError,
    OrderNotFoundError,
    OrderServiceError,
    OrderStoreError,
)
from orderservice.lifecycle import (
    CANCELLABLE_STATUSES,
    NON_CANCELLABLE_STATUSES,
    can_cancel,
    can_transition_to,
    compute_total,
)
from orderservice.models import Order, OrderItem, OrderStatus, item_subtotal
from orderservice.service import OrderService
from orderservice.stores import (
    InMemoryOrderStore,
    OrderStore,
    PostgreSQLOrderStore,
    SQLiteOrderStore,
)

__all__ = [
    "__version__",
    # Domain
    "Order",
    "OrderItem",
    "OrderStatus",
    "item_subtotal",
    # Lifecycle rules
    "compute_total",
    "can_cancel",
    "can_transition_to",
    "CANCELLABLE_STATUSES",
    "NON_CANCELLABLE_STATUSES",
    # Service
    "OrderService",
    # Stores
    "OrderStore",
    "InMemoryOrderStore",
    "SQLiteOrderStore",
    "PostgreSQLOrderStore",
    # Clocks
    "Clock",
    "SystemClock",
    "FixedClock",
    # Exceptions
    "OrderServiceError",
    "OrderNotFoundError",
    "IllegalOrderStateError",
    "OrderStoreError",
]
