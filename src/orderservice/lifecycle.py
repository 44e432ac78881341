"""
Order lifecycle rules.

Pure functions deciding which status changes are allowed and computing
order totals. The order service is the only caller that persists the
results; nothing here touches a store or reads the clock.

Status changes:
    - creation always yields PLACED
    - ``cancel`` moves any order to CANCELLED unless it is SHIPPED or COMPLETED
    - ``update_status`` sets any status from any status, no table is consulted
"""

from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal

from orderservice.exceptions import IllegalOrderStateError
from orderservice.models import ZERO, Order, OrderItem, OrderStatus, item_subtotal

NON_CANCELLABLE_STATUSES: frozenset[OrderStatus] = frozenset(
    {OrderStatus.SHIPPED, OrderStatus.COMPLETED}
)
CANCELLABLE_STATUSES: frozenset[OrderStatus] = frozenset(OrderStatus) - NON_CANCELLABLE_STATUSES


def compute_total(items: Iterable[OrderItem]) -> Decimal:
    """
    Sum ``unit_price * quantity`` over all items using exact decimal arithmetic.

    Items missing a quantity or price contribute zero.

    Example:
        >>> compute_total([
        ...     OrderItem(product_id="prod-1", quantity=2, unit_price=Decimal("29.99")),
        ...     OrderItem(product_id="prod-2", quantity=1, unit_price=Decimal("10.00")),
        ... ])
        Decimal('69.98')
    """
    total = ZERO
    for item in items:
        total += item_subtotal(item.quantity, item.unit_price)
    return total


def can_cancel(status: OrderStatus) -> bool:
    """Return True unless the order has already shipped or completed."""
    return status not in NON_CANCELLABLE_STATUSES


def can_transition_to(current: OrderStatus, target: OrderStatus) -> bool:
    """
    Return whether an explicit status update from ``current`` to ``target`` is allowed.

    Every pair is allowed, including self-transitions.
    """
    return True


def cancel(order: Order, now: datetime) -> Order:
    """
    Cancel an order in place.

    Args:
        order: The order to cancel
        now: Timestamp recorded as ``updated_at``

    Returns:
        The same order instance, now CANCELLED

    Raises:
        IllegalOrderStateError: If the order is SHIPPED or COMPLETED. The
            order is not modified in that case.
    """
    if not can_cancel(order.status):
        raise IllegalOrderStateError(order.id, order.status, operation="cancel")
    order.status = OrderStatus.CANCELLED
    order.updated_at = now
    return order


def update_status(order: Order, status: OrderStatus, now: datetime) -> Order:
    """Set ``status`` unconditionally and refresh ``updated_at``."""
    if not can_transition_to(order.status, status):  # pragma: no cover
        raise IllegalOrderStateError(order.id, order.status, operation="update")
    order.status = status
    order.updated_at = now
    return order

