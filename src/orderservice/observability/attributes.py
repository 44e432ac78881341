"""
Standard span attributes for orderservice.

Attribute names used across stores and the order service so spans can be
filtered consistently. Database attributes follow the OpenTelemetry
semantic conventions.

Example:
    >>> from orderservice.observability.attributes import ATTR_ORDER_ID
    >>>
    >>> with tracer.span(
    ...     "orderservice.service.cancel_order",
    ...     {ATTR_ORDER_ID: order_id},
    ... ):
    ...     pass
"""

# =============================================================================
# Order Attributes
# =============================================================================

ATTR_ORDER_ID = "orderservice.order.id"
"""Store-assigned identifier of the order (integer)."""

ATTR_ACCOUNT_ID = "orderservice.account.id"
"""Account that owns the order (string)."""

ATTR_ORDER_STATUS = "orderservice.order.status"
"""Order status involved in the operation (string, e.g. 'PLACED')."""

ATTR_ITEM_COUNT = "orderservice.order.item_count"
"""Number of line items on the order (integer)."""

ATTR_RESULT_COUNT = "orderservice.result.count"
"""Number of orders returned by a query (integer)."""

# =============================================================================
# Database Attributes (OpenTelemetry Semantic Conventions)
# =============================================================================

ATTR_DB_SYSTEM = "db.system"
"""Database system identifier (e.g., 'sqlite', 'postgresql')."""

ATTR_DB_OPERATION = "db.operation"
"""Database operation type (e.g., 'INSERT', 'SELECT')."""


__all__ = [
    "ATTR_ORDER_ID",
    "ATTR_ACCOUNT_ID",
    "ATTR_ORDER_STATUS",
    "ATTR_ITEM_COUNT",
    "ATTR_RESULT_COUNT",
    "ATTR_DB_SYSTEM",
    "ATTR_DB_OPERATION",
]
