"""
Conversions between API schemas and domain values.

Written out field by field; nothing here relies on attribute introspection.
"""

from orderservice.api.schemas import OrderItemResponse, OrderItemSchema, OrderResponse
from orderservice.exceptions import OrderStoreError
from orderservice.models import Order, OrderItem


def item_from_schema(schema: OrderItemSchema) -> OrderItem:
    """Build a domain item from a request item. A client-sent subtotal is ignored."""
    return OrderItem(
        product_id=schema.product_id,
        quantity=schema.quantity,
        unit_price=schema.price,
    )


def item_to_schema(item: OrderItem) -> OrderItemResponse:
    return OrderItemResponse(
        product_id=item.product_id,
        quantity=item.quantity,
        price=item.unit_price,
        subtotal=item.subtotal,
    )


def order_to_response(order: Order) -> OrderResponse:
    """
    Build the response body for a persisted order.

    Raises:
        OrderStoreError: If the order has no id yet
    """
    if order.id is None:
        raise OrderStoreError("Cannot render an order that has not been saved")

    return OrderResponse(
        id=order.id,
        account_id=order.account_id,
        items=[item_to_schema(item) for item in order.items],
        total_amount=order.total_amount,
        shipping_address=order.shipping_address,
        payment_id=order.payment_id,
        status=order.status,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )
