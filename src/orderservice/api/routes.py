"""
Order management endpoints.

Every handler converts the request into domain values, calls the
OrderService, and converts the result back with the functions in
``orderservice.api.mapping``. Errors raised by the service are turned into
responses by ``orderservice.api.errors``.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from orderservice.api.dependencies import get_order_service
from orderservice.api.mapping import item_from_schema, order_to_response
from orderservice.api.schemas import CreateOrderRequest, ErrorResponse, OrderResponse
from orderservice.models import OrderStatus
from orderservice.service import OrderService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["Order Management"])

ServiceDep = Annotated[OrderService, Depends(get_order_service)]
OrderIdPath = Annotated[int, Path(description="Order ID")]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=OrderResponse,
    summary="Create a new order",
    description="Creates a new order with the provided items and shipping information",
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "Invalid request data"}},
)
async def create_order(request: CreateOrderRequest, service: ServiceDep) -> OrderResponse:
    logger.info("Received request to create order for account: %s", request.account_id)
    order = await service.create_order(
        account_id=request.account_id,
        items=[item_from_schema(item) for item in request.items],
        shipping_address=request.shipping_address,
        payment_method=request.payment_method,
    )
    return order_to_response(order)


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Get order by ID",
    description="Retrieves order details by order ID",
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "Order not found"}},
)
async def get_order(order_id: OrderIdPath, service: ServiceDep) -> OrderResponse:
    logger.info("Received request to get order: %s", order_id)
    order = await service.get_order_by_id(order_id)
    return order_to_response(order)


@router.get(
    "/account/{account_id}",
    response_model=list[OrderResponse],
    summary="Get orders by account ID",
    description="Retrieves all orders for a specific account, optionally filtered by status",
)
async def get_orders_by_account(
    account_id: Annotated[str, Path(description="Account ID")],
    service: ServiceDep,
    order_status: Annotated[
        OrderStatus | None,
        Query(alias="status", description="Only return orders in this status"),
    ] = None,
) -> list[OrderResponse]:
    logger.info("Received request to get orders for account: %s", account_id)
    orders = await service.get_orders_by_account_id(account_id, status=order_status)
    return [order_to_response(order) for order in orders]


@router.post(
    "/{order_id}/cancel",
    response_model=OrderResponse,
    summary="Cancel an order",
    description="Cancels an order if it hasn't been shipped or completed",
    responses={
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "Order not found"},
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Order cannot be cancelled",
        },
    },
)
async def cancel_order(order_id: OrderIdPath, service: ServiceDep) -> OrderResponse:
    logger.info("Received request to cancel order: %s", order_id)
    order = await service.cancel_order(order_id)
    return order_to_response(order)


@router.put(
    "/{order_id}/status",
    response_model=OrderResponse,
    summary="Update order status",
    description="Updates the status of an order (admin/internal use)",
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "Order not found"}},
)
async def update_order_status(
    order_id: OrderIdPath,
    service: ServiceDep,
    new_status: Annotated[OrderStatus, Query(alias="status", description="New order status")],
) -> OrderResponse:
    logger.info("Received request to update order %s status to %s", order_id, new_status.value)
    order = await service.update_order_status(order_id, new_status)
    return order_to_response(order)
