"""
Request and response bodies of the REST API.

JSON field names are camelCase (``accountId``, ``shippingAddress``...);
Python attribute names stay snake_case. Money values are exact Decimals
internally and JSON numbers on the wire.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from orderservice.models import OrderStatus


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


NonBlankStr = Annotated[str, AfterValidator(_not_blank)]
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderItemSchema(_CamelModel):
    """Order item information."""

    product_id: NonBlankStr = Field(..., description="Product ID", examples=["prod-123"])
    quantity: int = Field(..., ge=1, description="Quantity", examples=[2])
    price: Money = Field(..., ge=0, description="Unit price", examples=[29.99])
    subtotal: Money | None = Field(
        default=None,
        description="Subtotal (quantity * price); ignored on input",
        examples=[59.98],
    )


class OrderItemResponse(_CamelModel):
    """Order item as returned by the API."""

    product_id: str = Field(..., description="Product ID", examples=["prod-123"])
    quantity: int | None = Field(default=None, description="Quantity", examples=[2])
    price: Money | None = Field(default=None, description="Unit price", examples=[29.99])
    subtotal: Money = Field(..., description="Subtotal (quantity * price)", examples=[59.98])


class CreateOrderRequest(_CamelModel):
    """Request to create a new order."""

    account_id: NonBlankStr = Field(
        ...,
        description="Account ID of the customer",
        examples=["acc-123"],
    )
    items: list[OrderItemSchema] = Field(
        ...,
        min_length=1,
        description="List of order items",
    )
    shipping_address: NonBlankStr = Field(
        ...,
        description="Shipping address",
        examples=["123 Main St, City, State 12345"],
    )
    payment_method: str | None = Field(
        default=None,
        description="Payment method identifier",
        examples=["pmt-456"],
    )


class OrderResponse(_CamelModel):
    """Order information."""

    id: int = Field(..., description="Order ID", examples=[1])
    account_id: str = Field(..., description="Account ID", examples=["acc-123"])
    items: list[OrderItemResponse] = Field(..., description="List of order items")
    total_amount: Money = Field(..., description="Total amount", examples=[99.98])
    shipping_address: str | None = Field(default=None, description="Shipping address")
    payment_id: str | None = Field(default=None, description="Payment ID", examples=["pmt-456"])
    status: OrderStatus = Field(..., description="Order status", examples=["PLACED"])
    created_at: datetime = Field(..., description="Order creation timestamp")
    updated_at: datetime = Field(..., description="Order last update timestamp")


class ErrorResponse(BaseModel):
    """Body returned for every 4xx response."""

    error: bool = True
    message: str
    status_code: int
    details: list[dict[str, str]] | None = None
