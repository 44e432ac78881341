"""
Order aggregate and line item values.

An Order exclusively owns its OrderItems; items have no lifecycle of their
own. Items carry the id of their order only as a lookup reference filled in
by the store.
"""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

ZERO = Decimal("0")


class OrderStatus(str, Enum):
    """
    Lifecycle states of an order.

    PLACED is the initial state. CANCELLED is terminal in practice, but no
    code path treats it as terminal.
    """

    PLACED = "PLACED"
    PAID = "PAID"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


def item_subtotal(quantity: int | None, unit_price: Decimal | None) -> Decimal:
    """
    Compute ``unit_price * quantity`` for one line item.

    Returns zero when either value is missing.

    Examples:
        >>> item_subtotal(2, Decimal("29.99"))
        Decimal('59.98')
        >>> item_subtotal(None, Decimal("29.99"))
        Decimal('0')
    """
    if quantity is None or unit_price is None:
        return ZERO
    return unit_price * quantity


class OrderItem(BaseModel):
    """
    A single line item on an order.

    Attributes:
        product_id: Identifier of the ordered product
        quantity: Number of units (validated to be >= 1 at the API boundary)
        unit_price: Price of one unit
        order_id: Id of the owning order, set by the store after persisting
        subtotal: ``unit_price * quantity``, zero if either is missing

    Example:
        >>> item = OrderItem(product_id="prod-1", quantity=2, unit_price=Decimal("29.99"))
        >>> item.subtotal
        Decimal('59.98')
    """

    model_config = ConfigDict(from_attributes=True)

    product_id: str = Field(..., description="Product identifier")
    quantity: int | None = Field(default=None, description="Number of units ordered")
    unit_price: Decimal | None = Field(default=None, description="Price of a single unit")
    order_id: int | None = Field(
        default=None,
        description="Id of the owning order (lookup reference only)",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def subtotal(self) -> Decimal:
        return item_subtotal(self.quantity, self.unit_price)


class Order(BaseModel):
    """
    The order aggregate: the order record plus its owned line items.

    Orders are mutable so lifecycle rules can change ``status`` and
    ``updated_at`` in place; nothing else changes after creation.

    Attributes:
        id: Store-assigned identifier, None until first saved
        account_id: Account the order belongs to
        items: Line items, fixed at creation
        total_amount: Sum of item subtotals at creation
        shipping_address: Delivery address
        payment_id: Payment reference supplied at creation, if any
        status: Current lifecycle status
        created_at: Creation timestamp, never changed
        updated_at: Timestamp of the last mutation
    """

    model_config = ConfigDict(from_attributes=True)

    id: int | None = Field(default=None, description="Store-assigned order id")
    account_id: str = Field(..., description="Account that placed the order")
    items: list[OrderItem] = Field(default_factory=list, description="Owned line items")
    total_amount: Decimal = Field(default=ZERO, description="Total at creation time")
    shipping_address: str = Field(..., description="Shipping address")
    payment_id: str | None = Field(default=None, description="Payment reference")
    status: OrderStatus = Field(default=OrderStatus.PLACED, description="Lifecycle status")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the order was created",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the order was last modified",
    )

    def is_persisted(self) -> bool:
        """Return True once the store has assigned an id."""
        return self.id is not None

    def __str__(self) -> str:
        return f"Order(id={self.id}, status={self.status.value})"
