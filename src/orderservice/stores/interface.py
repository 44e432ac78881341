"""
Protocol for order stores.

An order store persists the order aggregate (order row plus its item rows)
and looks orders up by id or by account. It is the only place that knows
about the database; the order service depends on this protocol alone.
"""

from typing import Protocol, runtime_checkable

from orderservice.models import Order, OrderStatus


@runtime_checkable
class OrderStore(Protocol):
    """
    Protocol for order persistence.

    Key Design Decisions:
        - ``save()`` inserts when ``order.id`` is None and updates otherwise
        - the order and its items are always written in one transaction
        - returned orders are copies; mutating them does not touch the store
        - account lookups return orders in insertion order

    Example:
        >>> store: OrderStore = InMemoryOrderStore()
        >>> saved = await store.save(Order(account_id="acc-1", shipping_address="1 Main St"))
        >>> saved.id
        1
        >>> await store.find_by_id(saved.id)
    """

    async def save(self, order: Order) -> Order:
        """
        Insert or update an order together with its items.

        Args:
            order: The order to persist. If ``order.id`` is None a new id
                is assigned.

        Returns:
            The stored order, with ``id`` and each item's ``order_id`` set

        Raises:
            OrderNotFoundError: If ``order.id`` is set but no such order is stored
        """
        ...

    async def find_by_id(self, order_id: int) -> Order | None:
        """
        Get an order by id.

        Returns:
            The order if found, None otherwise
        """
        ...

    async def find_by_account_id(self, account_id: str) -> list[Order]:
        """
        Get all orders placed by an account.

        Returns:
            Orders in insertion order; empty if the account has none
        """
        ...

    async def find_by_account_id_and_status(
        self,
        account_id: str,
        status: OrderStatus,
    ) -> list[Order]:
        """
        Get an account's orders that are currently in ``status``.

        Returns:
            Matching orders in insertion order; possibly empty
        """
        ...
