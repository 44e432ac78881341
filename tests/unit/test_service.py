"""Unit tests for OrderService."""

from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from orderservice.clock import FixedClock
from orderservice.exceptions import IllegalOrderStateError, OrderNotFoundError
from orderservice.models import Order, OrderItem, OrderStatus
from orderservice.observability import MockTracer, NullTracer
from orderservice.observability.attributes import ATTR_ACCOUNT_ID, ATTR_ITEM_COUNT
from orderservice.service import OrderService
from orderservice.stores import InMemoryOrderStore, OrderStore


async def _create(service: OrderService, items: list[OrderItem], account_id: str = "acc-123") -> Order:
    return await service.create_order(
        account_id=account_id,
        items=items,
        shipping_address="123 Main St, City, State 12345",
        payment_method="pmt-456",
    )


class TestOrderServiceConstruction:
    def test_defaults_to_null_tracer_when_disabled(self, in_memory_store: InMemoryOrderStore) -> None:
        service = OrderService(in_memory_store, enable_tracing=False)

        assert isinstance(service._tracer, NullTracer)
        assert service.store is in_memory_store

    def test_repr(self, service: OrderService) -> None:
        assert repr(service).startswith("OrderService(store=InMemoryOrderStore(")


class TestCreateOrder:
    async def test_creates_placed_order_with_total(
        self,
        service: OrderService,
        sample_items: list[OrderItem],
        fixed_now: datetime,
    ) -> None:
        order = await _create(service, sample_items)

        assert order.id is not None
        assert order.status == OrderStatus.PLACED
        assert order.total_amount == Decimal("69.98")
        assert order.account_id == "acc-123"
        assert order.payment_id == "pmt-456"
        assert order.created_at == fixed_now
        assert order.updated_at == fixed_now
        assert [item.order_id for item in order.items] == [order.id, order.id]

    async def test_order_is_persisted(self, service: OrderService, sample_items: list[OrderItem]) -> None:
        order = await _create(service, sample_items)
        assert order.id is not None

        loaded = await service.get_order_by_id(order.id)

        assert loaded == order

    async def test_does_not_mutate_caller_items(
        self,
        service: OrderService,
        sample_items: list[OrderItem],
    ) -> None:
        await _create(service, sample_items)

        assert all(item.order_id is None for item in sample_items)

    async def test_without_payment_method(self, service: OrderService, sample_items: list[OrderItem]) -> None:
        order = await service.create_order(
            account_id="acc-123",
            items=sample_items,
            shipping_address="1 Road",
        )

        assert order.payment_id is None

    async def test_single_save(self, fixed_clock: FixedClock, sample_items: list[OrderItem]) -> None:
        store = AsyncMock(spec=OrderStore)
        store.save.side_effect = lambda order: order.model_copy(update={"id": 1})
        service = OrderService(store, clock=fixed_clock, enable_tracing=False)

        order = await _create(service, sample_items)

        assert order.id == 1
        store.save.assert_awaited_once()
        saved_arg = store.save.await_args.args[0]
        assert saved_arg.id is None
        assert saved_arg.total_amount == Decimal("69.98")


class TestGetOrder:
    async def test_missing_order_raises(self, service: OrderService) -> None:
        with pytest.raises(OrderNotFoundError) as exc_info:
            await service.get_order_by_id(999)

        assert exc_info.value.order_id == 999
        assert str(exc_info.value) == "Order not found with ID: 999"

    async def test_unknown_account_returns_empty_list(self, service: OrderService) -> None:
        assert await service.get_orders_by_account_id("nobody") == []

    async def test_orders_by_account(self, service: OrderService, sample_items: list[OrderItem]) -> None:
        first = await _create(service, sample_items, account_id="acc-1")
        await _create(service, sample_items, account_id="acc-2")
        second = await _create(service, sample_items, account_id="acc-1")

        orders = await service.get_orders_by_account_id("acc-1")

        assert [order.id for order in orders] == [first.id, second.id]

    async def test_orders_by_account_and_status(
        self,
        service: OrderService,
        sample_items: list[OrderItem],
    ) -> None:
        placed = await _create(service, sample_items)
        cancelled = await _create(service, sample_items)
        assert cancelled.id is not None
        await service.cancel_order(cancelled.id)

        only_placed = await service.get_orders_by_account_id("acc-123", status=OrderStatus.PLACED)
        only_cancelled = await service.get_orders_by_account_id("acc-123", status=OrderStatus.CANCELLED)

        assert [order.id for order in only_placed] == [placed.id]
        assert [order.id for order in only_cancelled] == [cancelled.id]


class TestCancelOrder:
    async def test_cancel_placed_order(
        self,
        service: OrderService,
        sample_items: list[OrderItem],
        fixed_clock: FixedClock,
        fixed_now: datetime,
    ) -> None:
        order = await _create(service, sample_items)
        assert order.id is not None
        fixed_clock.advance(minutes=10)

        cancelled = await service.cancel_order(order.id)

        assert cancelled.status == OrderStatus.CANCELLED
        assert cancelled.updated_at == fixed_now + timedelta(minutes=10)
        assert cancelled.created_at == fixed_now
        stored = await service.get_order_by_id(order.id)
        assert stored.status == OrderStatus.CANCELLED

    @pytest.mark.parametrize("status", [OrderStatus.SHIPPED, OrderStatus.COMPLETED])
    async def test_cancel_shipped_or_completed_rejected(
        self,
        service: OrderService,
        sample_items: list[OrderItem],
        fixed_clock: FixedClock,
        status: OrderStatus,
    ) -> None:
        order = await _create(service, sample_items)
        assert order.id is not None
        shipped = await service.update_order_status(order.id, status)
        fixed_clock.advance(minutes=10)

        with pytest.raises(IllegalOrderStateError) as exc_info:
            await service.cancel_order(order.id)

        assert str(exc_info.value) == f"Cannot cancel order with status: {status.value}"
        stored = await service.get_order_by_id(order.id)
        assert stored.status == status
        assert stored.updated_at == shipped.updated_at

    async def test_cancel_missing_order_raises(self, service: OrderService) -> None:
        with pytest.raises(OrderNotFoundError):
            await service.cancel_order(404)

    async def test_rejected_cancel_writes_nothing(
        self,
        fixed_clock: FixedClock,
        sample_items: list[OrderItem],
    ) -> None:
        store = AsyncMock(spec=OrderStore)
        store.find_by_id.return_value = Order(
            id=5,
            account_id="acc-123",
            items=sample_items,
            shipping_address="1 Road",
            status=OrderStatus.SHIPPED,
        )
        service = OrderService(store, clock=fixed_clock, enable_tracing=False)

        with pytest.raises(IllegalOrderStateError):
            await service.cancel_order(5)

        store.save.assert_not_awaited()


class TestUpdateOrderStatus:
    async def test_update_any_status(
        self,
        service: OrderService,
        sample_items: list[OrderItem],
        fixed_clock: FixedClock,
        fixed_now: datetime,
    ) -> None:
        order = await _create(service, sample_items)
        assert order.id is not None
        fixed_clock.advance(hours=1)

        updated = await service.update_order_status(order.id, OrderStatus.SHIPPED)

        assert updated.status == OrderStatus.SHIPPED
        assert updated.updated_at == fixed_now + timedelta(hours=1)
        assert updated.total_amount == Decimal("69.98")

    async def test_update_out_of_cancelled(
        self,
        service: OrderService,
        sample_items: list[OrderItem],
    ) -> None:
        order = await _create(service, sample_items)
        assert order.id is not None
        await service.cancel_order(order.id)

        updated = await service.update_order_status(order.id, OrderStatus.PAID)

        assert updated.status == OrderStatus.PAID

    async def test_update_missing_order_raises(self, service: OrderService) -> None:
        with pytest.raises(OrderNotFoundError):
            await service.update_order_status(404, OrderStatus.PAID)


class TestOrderServiceTracing:
    async def test_spans_recorded(
        self,
        traced_service: OrderService,
        mock_tracer: MockTracer,
        sample_items: list[OrderItem],
    ) -> None:
        order = await _create(traced_service, sample_items)
        assert order.id is not None
        await traced_service.get_order_by_id(order.id)
        await traced_service.get_orders_by_account_id("acc-123")
        await traced_service.update_order_status(order.id, OrderStatus.PAID)
        await traced_service.cancel_order(order.id)

        assert mock_tracer.span_names == [
            "orderservice.service.create_order",
            "orderservice.service.get_order_by_id",
            "orderservice.service.get_orders_by_account_id",
            "orderservice.service.update_order_status",
            "orderservice.service.cancel_order",
        ]

    async def test_create_span_attributes(
        self,
        traced_service: OrderService,
        mock_tracer: MockTracer,
        sample_items: list[OrderItem],
    ) -> None:
        await _create(traced_service, sample_items)

        _, attributes = mock_tracer.spans[0]
        assert attributes == {ATTR_ACCOUNT_ID: "acc-123", ATTR_ITEM_COUNT: 2}


class TestOrderServiceLogging:
    async def test_logs_creation(
        self,
        service: OrderService,
        sample_items: list[OrderItem],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level("INFO", logger="orderservice.service"):
            order = await _create(service, sample_items)

        assert "Creating order for account: acc-123" in caplog.text
        assert f"Order created successfully with ID: {order.id}" in caplog.text
