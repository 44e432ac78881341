"""Unit tests for PostgreSQLOrderStore.

These tests use mocking to verify SQL issued and row mapping without
requiring a real PostgreSQL database connection.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from orderservice.exceptions import OrderNotFoundError, OrderStoreError
from orderservice.models import OrderStatus
from orderservice.observability import MockTracer
from orderservice.stores import OrderStore, PostgreSQLOrderStore
from orderservice.testing.conformance import CREATED_AT, make_order

UPDATED_AT = datetime(2024, 3, 2, 8, 30, 0, tzinfo=UTC)


def _result(
    scalar: Any = None,
    rowcount: int = 1,
    rows: list[tuple[Any, ...]] | None = None,
) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = scalar
    result.rowcount = rowcount
    result.fetchall.return_value = rows or []
    return result


def _mock_connection(*results: MagicMock) -> MagicMock:
    conn = MagicMock(spec=AsyncConnection)
    conn.execute = AsyncMock(side_effect=list(results))
    return conn


def _sql(conn: MagicMock, call_index: int) -> str:
    return " ".join(str(conn.execute.await_args_list[call_index].args[0]).split())


def _params(conn: MagicMock, call_index: int) -> dict[str, Any]:
    return conn.execute.await_args_list[call_index].args[1]


ORDER_ROW = (
    10,
    "acc-123",
    Decimal("69.98"),
    "123 Main St",
    "pmt-456",
    "PAID",
    CREATED_AT,
    UPDATED_AT,
)
ITEM_ROWS = [
    (10, "prod-1", 2, Decimal("29.99")),
    (10, "prod-2", 1, Decimal("10.00")),
]


class TestPostgreSQLOrderStoreConstruction:
    def test_implements_protocol(self) -> None:
        store = PostgreSQLOrderStore(MagicMock(spec=AsyncConnection), enable_tracing=False)

        assert isinstance(store, OrderStore)

    def test_repr(self) -> None:
        store = PostgreSQLOrderStore(MagicMock(spec=AsyncConnection), enable_tracing=False)

        assert repr(store) == "PostgreSQLOrderStore(tracing=disabled)"


class TestPostgreSQLOrderStoreSave:
    async def test_insert_uses_returned_id(self) -> None:
        conn = _mock_connection(_result(scalar=10), _result(), _result(), _result())
        store = PostgreSQLOrderStore(conn, enable_tracing=False)
        order = make_order()

        saved = await store.save(order)

        assert saved.id == 10
        assert order.id is None
        assert [item.order_id for item in saved.items] == [10, 10]
        assert conn.execute.await_count == 4
        assert "INSERT INTO orders" in _sql(conn, 0)
        assert "RETURNING id" in _sql(conn, 0)
        assert _params(conn, 0)["total_amount"] == Decimal("69.98")
        assert _params(conn, 0)["status"] == "PLACED"
        assert _params(conn, 0)["created_at"] == CREATED_AT
        assert "DELETE FROM order_items" in _sql(conn, 1)
        assert _params(conn, 2) == {
            "order_id": 10,
            "position": 0,
            "product_id": "prod-1",
            "quantity": 2,
            "price": Decimal("29.99"),
            "subtotal": Decimal("59.98"),
        }
        assert _params(conn, 3)["position"] == 1

    async def test_insert_without_returned_id_raises(self) -> None:
        conn = _mock_connection(_result(scalar=None))
        store = PostgreSQLOrderStore(conn, enable_tracing=False)

        with pytest.raises(OrderStoreError):
            await store.save(make_order())

    async def test_update_existing(self) -> None:
        conn = _mock_connection(_result(rowcount=1), _result(), _result(), _result())
        store = PostgreSQLOrderStore(conn, enable_tracing=False)
        order = make_order(status=OrderStatus.SHIPPED)
        order.id = 10

        saved = await store.save(order)

        assert saved.id == 10
        assert "UPDATE orders" in _sql(conn, 0)
        params = _params(conn, 0)
        assert params["id"] == 10
        assert params["status"] == "SHIPPED"
        assert "created_at" not in params
        assert "total_amount" not in params

    async def test_update_unknown_id_raises(self) -> None:
        conn = _mock_connection(_result(rowcount=0))
        store = PostgreSQLOrderStore(conn, enable_tracing=False)
        order = make_order()
        order.id = 99

        with pytest.raises(OrderNotFoundError) as exc_info:
            await store.save(order)

        assert exc_info.value.order_id == 99
        assert conn.execute.await_count == 1

    async def test_engine_save_runs_in_transaction(self) -> None:
        conn = _mock_connection(_result(scalar=3), _result(), _result(), _result())
        engine = MagicMock(spec=AsyncEngine)
        engine.begin.return_value.__aenter__.return_value = conn
        store = PostgreSQLOrderStore(engine, enable_tracing=False)

        saved = await store.save(make_order())

        assert saved.id == 3
        engine.begin.assert_called_once()
        engine.connect.assert_not_called()


class TestPostgreSQLOrderStoreQueries:
    async def test_find_by_id_maps_rows(self) -> None:
        conn = _mock_connection(_result(rows=[ORDER_ROW]), _result(rows=ITEM_ROWS))
        store = PostgreSQLOrderStore(conn, enable_tracing=False)

        order = await store.find_by_id(10)

        assert order is not None
        assert order.id == 10
        assert order.status == OrderStatus.PAID
        assert order.total_amount == Decimal("69.98")
        assert order.created_at == CREATED_AT
        assert order.updated_at == UPDATED_AT
        assert [item.product_id for item in order.items] == ["prod-1", "prod-2"]
        assert order.items[0].subtotal == Decimal("59.98")
        assert _params(conn, 0) == {"id": 10}
        assert _params(conn, 1) == {"order_ids": [10]}
        assert "ANY(:order_ids)" in _sql(conn, 1)

    async def test_find_by_id_missing_skips_item_query(self) -> None:
        conn = _mock_connection(_result(rows=[]))
        store = PostgreSQLOrderStore(conn, enable_tracing=False)

        assert await store.find_by_id(404) is None
        assert conn.execute.await_count == 1

    async def test_null_updated_at_falls_back_to_created_at(self) -> None:
        row = ORDER_ROW[:7] + (None,)
        conn = _mock_connection(_result(rows=[row]), _result(rows=[]))
        store = PostgreSQLOrderStore(conn, enable_tracing=False)

        order = await store.find_by_id(10)

        assert order is not None
        assert order.updated_at == CREATED_AT
        assert order.items == []

    async def test_find_by_account_id_orders_by_id(self) -> None:
        second_row = (11,) + ORDER_ROW[1:]
        conn = _mock_connection(
            _result(rows=[ORDER_ROW, second_row]),
            _result(rows=ITEM_ROWS + [(11, "prod-3", 5, Decimal("1.00"))]),
        )
        store = PostgreSQLOrderStore(conn, enable_tracing=False)

        orders = await store.find_by_account_id("acc-123")

        assert [order.id for order in orders] == [10, 11]
        assert [len(order.items) for order in orders] == [2, 1]
        assert "ORDER BY id" in _sql(conn, 0)
        assert _params(conn, 0) == {"account_id": "acc-123"}
        assert _params(conn, 1) == {"order_ids": [10, 11]}

    async def test_find_by_account_id_and_status_filters(self) -> None:
        conn = _mock_connection(_result(rows=[]))
        store = PostgreSQLOrderStore(conn, enable_tracing=False)

        assert await store.find_by_account_id_and_status("acc-123", OrderStatus.SHIPPED) == []
        assert "status = :status" in _sql(conn, 0)
        assert _params(conn, 0) == {"account_id": "acc-123", "status": "SHIPPED"}

    async def test_engine_reads_use_plain_connection(self) -> None:
        conn = _mock_connection(_result(rows=[]))
        engine = MagicMock(spec=AsyncEngine)
        engine.connect.return_value.__aenter__.return_value = conn
        store = PostgreSQLOrderStore(engine, enable_tracing=False)

        await store.find_by_account_id("acc-123")

        engine.connect.assert_called_once()
        engine.begin.assert_not_called()

    async def test_records_spans(self) -> None:
        tracer = MockTracer()
        conn = _mock_connection(_result(rows=[]))
        store = PostgreSQLOrderStore(conn, tracer=tracer)

        await store.find_by_id(1)

        assert tracer.spans == [
            (
                "orderservice.store.find_by_id",
                {
                    "orderservice.order.id": 1,
                    "db.system": "postgresql",
                    "db.operation": "SELECT",
                },
            )
        ]
