"""
Shared pytest fixtures for the orderservice tests.

This module provides:
- Clock fixtures (fixed_now, fixed_clock)
- Sample data fixtures (sample_items)
- Store fixtures (in_memory_store, sqlite_connection, sqlite_store)
- Service fixtures (service, traced_service, mock_tracer)
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest
import pytest_asyncio

from orderservice.clock import FixedClock
from orderservice.migrations import get_schema
from orderservice.models import OrderItem
from orderservice.observability import MockTracer
from orderservice.service import OrderService
from orderservice.stores import InMemoryOrderStore, SQLiteOrderStore

if TYPE_CHECKING:
    import aiosqlite

# ============================================================================
# SQLite Availability Check
# ============================================================================

AIOSQLITE_AVAILABLE = False
try:
    import aiosqlite

    AIOSQLITE_AVAILABLE = True
except ImportError:
    aiosqlite = None  # type: ignore[assignment]

skip_if_no_aiosqlite = pytest.mark.skipif(
    not AIOSQLITE_AVAILABLE,
    reason="aiosqlite not installed",
)


# ============================================================================
# Clock Fixtures
# ============================================================================


@pytest.fixture
def fixed_now() -> datetime:
    """The instant every FixedClock starts at."""
    return datetime(2024, 3, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def fixed_clock(fixed_now: datetime) -> FixedClock:
    return FixedClock(fixed_now)


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_items() -> list[OrderItem]:
    """Two items totalling 69.98."""
    return [
        OrderItem(product_id="prod-1", quantity=2, unit_price=Decimal("29.99")),
        OrderItem(product_id="prod-2", quantity=1, unit_price=Decimal("10.00")),
    ]


# ============================================================================
# Store Fixtures
# ============================================================================


@pytest.fixture
def in_memory_store() -> InMemoryOrderStore:
    return InMemoryOrderStore(enable_tracing=False)


@pytest_asyncio.fixture
async def sqlite_connection() -> AsyncGenerator[aiosqlite.Connection, None]:
    """In-memory SQLite database with the order schema applied."""
    if not AIOSQLITE_AVAILABLE:
        pytest.skip("aiosqlite not installed")

    async with aiosqlite.connect(":memory:") as db:
        await db.executescript(get_schema(backend="sqlite"))
        await db.commit()
        yield db


@pytest_asyncio.fixture
async def sqlite_store(sqlite_connection: aiosqlite.Connection) -> SQLiteOrderStore:
    return SQLiteOrderStore(sqlite_connection, enable_tracing=False)


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def mock_tracer() -> MockTracer:
    return MockTracer()


@pytest.fixture
def service(in_memory_store: InMemoryOrderStore, fixed_clock: FixedClock) -> OrderService:
    return OrderService(in_memory_store, clock=fixed_clock, enable_tracing=False)


@pytest.fixture
def traced_service(
    in_memory_store: InMemoryOrderStore,
    fixed_clock: FixedClock,
    mock_tracer: MockTracer,
) -> OrderService:
    return OrderService(in_memory_store, clock=fixed_clock, tracer=mock_tracer)
