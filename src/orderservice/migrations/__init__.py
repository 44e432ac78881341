"""
Database schema for the order store.

Tables:
    - orders: one row per order
    - order_items: line items, owned by their order (ON DELETE CASCADE)

Supported backends:
    - postgresql (default)
    - sqlite

Usage:
    from orderservice.migrations import get_schema

    # PostgreSQL
    async with engine.begin() as conn:
        for statement in split_statements(get_schema()):
            await conn.execute(text(statement))

    # SQLite
    async with aiosqlite.connect(":memory:") as db:
        await db.executescript(get_schema(backend="sqlite"))

Monetary columns are NUMERIC(19, 2) in PostgreSQL. SQLite stores them as
TEXT so decimal values round-trip without passing through a float.
"""

from typing import Literal

BackendName = Literal["postgresql", "sqlite"]

_POSTGRESQL_SCHEMA = """
CREATE TABLE IF NOT EXISTS orders (
    id BIGSERIAL PRIMARY KEY,
    account_id VARCHAR(255) NOT NULL,
    total_amount NUMERIC(19, 2) NOT NULL,
    shipping_address TEXT,
    payment_id VARCHAR(255),
    status VARCHAR(32) NOT NULL,
    created_at TIMESTAMP WITH TIME ZONE NOT NULL,
    updated_at TIMESTAMP WITH TIME ZONE
);

CREATE INDEX IF NOT EXISTS idx_orders_account_id ON orders (account_id);

CREATE TABLE IF NOT EXISTS order_items (
    id BIGSERIAL PRIMARY KEY,
    order_id BIGINT NOT NULL REFERENCES orders (id) ON DELETE CASCADE,
    position INTEGER NOT NULL,
    product_id VARCHAR(255) NOT NULL,
    quantity INTEGER,
    price NUMERIC(19, 2),
    subtotal NUMERIC(19, 2) NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_order_items_order_id ON order_items (order_id);
"""

_SQLITE_SCHEMA = """
CREATE TABLE IF NOT EXISTS orders (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    account_id TEXT NOT NULL,
    total_amount TEXT NOT NULL,
    shipping_address TEXT,
    payment_id TEXT,
    status TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT
);

CREATE INDEX IF NOT EXISTS idx_orders_account_id ON orders (account_id);

CREATE TABLE IF NOT EXISTS order_items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    order_id INTEGER NOT NULL REFERENCES orders (id) ON DELETE CASCADE,
    position INTEGER NOT NULL,
    product_id TEXT NOT NULL,
    quantity INTEGER,
    price TEXT,
    subtotal TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_order_items_order_id ON order_items (order_id);
"""

_SCHEMAS: dict[str, str] = {
    "postgresql": _POSTGRESQL_SCHEMA,
    "sqlite": _SQLITE_SCHEMA,
}


def get_schema(backend: BackendName = "postgresql") -> str:
    """
    Get the full DDL for a backend.

    Args:
        backend: The database backend (postgresql, sqlite). Defaults to postgresql.

    Returns:
        SQL script creating all tables and indexes (idempotent)

    Raises:
        ValueError: If the backend is unknown
    """
    try:
        return _SCHEMAS[backend]
    except KeyError:
        raise ValueError(
            f"Unknown backend '{backend}'. Available backends: {list_backends()}"
        ) from None


def split_statements(script: str) -> list[str]:
    """
    Split a schema script into individual statements.

    asyncpg only executes one statement per call, so PostgreSQL setup runs
    the statements one by one.
    """
    return [statement.strip() for statement in script.split(";") if statement.strip()]


def list_backends() -> list[str]:
    """
    List all backends that have a schema.

    Example:
        >>> list_backends()
        ['postgresql', 'sqlite']
    """
    return sorted(_SCHEMAS)


__all__ = [
    "BackendName",
    "get_schema",
    "split_statements",
    "list_backends",
]
