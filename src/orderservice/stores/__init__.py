"""
Order store implementations.

Key Components:
    OrderStore: Protocol every backend implements
    InMemoryOrderStore: Dictionary-backed store for tests and development
    SQLiteOrderStore: Embedded store on aiosqlite
    PostgreSQLOrderStore: Production store on SQLAlchemy's async engine

Example:
    >>> from orderservice.stores import InMemoryOrderStore
    >>> store = InMemoryOrderStore()
    >>> saved = await store.save(order)
"""

from orderservice.stores.in_memory import InMemoryOrderStore
from orderservice.stores.interface import OrderStore
from orderservice.stores.postgresql import PostgreSQLOrderStore
from orderservice.stores.sqlite import SQLiteOrderStore

__all__ = [
    "OrderStore",
    "InMemoryOrderStore",
    "SQLiteOrderStore",
    "PostgreSQLOrderStore",
]
