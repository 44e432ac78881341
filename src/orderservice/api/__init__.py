"""
REST API for order management.

Example:
    >>> from orderservice.api import create_app
    >>> app = create_app()  # store opened from ORDERSERVICE_DATABASE_URL
    >>>
    >>> from orderservice.stores import InMemoryOrderStore
    >>> app = create_app(store=InMemoryOrderStore())
"""

from orderservice.api.app import AppFactory, create_app, open_store

__all__ = [
    "AppFactory",
    "create_app",
    "open_store",
]
