"""
Test utilities for orderservice.

Components:
    OrderStoreConformanceSuite: Contract tests every OrderStore backend must pass
        (``orderservice.testing.conformance``)
    make_order: Factory for an unsaved two-item order

Example:
    >>> from orderservice.testing.conformance import OrderStoreConformanceSuite
    >>>
    >>> class TestMyStoreConformance(OrderStoreConformanceSuite):
    ...     def create_store(self):
    ...         return MyOrderStore()

Note:
    This module is optional and intended for test code only. It requires
    pytest, so it is not imported by the package root.
"""
