"""FastAPI dependencies."""

from fastapi import Request

from orderservice.service import OrderService


def get_order_service(request: Request) -> OrderService:
    """Return the OrderService attached to the running application."""
    service: OrderService | None = getattr(request.app.state, "order_service", None)
    if service is None:
        raise RuntimeError("Order service is not initialized; is the app lifespan running?")
    return service
