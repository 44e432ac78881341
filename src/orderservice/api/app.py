"""
Application factory for the order management API.

``create_app()`` wires settings, CORS, exception handlers and routes. The
order store is either injected (tests, embedding) or opened from
``Settings.database_url`` for the lifetime of the application.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orderservice.api.errors import register_exception_handlers
from orderservice.api.routes import router as orders_router
from orderservice.clock import Clock
from orderservice.config import Settings, get_settings
from orderservice.migrations import get_schema, split_statements
from orderservice.service import OrderService
from orderservice.stores import InMemoryOrderStore, OrderStore

logger = logging.getLogger(__name__)

CORS_ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


@asynccontextmanager
async def open_store(settings: Settings) -> AsyncIterator[OrderStore]:
    """
    Open the order store described by ``settings.database_url``.

    Creates the schema if it does not exist yet and closes the underlying
    connection or engine on exit.
    """
    backend = settings.database_backend

    if backend == "memory":
        yield InMemoryOrderStore(enable_tracing=settings.enable_tracing)

    elif backend == "sqlite":
        import aiosqlite

        from orderservice.stores.sqlite import SQLiteOrderStore

        async with aiosqlite.connect(settings.sqlite_path) as connection:
            await connection.executescript(get_schema(backend="sqlite"))
            await connection.commit()
            logger.info("Using SQLite order store at %s", settings.sqlite_path)
            yield SQLiteOrderStore(connection, enable_tracing=settings.enable_tracing)

    else:
        from sqlalchemy import text
        from sqlalchemy.ext.asyncio import create_async_engine

        from orderservice.stores.postgresql import PostgreSQLOrderStore

        engine = create_async_engine(settings.database_url, echo=settings.database_echo)
        try:
            async with engine.begin() as conn:
                for statement in split_statements(get_schema(backend="postgresql")):
                    await conn.execute(text(statement))
            logger.info("Using PostgreSQL order store")
            yield PostgreSQLOrderStore(engine, enable_tracing=settings.enable_tracing)
        finally:
            await engine.dispose()


class AppFactory:
    """
    Factory for creating and configuring the FastAPI application.

    Each configuration step is handled by a dedicated method.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        store: OrderStore | None = None,
        clock: Clock | None = None,
    ) -> None:
        """
        Initialize app factory.

        Args:
            settings: Application settings (uses environment if not provided)
            store: Order store to use instead of opening one from settings
            clock: Clock for order timestamps (system clock if not provided)
        """
        self._settings = settings or get_settings()
        self._store = store
        self._clock = clock

    def create_app(self) -> FastAPI:
        """Create and configure the FastAPI application."""
        app = FastAPI(
            title=self._settings.project_name,
            description="APIs for managing orders",
            version=self._settings.version,
            debug=self._settings.debug,
            lifespan=self._lifespan,
        )

        if self._store is not None:
            app.state.order_service = self._build_service(self._store)

        self._configure_cors(app)
        register_exception_handlers(app)
        self._configure_routes(app)
        self._configure_health_endpoint(app)

        logger.info("Application created: %s", self._settings.project_name)
        return app

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI) -> AsyncIterator[None]:
        if self._store is not None:
            yield
            return

        async with open_store(self._settings) as store:
            app.state.order_service = self._build_service(store)
            try:
                yield
            finally:
                app.state.order_service = None

    def _build_service(self, store: OrderStore) -> OrderService:
        return OrderService(
            store,
            clock=self._clock,
            enable_tracing=self._settings.enable_tracing,
        )

    def _configure_cors(self, app: FastAPI) -> None:
        """
        Allow browser clients on the configured origins.

        ``cors_allow_all_origins`` accepts any origin while still allowing
        credentials, so origins are matched by regex rather than ``*``.
        """
        if self._settings.cors_allow_all_origins:
            app.add_middleware(
                CORSMiddleware,
                allow_origin_regex=".*",
                allow_credentials=True,
                allow_methods=CORS_ALLOWED_METHODS,
                allow_headers=["*"],
            )
        else:
            app.add_middleware(
                CORSMiddleware,
                allow_origins=self._settings.cors_origins,
                allow_credentials=True,
                allow_methods=CORS_ALLOWED_METHODS,
                allow_headers=["*"],
            )

    def _configure_routes(self, app: FastAPI) -> None:
        app.include_router(orders_router, prefix=self._settings.api_prefix)

    def _configure_health_endpoint(self, app: FastAPI) -> None:
        @app.get("/health", tags=["health"])
        async def health_check() -> dict[str, str]:
            """Report that the application is up."""
            return {"status": "ok"}


def create_app(
    settings: Settings | None = None,
    store: OrderStore | None = None,
    clock: Clock | None = None,
) -> FastAPI:
    """Create the order management FastAPI application."""
    return AppFactory(settings=settings, store=store, clock=clock).create_app()
