"""
Application settings.

Values are read from environment variables prefixed with ``ORDERSERVICE_``
(and from a ``.env`` file when present), e.g.::

    ORDERSERVICE_DATABASE_URL=postgresql+asyncpg://orders@localhost/orders
    ORDERSERVICE_CORS_ALLOW_ALL_ORIGINS=true
"""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

MEMORY_DATABASE_URL = "memory://"


class Settings(BaseSettings):
    """Service configuration loaded from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="ORDERSERVICE_",
        env_file=".env",
        extra="ignore",
    )

    # API
    project_name: str = Field("Order Management API", description="OpenAPI title")
    version: str = Field("0.1.0", description="OpenAPI version string")
    api_prefix: str = Field("/api/v1", description="Prefix for all order routes")
    debug: bool = Field(False, description="Expose docs and enable reload")

    # Server
    host: str = Field("0.0.0.0", description="Bind address for uvicorn")  # nosec B104
    port: int = Field(8080, description="Bind port for uvicorn")

    # Storage
    database_url: str = Field(
        "sqlite+aiosqlite:///./orders.db",
        description=(
            "Order store location: memory:// for the in-memory store, "
            "sqlite+aiosqlite:///<path> or postgresql+asyncpg://..."
        ),
    )
    database_echo: bool = Field(False, description="Log SQL statements (PostgreSQL only)")

    # CORS
    cors_allowed_origins: str = Field(
        "http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed origins",
    )
    cors_allow_all_origins: bool = Field(False, description="Allow every origin")

    # Observability
    enable_tracing: bool = Field(True, description="Create OpenTelemetry spans when available")
    log_level: str = Field("INFO", description="Root log level")

    @property
    def cors_origins(self) -> list[str]:
        """Allowed origins as a list, blanks removed."""
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]

    @property
    def database_backend(self) -> str:
        """Return 'memory', 'sqlite' or 'postgresql' for ``database_url``."""
        scheme = self.database_url.split(":", 1)[0].split("+", 1)[0].lower()
        if scheme == "memory":
            return "memory"
        if scheme == "sqlite":
            return "sqlite"
        if scheme in ("postgresql", "postgres"):
            return "postgresql"
        raise ValueError(f"Unsupported database URL scheme: {scheme}")

    @property
    def sqlite_path(self) -> str:
        """Filesystem path of a ``sqlite+aiosqlite:///`` URL."""
        _, _, path = self.database_url.partition(":///")
        return path or ":memory:"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the service process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
