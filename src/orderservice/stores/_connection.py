"""Engine-or-connection handling for the SQLAlchemy order store."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine


@asynccontextmanager
async def execute_with_connection(
    conn: AsyncConnection | AsyncEngine,
    transactional: bool = True,
) -> AsyncIterator[AsyncConnection]:
    """
    Yield a connection to run statements on.

    Given an AsyncEngine, a new connection is checked out: inside
    ``engine.begin()`` when ``transactional`` (committed on success, rolled
    back on error) and ``engine.connect()`` otherwise. Given an
    AsyncConnection, it is yielded as is and the caller owns the transaction.

    Example:
        >>> async with execute_with_connection(engine) as conn:
        ...     await conn.execute(_INSERT_ORDER, params)
    """
    if not isinstance(conn, AsyncEngine):
        yield conn
        return

    if transactional:
        async with conn.begin() as connection:
            yield connection
    else:
        async with conn.connect() as connection:
            yield connection
