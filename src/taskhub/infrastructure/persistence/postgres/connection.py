"""PostgreSQL async connection pool."""

import psycopg
import structlog
from psycopg_pool import AsyncConnectionPool

log = structlog.get_logger()


def create_pool(conninfo: str, min_size: int = 2, max_size: int = 10) -> AsyncConnectionPool:
    """Create async connection pool.

    Pool is created with open=False. Caller must call await pool.open()
    before use (e.g. via PoolLifespanMiddleware in ASGI lifespan).
    """
    return AsyncConnectionPool(
        conninfo=conninfo,
        min_size=min_size,
        max_size=max_size,
        open=False,
    )


async def check_connection(pool: AsyncConnectionPool, timeout: float = 2.0) -> bool:
    """Run a trivial query to confirm the database is reachable."""
    try:
        async with pool.connection(timeout=timeout) as conn:
            cur = await conn.execute("SELECT 1")
            row = await cur.fetchone()
    except psycopg.Error as e:
        log.warning("db.unreachable", error=str(e))
        return False
    return bool(row and row[0] == 1)
