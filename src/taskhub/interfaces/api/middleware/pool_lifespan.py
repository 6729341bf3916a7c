"""Pool lifespan middleware - opens the connection pool on startup, closes it on shutdown."""

from typing import Any

import structlog
from psycopg_pool import AsyncConnectionPool

log = structlog.get_logger()


class PoolLifespanMiddleware:
    """Ties the process-wide connection pool to the ASGI lifespan."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    async def process_startup(self, scope: dict[str, Any], event: dict[str, Any]) -> None:
        await self._pool.open()
        log.info("db.pool_opened", min_size=self._pool.min_size, max_size=self._pool.max_size)

    async def process_shutdown(self, scope: dict[str, Any], event: dict[str, Any]) -> None:
        await self._pool.close()
        log.info("db.pool_closed")
