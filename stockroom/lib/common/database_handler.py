"""Shared database handler with pooled connection lifecycle helpers."""

import asyncpg
import time
from typing import Any, Optional, Sequence
from abc import ABC, abstractmethod

from stockroom.lib.common.masking import mask_params

import logging
logger = logging.getLogger(__name__)

DEFAULT_SLOW_QUERY_THRESHOLD_MS = 1000


class DatabaseHandler(ABC):
    """Manage asyncpg pools and expose a unified query interface."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-friendly identifier used for logging."""
        ...

    def __init__(
            self,
            dsn: str | None = None,
            pool: Optional[asyncpg.Pool] = None,
            slow_query_threshold_ms: int = DEFAULT_SLOW_QUERY_THRESHOLD_MS) -> None:
        """Configure the handler with either a DSN or an existing pool.

        Args:
            dsn (str | None): Database connection string used to create a pool.
            pool (asyncpg.Pool | None): Pre-existing pool to reuse.
            slow_query_threshold_ms (int): Queries slower than this are logged as warnings.

        Raises:
            ValueError: If neither ``dsn`` nor ``pool`` is provided.
        """
        if not dsn and not pool:
            logger.error(f"{self.name} was initialized without DSN or Pool for database connection.")
            raise ValueError("Provide either dsn or pool")
        self._dsn = dsn
        self._pool: Optional[asyncpg.Pool] = pool
        self._slow_query_threshold_ms = slow_query_threshold_ms

    @property
    def pool(self) -> asyncpg.Pool:
        """Return the active pool or raise if it is not initialized."""
        if self._pool is None:
            raise RuntimeError(f"{self.name} pool not started yet")
        return self._pool

    async def init_pool(self) -> None:
        """Create the asyncpg pool if this handler owns it."""
        if self._pool is None:
            self._pool = await asyncpg.create_pool(self._dsn)

    async def close_pool(self) -> None:
        """Close the owned pool."""
        if self._pool is not None and not self._pool._closed:   # type: ignore
            await self._pool.close()

    async def execute(self, query: str, params: Sequence[Any] = ()) -> list[asyncpg.Record]:
        """Run ``query`` with positional ``params`` and return all rows.

        Each call acquires its own pool connection, so independent reads
        may be awaited concurrently.
        """
        start = time.perf_counter()
        try:
            rows = await self.pool.fetch(query, *params)
        except Exception as exc:
            logger.error(
                f"{self.name}.execute: Query execution failed ({type(exc).__name__}) "
                f"params={mask_params(params)}",
                exc_info=True
            )
            raise
        duration_ms = (time.perf_counter() - start) * 1000
        if duration_ms > self._slow_query_threshold_ms:
            logger.warning(
                "%s.execute: Slow query detected (%.0fms) params=%s",
                self.name, duration_ms, mask_params(params)
            )
        logger.debug("%s.execute: %d rows in %.1fms", self.name, len(rows), duration_ms)
        return rows
