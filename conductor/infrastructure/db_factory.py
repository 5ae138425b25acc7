"""
Database connection factory utilities for the Conductor producer service.

Provides centralized management of the asyncpg connection pool used to reach
the store's PostgreSQL wire endpoint. The PoolManager singleton ensures the
pool is cleaned up on application exit.

Includes retry logic for transient connection failures using tenacity.
"""

from __future__ import annotations

import atexit
import logging
import threading
from typing import Optional

import asyncpg
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from conductor.config import Settings, get_settings
from conductor.utils.logging import get_logger

log = get_logger(__name__)

_TRANSIENT_CONNECT_ERRORS = (
    OSError,
    ConnectionError,
    asyncpg.exceptions.CannotConnectNowError,
)


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a DSN string from settings."""
    settings = settings or get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(_TRANSIENT_CONNECT_ERRORS),
    before_sleep=before_sleep_log(log, logging.WARNING),
    reraise=True,
)
async def create_async_pool(dsn: str, min_size: int = 1, max_size: int = 10) -> asyncpg.Pool:
    """
    Create an asyncpg pool with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.

    Raises
    ------
    OSError
        If the endpoint stays unreachable after all retry attempts.
    """
    log.debug("Creating connection pool", extra={"min_size": min_size, "max_size": max_size})
    return await asyncpg.create_pool(dsn, min_size=min_size, max_size=max_size)


class PoolManager:
    """
    Thread-safe singleton for managing the asyncpg pool.

    Handles lifecycle management with automatic cleanup via atexit hook.
    """

    _instance: Optional["PoolManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "PoolManager":
        """Create or return the singleton instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._async_pool = None
                atexit.register(cls._instance.close_all)
            return cls._instance

    async def get_async_pool(
        self,
        min_size: Optional[int] = None,
        max_size: Optional[int] = None,
        dsn: Optional[str] = None,
    ) -> asyncpg.Pool:
        """
        Get or create the asynchronous connection pool.

        Parameters
        ----------
        min_size : int | None
            Minimum number of idle connections; defaults to settings.
        max_size : int | None
            Maximum total connections; defaults to settings.
        dsn : str | None
            Optional DSN override.
        """
        if self._async_pool is None:
            settings = get_settings()
            pool = await create_async_pool(
                dsn or build_dsn(settings),
                min_size=min_size or settings.pool_min_size,
                max_size=max_size or settings.pool_max_size,
            )
            with self._lock:
                if self._async_pool is None:
                    self._async_pool = pool
                    pool = None
            if pool is not None:
                await pool.close()
        return self._async_pool

    async def close(self) -> None:
        """Gracefully close the pool, waiting for checked-out connections."""
        with self._lock:
            pool, self._async_pool = self._async_pool, None
        if pool is not None:
            await pool.close()

    def close_all(self) -> None:
        """
        Terminate the pool without awaiting.

        This is called automatically on exit via atexit hook, when no event
        loop is available to await a graceful close.
        """
        with self._lock:
            pool, self._async_pool = self._async_pool, None
        if pool is not None:
            pool.terminate()


__all__ = [
    "PoolManager",
    "build_dsn",
    "create_async_pool",
]
