"""
Infrastructure package for the Conductor producer service.

Centralizes database connectivity concerns (DSN, pooling, connect retries).
Keep this layer focused on I/O and resource management, decoupled from
validation and orchestration logic.
"""

from conductor.infrastructure.db_factory import (
    PoolManager,
    build_dsn,
    create_async_pool,
)

__all__ = [
    "PoolManager",
    "build_dsn",
    "create_async_pool",
]
