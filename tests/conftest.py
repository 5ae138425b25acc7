"""
Pytest configuration for the Conductor producer service.

Provides fixtures for:
- Settings and DSN for integration tests against a real store
- An in-memory asyncpg pool double that understands catalog statements
- A catalog bound to that double
"""

from __future__ import annotations

import asyncio
import os
from contextlib import AbstractAsyncContextManager
from typing import Any, Dict, List, Tuple

import asyncpg
import psycopg
import pytest

from conductor.config import Settings
from conductor.producers.catalog import AsyncpgProducerCatalog

CATALOG_TABLE = "producers"


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "8812")),
        db_user=os.getenv("DB_USER", "admin"),
        db_password=os.getenv("DB_PASSWORD", "quest"),
        db_name=os.getenv("DB_NAME", "qdb"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if the store's PostgreSQL endpoint is reachable.

    Used to conditionally skip integration tests when it is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


class _AsyncNoopContext(AbstractAsyncContextManager[None]):
    async def __aenter__(self) -> None:
        return None

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        del exc_type, exc, tb
        return False


class FakeStore:
    """
    Shared state behind the fake pool.

    `errors` maps a connection method name ("fetch", "fetchval", "execute")
    to the exception it should raise.
    """

    def __init__(self, catalog_table: str = CATALOG_TABLE) -> None:
        self.catalog_table = catalog_table
        self.catalog_rows: List[Dict[str, str]] = []
        self.created_tables: List[str] = []
        self.data_rows: List[Tuple[str, Tuple[Any, ...]]] = []
        self.calls: List[Tuple[str, str, Tuple[Any, ...]]] = []
        self.errors: Dict[str, BaseException] = {}

    def add_producer(self, name: str, producer_id: str, schema: str) -> None:
        self.catalog_rows.append({"name": name, "uuid": producer_id, "schema": schema})

    def _maybe_fail(self, method: str) -> None:
        error = self.errors.get(method)
        if error is not None:
            raise error


class _FakeConnection:
    def __init__(self, store: FakeStore) -> None:
        self._store = store

    def transaction(self) -> _AsyncNoopContext:
        return _AsyncNoopContext()

    async def fetchval(self, sql: str, *params: Any) -> int:
        self._store.calls.append(("fetchval", sql, params))
        self._store._maybe_fail("fetchval")
        (producer_id,) = params
        count = sum(1 for row in self._store.catalog_rows if row["uuid"] == producer_id)
        # Yield after counting so concurrent registrations race past the check.
        await asyncio.sleep(0)
        return count

    async def fetch(self, sql: str, *params: Any) -> List[Dict[str, str]]:
        self._store.calls.append(("fetch", sql, params))
        self._store._maybe_fail("fetch")
        (producer_id,) = params
        return [dict(row) for row in self._store.catalog_rows if row["uuid"] == producer_id]

    async def execute(self, sql: str, *params: Any) -> str:
        self._store.calls.append(("execute", sql, params))
        self._store._maybe_fail("execute")
        if sql.startswith("CREATE TABLE"):
            self._store.created_tables.append(sql)
        elif sql.startswith(f'INSERT INTO "{self._store.catalog_table}" '):
            name, producer_id, schema = params
            if any(row["uuid"] == producer_id for row in self._store.catalog_rows):
                raise asyncpg.exceptions.UniqueViolationError("duplicate key value")
            self._store.add_producer(name, producer_id, schema)
        elif sql.startswith("INSERT INTO"):
            self._store.data_rows.append((sql, params))
        return "OK"


class _AcquireContext(AbstractAsyncContextManager[_FakeConnection]):
    def __init__(self, conn: _FakeConnection) -> None:
        self._conn = conn

    async def __aenter__(self) -> _FakeConnection:
        return self._conn

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        del exc_type, exc, tb
        return False


class FakePool:
    def __init__(self, store: FakeStore) -> None:
        self.store = store
        self.closed = False

    def acquire(self) -> _AcquireContext:
        # A fresh connection per acquire, all sharing one store.
        return _AcquireContext(_FakeConnection(self.store))

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def fake_pool(fake_store: FakeStore) -> FakePool:
    return FakePool(fake_store)


@pytest.fixture
def catalog(fake_pool: FakePool) -> AsyncpgProducerCatalog:
    """Catalog wired to the in-memory pool double."""
    return AsyncpgProducerCatalog(fake_pool, catalog_table=CATALOG_TABLE)


@pytest.fixture
def default_settings() -> Settings:
    """Settings with every catalog/DDL option at its default."""
    return Settings(partition_by=None, strict_identifiers=False, catalog_table=CATALOG_TABLE)
