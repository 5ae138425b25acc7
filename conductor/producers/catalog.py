"""
Producer catalog: the persisted mapping from producer id to name and schema.

The catalog is the single source of truth for whether a producer is registered
and with what shape. Nothing is cached in process; every lookup is a store
round-trip. Store failures are logged here with the store's error text and
re-raised as `ConductorError` so only a code crosses the service boundary.
"""

from __future__ import annotations

import asyncio
from typing import Any, Protocol, Sequence, runtime_checkable

import asyncpg

from conductor.domain.errors import ConductorError, ErrorCode
from conductor.domain.models import ProducerRecord, schema_from_json, schema_to_json
from conductor.sql.ddl import build_create_catalog_table
from conductor.sql.dml import build_catalog_count, build_catalog_insert, build_catalog_lookup
from conductor.utils.logging import get_logger

log = get_logger(__name__)

_STORE_ERRORS = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    TimeoutError,
    asyncio.TimeoutError,
)


@runtime_checkable
class ProducerCatalog(Protocol):
    """
    Repository interface over the catalog and the producer data tables.
    """

    async def ensure_table(self) -> None:
        """Create the catalog table if it does not exist."""
        ...

    async def insert(self, record: ProducerRecord, create_table_sql: str) -> None:
        """
        Create the producer's data table and its catalog row as one unit.

        Raises
        ------
        ConductorError
            `INVALID_UUID` if the id is already registered, `INTERNAL_ERROR`
            for any other store failure.
        """
        ...

    async def lookup(self, producer_id: str) -> ProducerRecord:
        """
        Fetch the catalog entry for `producer_id`.

        Raises
        ------
        ConductorError
            `INVALID_UUID` for an empty id, `UNREGISTERED` when no row exists
            or the store is unreachable, `INTERNAL_ERROR` for duplicate or
            malformed rows.
        """
        ...

    async def insert_row(self, sql: str, params: Sequence[Any]) -> None:
        """Execute a data-row INSERT; store failures raise `INTERNAL_ERROR`."""
        ...


class AsyncpgProducerCatalog:
    """
    ProducerCatalog backed by an asyncpg pool.

    Parameters
    ----------
    pool : asyncpg.Pool
        Pool connected to the store's PostgreSQL wire endpoint.
    catalog_table : str
        Name of the catalog table.
    """

    def __init__(self, pool: asyncpg.Pool, catalog_table: str = "producers") -> None:
        self._pool = pool
        self.catalog_table = catalog_table

    async def ensure_table(self) -> None:
        sql = build_create_catalog_table(self.catalog_table)
        log.info("Creating producers table", extra={"catalog_table": self.catalog_table})
        try:
            async with self._pool.acquire() as conn:
                await conn.execute(sql)
        except _STORE_ERRORS as exc:
            log.error("Could not create the catalog table: %s", exc)
            raise ConductorError(ErrorCode.INTERNAL_ERROR, "catalog table creation failed") from exc

    async def insert(self, record: ProducerRecord, create_table_sql: str) -> None:
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    existing = await conn.fetchval(
                        build_catalog_count(self.catalog_table), record.id
                    )
                    if existing:
                        raise ConductorError(
                            ErrorCode.INVALID_UUID, f"Producer {record.id} is already registered"
                        )
                    log.info("Creating table with sql %s", create_table_sql)
                    await conn.execute(create_table_sql)
                    await conn.execute(
                        build_catalog_insert(self.catalog_table),
                        record.name,
                        record.id,
                        schema_to_json(record.producer_schema),
                    )
        except asyncpg.exceptions.UniqueViolationError as exc:
            log.error("Producer %s is already registered: %s", record.id, exc)
            raise ConductorError(
                ErrorCode.INVALID_UUID, f"Producer {record.id} is already registered"
            ) from exc
        except _STORE_ERRORS as exc:
            log.error("There was an error persisting the producer to the db: %s", exc)
            raise ConductorError(ErrorCode.INTERNAL_ERROR, "producer persistence failed") from exc

    async def lookup(self, producer_id: str) -> ProducerRecord:
        if not producer_id:
            log.error("Incoming request had an empty uuid")
            raise ConductorError(ErrorCode.INVALID_UUID, "empty producer id")

        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(build_catalog_lookup(self.catalog_table), producer_id)
        except _STORE_ERRORS as exc:
            log.error("Error getting producer from database: %s", exc)
            raise ConductorError(ErrorCode.UNREGISTERED, "catalog unreachable") from exc

        if not rows:
            log.error("No rows returned for uuid: %s", producer_id)
            raise ConductorError(ErrorCode.UNREGISTERED, f"No producer {producer_id}")
        if len(rows) > 1:
            log.error("There were multiple entries for uuid: %s", producer_id)
            raise ConductorError(ErrorCode.INTERNAL_ERROR, f"Duplicate producer {producer_id}")

        row = rows[0]
        name = row.get("name") or ""
        row_id = row.get("uuid") or ""
        schema_text = row.get("schema") or ""
        if not name or not row_id or not schema_text:
            log.error("Couldn't deserialize row into a producer for uuid: %s", producer_id)
            raise ConductorError(ErrorCode.INTERNAL_ERROR, f"Malformed producer {producer_id}")
        try:
            schema = schema_from_json(schema_text)
        except ValueError as exc:
            log.error("Stored schema for uuid %s is not valid: %s", producer_id, exc)
            raise ConductorError(
                ErrorCode.INTERNAL_ERROR, f"Malformed schema for {producer_id}"
            ) from exc
        return ProducerRecord(name=name, id=row_id, producer_schema=schema)

    async def insert_row(self, sql: str, params: Sequence[Any]) -> None:
        try:
            async with self._pool.acquire() as conn:
                await conn.execute(sql, *params)
        except _STORE_ERRORS as exc:
            log.error("Error persisting producer emit to db: %s", exc)
            raise ConductorError(ErrorCode.INTERNAL_ERROR, "emit persistence failed") from exc


__all__ = ["AsyncpgProducerCatalog", "ProducerCatalog"]
