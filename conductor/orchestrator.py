"""
Orchestration of the three producer operations exposed at the boundary.

Usage:
    from conductor.orchestrator import register, emit, check_registered

    result = await register(catalog, Registration(name="station", schema={"x": "Int"}))
    await emit(catalog, Emit(uuid=result.id, data={"x": 5}))

Each call is an independent unit of work. Input-shape problems are rejected
before the store is touched; store failures come back as `InternalError`.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional, Tuple

from conductor.config import get_settings
from conductor.domain.errors import ConductorError, ErrorCode
from conductor.domain.models import (
    Emit,
    EmitResult,
    ProducerRecord,
    Registration,
    RegistrationResult,
    Schema,
)
from conductor.producers.catalog import ProducerCatalog
from conductor.producers.coercion import coerce_value
from conductor.producers.identity import assign_producer_id
from conductor.producers.validation import (
    classify_emit_mismatch,
    validate_emit_fields,
    validate_registration,
)
from conductor.sql.ddl import TIMESTAMP_COLUMN, build_create_table
from conductor.sql.dml import build_insert
from conductor.utils.logging import get_logger

log = get_logger(__name__)

_EPOCH = datetime(1970, 1, 1)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _resolve_timestamp(timestamp: Optional[int]) -> datetime:
    """Convert epoch microseconds to a naive UTC datetime; default to now."""
    if timestamp is None:
        return _utc_now()
    try:
        return _EPOCH + timedelta(microseconds=timestamp)
    except OverflowError:
        raise ConductorError(
            ErrorCode.INVALID_DATA, f"Timestamp {timestamp} is out of range"
        ) from None


def _build_row(data: dict, schema: Schema) -> Tuple[List[str], List[Any]]:
    """
    Coerce each emitted field by its declared type.

    Columns and parameters are built together so their order always matches.
    """
    columns: List[str] = []
    params: List[Any] = []
    for column_name, value in data.items():
        data_type = schema.get(column_name)
        if data_type is None:
            raise ConductorError(
                ErrorCode.INVALID_COLUMN_NAMES, f"Schema doesn't contain key {column_name}"
            )
        params.append(coerce_value(value, data_type))
        columns.append(column_name)
    return columns, params


async def register(catalog: ProducerCatalog, registration: Registration) -> RegistrationResult:
    """
    Validate, assign an id, create the data table and record the producer.

    Returns
    -------
    RegistrationResult
        `id` is set only when `error` is `NoError`.
    """
    settings = get_settings()
    error = validate_registration(registration, strict=settings.strict_identifiers)
    if error != ErrorCode.NO_ERROR:
        return RegistrationResult(error=error)

    producer_id = assign_producer_id(registration)
    record = ProducerRecord(
        name=registration.name,
        id=producer_id,
        producer_schema=registration.producer_schema,
    )
    create_table_sql = build_create_table(
        registration.producer_schema, producer_id, partition_by=settings.partition_by
    )
    try:
        await catalog.insert(record, create_table_sql)
    except ConductorError as exc:
        log.error(
            "Producer registration failed: %s",
            exc.message,
            extra={"producer_id": producer_id, "error": exc.code.identifier},
        )
        return RegistrationResult(error=exc.code)

    log.info(
        "Producer registered",
        extra={"producer_id": producer_id, "producer_name": registration.name},
    )
    return RegistrationResult(error=ErrorCode.NO_ERROR, id=producer_id)


async def emit(catalog: ProducerCatalog, record: Emit) -> EmitResult:
    """
    Validate an emitted record against its producer's schema and append it.
    """
    try:
        producer = await catalog.lookup(record.producer_id)
    except ConductorError as exc:
        return EmitResult(error=exc.code)

    schema = producer.producer_schema
    if not schema:
        log.error("Empty registered schema for uuid: %s", record.producer_id)
        return EmitResult(error=ErrorCode.NO_MEMBERS)

    if not validate_emit_fields(record.data, schema):
        error = classify_emit_mismatch(record.data, schema)
        log.error(
            "Emitted fields do not match the registered schema",
            extra={
                "producer_id": record.producer_id,
                "error": error.identifier,
                "emitted": sorted(record.data),
                "registered": sorted(schema),
            },
        )
        return EmitResult(error=error)

    try:
        columns, params = _build_row(record.data, schema)
        ts = _resolve_timestamp(record.timestamp)
        sql = build_insert(producer.id, [TIMESTAMP_COLUMN, *columns])
        await catalog.insert_row(sql, [ts, *params])
    except ConductorError as exc:
        log.error(
            "Error persisting producer emit: %s",
            exc.message,
            extra={"producer_id": record.producer_id, "error": exc.code.identifier},
        )
        return EmitResult(error=exc.code)

    log.debug("Emit stored", extra={"producer_id": record.producer_id, "columns": len(columns)})
    return EmitResult(error=ErrorCode.NO_ERROR)


async def check_registered(catalog: ProducerCatalog, producer_id: str) -> bool:
    """True iff the catalog holds a well-formed entry for `producer_id`."""
    try:
        await catalog.lookup(producer_id)
    except ConductorError:
        return False
    return True


__all__ = ["check_registered", "emit", "register"]
