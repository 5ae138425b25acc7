"""
Registration and emit validation.

`validate_registration` checks run in a fixed order and stop at the first
failure, so a registration with several problems always reports the same code.
"""

from __future__ import annotations

from typing import Any, Mapping

from conductor.domain.errors import ErrorCode
from conductor.domain.models import Registration, Schema
from conductor.sql.ddl import TIMESTAMP_COLUMN
from conductor.sql.identifier import is_safe_identifier
from conductor.utils.logging import get_logger

log = get_logger(__name__)

# Largest column count the store supports.
MAX_COLUMNS = 2_147_483_647

_ILLEGAL_IDENTIFIER_CHARS = (".", '"')


def _has_illegal_chars(identifier: str) -> bool:
    return any(char in identifier for char in _ILLEGAL_IDENTIFIER_CHARS)


def _log_rejection(registration: Registration, reason: str) -> None:
    log.error(
        "Producer registration failed. %s JSON = %s",
        reason,
        registration.model_dump_json(by_alias=True),
        extra={"producer_name": registration.name},
    )


def validate_registration(registration: Registration, strict: bool = False) -> ErrorCode:
    """
    Check a registration for structural validity.

    Parameters
    ----------
    registration : Registration
        The proposed registration.
    strict : bool
        Additionally require the custom id and column names to match the
        identifier allow-list (`[A-Za-z0-9_-]+`).

    Returns
    -------
    ErrorCode
        `ErrorCode.NO_ERROR` when the registration may proceed.
    """
    if not registration.name:
        _log_rejection(registration, "Producer name is empty.")
        return ErrorCode.NAME_INVALID

    custom_id = registration.custom_id
    if custom_id is not None:
        if not custom_id or _has_illegal_chars(custom_id):
            _log_rejection(registration, "Custom ID has illegal chars or is empty.")
            return ErrorCode.INVALID_UUID
        if strict and not is_safe_identifier(custom_id):
            _log_rejection(registration, "Custom ID is outside the identifier allow-list.")
            return ErrorCode.INVALID_UUID

    schema = registration.producer_schema
    if TIMESTAMP_COLUMN in schema:
        _log_rejection(registration, "Column with name ts. This is a reserved name.")
        return ErrorCode.TIMESTAMP_DEFINED

    if not schema:
        _log_rejection(registration, "No columns in schema.")
        return ErrorCode.NO_MEMBERS

    for column_name in schema:
        if not column_name:
            _log_rejection(registration, "Column with an empty name.")
            return ErrorCode.INVALID_COLUMN_NAMES
        if _has_illegal_chars(column_name):
            _log_rejection(
                registration,
                f"Column with name {column_name} is invalid as it contains a '.' or a '\"'.",
            )
            return ErrorCode.INVALID_COLUMN_NAMES
        if strict and not is_safe_identifier(column_name):
            _log_rejection(
                registration,
                f"Column with name {column_name} is outside the identifier allow-list.",
            )
            return ErrorCode.INVALID_COLUMN_NAMES

    if len(schema) > MAX_COLUMNS:
        _log_rejection(
            registration,
            f"Schema had {len(schema)} columns which is more than the maximum of {MAX_COLUMNS:,}.",
        )
        return ErrorCode.TOO_MANY_COLUMNS

    return ErrorCode.NO_ERROR


def validate_emit_fields(data: Mapping[str, Any], schema: Schema) -> bool:
    """True when the emitted keys are exactly the registered columns."""
    return set(data) == set(schema)


def classify_emit_mismatch(data: Mapping[str, Any], schema: Schema) -> ErrorCode:
    """
    Pick the code for an emit whose keys do not match the schema.

    Unknown columns win over missing ones.
    """
    if any(key not in schema for key in data):
        return ErrorCode.INVALID_COLUMN_NAMES
    return ErrorCode.INVALID_SCHEMA


__all__ = [
    "MAX_COLUMNS",
    "classify_emit_mismatch",
    "validate_emit_fields",
    "validate_registration",
]
