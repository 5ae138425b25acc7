"""
Domain models for producer registration and emission.

Wire names follow the client protocol (`use_custom_id`, `uuid`), while
the python attribute names describe what the field holds. Both are accepted
when parsing.
"""
from __future__ import annotations

import json
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, StrictInt, model_validator

from conductor.domain.errors import ErrorCode


class DataType(str, Enum):
    """
    Column types a producer may declare.

    The value is the wire/JSON form; `column_type` is the store column type.
    """

    INT = "Int"
    FLOAT = "Float"
    TIME = "Time"
    STRING = "String"
    BINARY = "Binary"
    BOOL = "Bool"
    DOUBLE = "Double"

    @property
    def column_type(self) -> str:
        return _COLUMN_TYPES[self]


_COLUMN_TYPES: Dict[DataType, str] = {
    DataType.INT: "long",
    DataType.FLOAT: "float",
    DataType.TIME: "timestamp",
    DataType.STRING: "string",
    DataType.BINARY: "binary",
    DataType.BOOL: "boolean",
    DataType.DOUBLE: "double",
}

Schema = Dict[str, DataType]


def schema_to_json(schema: Schema) -> str:
    """Serialize a schema to the JSON text stored in the catalog."""
    return json.dumps({name: data_type.value for name, data_type in schema.items()})


def schema_from_json(text: str) -> Schema:
    """
    Parse catalog JSON text back into a schema.

    Raises ValueError (json.JSONDecodeError is a subclass) on malformed text,
    a non-object payload, or an unknown type name.
    """
    raw = json.loads(text)
    if not isinstance(raw, dict):
        raise ValueError(f"Schema JSON must be an object, got {type(raw).__name__}")
    return {str(name): DataType(value) for name, value in raw.items()}


class Registration(BaseModel):
    """A producer's request to register a schema."""

    name: str = Field(..., description="Human label; not unique.")
    producer_schema: Schema = Field(..., alias="schema", description="Column name to type.")
    custom_id: Optional[str] = Field(
        None,
        alias="use_custom_id",
        description="Caller-chosen id for devices without persistent storage.",
    )

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }


class ProducerRecord(BaseModel):
    """
    Representation of a single row in the catalog table.
    """

    name: str = Field(..., description="Producer name.")
    id: str = Field(..., alias="uuid", description="Producer id and data table name.")
    producer_schema: Schema = Field(..., alias="schema", description="Registered schema.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }


class Emit(BaseModel):
    """One record submitted by a producer."""

    producer_id: str = Field(..., alias="uuid")
    timestamp: Optional[StrictInt] = Field(
        None, ge=0, description="Microseconds since the Unix epoch (UTC)."
    )
    data: Dict[str, Any] = Field(default_factory=dict)

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }


class RegistrationResult(BaseModel):
    error: ErrorCode
    id: Optional[str] = Field(None, alias="uuid")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _id_only_on_success(self) -> "RegistrationResult":
        if (self.id is not None) != (self.error == ErrorCode.NO_ERROR):
            raise ValueError("id must be set exactly when error is NoError")
        return self


class EmitResult(BaseModel):
    error: ErrorCode


__all__ = [
    "DataType",
    "Emit",
    "EmitResult",
    "ProducerRecord",
    "Registration",
    "RegistrationResult",
    "Schema",
    "schema_from_json",
    "schema_to_json",
]
