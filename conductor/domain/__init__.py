"""
Domain package for the Conductor producer service.

Exports the data types, wire models and error taxonomy shared by validation,
SQL generation, the catalog and orchestration. Keep this package free of I/O.
"""

from conductor.domain.errors import ConductorError, ErrorCode
from conductor.domain.models import (
    DataType,
    Emit,
    EmitResult,
    ProducerRecord,
    Registration,
    RegistrationResult,
    Schema,
    schema_from_json,
    schema_to_json,
)

__all__ = [
    "ConductorError",
    "DataType",
    "Emit",
    "EmitResult",
    "ErrorCode",
    "ProducerRecord",
    "Registration",
    "RegistrationResult",
    "Schema",
    "schema_from_json",
    "schema_to_json",
]
