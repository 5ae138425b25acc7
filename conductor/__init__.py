"""
Conductor - producer registration and time-series ingestion.

Producers declare a typed schema once and then append timestamped records
matching it. This package provides:

- Registration validation and identity assignment
- Data table DDL and positional INSERT generation
- Coercion of untyped emit values into typed store parameters
- An asyncpg-backed producer catalog
- Register / Emit / CheckRegistered orchestration and a CLI
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from conductor.config import Settings, get_settings
from conductor.domain import (
    ConductorError,
    DataType,
    Emit,
    EmitResult,
    ErrorCode,
    ProducerRecord,
    Registration,
    RegistrationResult,
    Schema,
)
from conductor.orchestrator import check_registered, emit, register
from conductor.producers import AsyncpgProducerCatalog, ProducerCatalog
from conductor.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "ConductorError",
    "DataType",
    "Emit",
    "EmitResult",
    "ErrorCode",
    "ProducerRecord",
    "Registration",
    "RegistrationResult",
    "Schema",
    # Catalog
    "AsyncpgProducerCatalog",
    "ProducerCatalog",
    # Orchestration
    "check_registered",
    "emit",
    "register",
    # Logging
    "configure_logging",
    "get_logger",
]
