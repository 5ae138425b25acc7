"""
Producers package for the Conductor service.

Re-exports the catalog interface and its asyncpg implementation together with
the validation, identity and coercion building blocks used by orchestration.
"""

from conductor.producers.catalog import AsyncpgProducerCatalog, ProducerCatalog
from conductor.producers.coercion import coerce_value
from conductor.producers.identity import assign_producer_id
from conductor.producers.validation import (
    MAX_COLUMNS,
    classify_emit_mismatch,
    validate_emit_fields,
    validate_registration,
)

__all__ = [
    # Catalog
    "AsyncpgProducerCatalog",
    "ProducerCatalog",
    # Building blocks
    "MAX_COLUMNS",
    "assign_producer_id",
    "classify_emit_mismatch",
    "coerce_value",
    "validate_emit_fields",
    "validate_registration",
]
