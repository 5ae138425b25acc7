"""
SQL generation package.

Builds the statement text the catalog executes: data table DDL, the catalog
DDL, positional INSERTs and catalog lookups. Nothing here touches a connection.
"""

from conductor.sql.ddl import TIMESTAMP_COLUMN, build_create_catalog_table, build_create_table
from conductor.sql.dml import (
    build_catalog_count,
    build_catalog_insert,
    build_catalog_lookup,
    build_insert,
)
from conductor.sql.identifier import is_safe_identifier, quote_identifier

__all__ = [
    "TIMESTAMP_COLUMN",
    "build_catalog_count",
    "build_catalog_insert",
    "build_catalog_lookup",
    "build_create_catalog_table",
    "build_create_table",
    "build_insert",
    "is_safe_identifier",
    "quote_identifier",
]
