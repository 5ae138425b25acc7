"""DDL generation for producer data tables and the catalog table."""

from __future__ import annotations

from typing import List, Optional

from conductor.domain.models import Schema
from conductor.sql.identifier import quote_identifier

TIMESTAMP_COLUMN = "ts"


def build_create_table(
    schema: Schema, table_name: str, partition_by: Optional[str] = None
) -> str:
    """Build the CREATE TABLE statement for a producer's data table.

    The implicit `ts` column always leads and is designated as the table's
    timestamp. Columns follow the schema's iteration order.
    """
    columns: List[str] = [f"{TIMESTAMP_COLUMN} TIMESTAMP"]
    for column_name, data_type in schema.items():
        columns.append(f"{quote_identifier(column_name)} {data_type.column_type}")

    sql = (
        f"CREATE TABLE IF NOT EXISTS {quote_identifier(table_name)} "
        f"({', '.join(columns)}) timestamp({TIMESTAMP_COLUMN})"
    )
    if partition_by:
        sql += f" PARTITION BY {partition_by}"
    return sql + ";"


def build_create_catalog_table(table_name: str) -> str:
    """Build the CREATE TABLE statement for the producer catalog."""
    return (
        f"CREATE TABLE IF NOT EXISTS {quote_identifier(table_name)} "
        "(name string, uuid string, schema string);"
    )


__all__ = ["TIMESTAMP_COLUMN", "build_create_catalog_table", "build_create_table"]
