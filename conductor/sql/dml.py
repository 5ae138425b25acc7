"""DML generation for producer data rows and catalog queries."""

from __future__ import annotations

from typing import Sequence

from conductor.sql.identifier import quote_identifier


def build_insert(table_name: str, ordered_column_names: Sequence[str]) -> str:
    """
    Build a positional INSERT statement.

    Parameter `$n` binds to the n-th entry of `ordered_column_names`, so the
    caller must pass values in exactly that order.

    Examples:
        >>> build_insert("abc", ["a", "b"])
        'INSERT INTO "abc" ("a", "b") VALUES ($1, $2);'
    """
    if not ordered_column_names:
        raise ValueError("INSERT requires at least one column")
    columns = ", ".join(quote_identifier(name) for name in ordered_column_names)
    placeholders = ", ".join(f"${index}" for index in range(1, len(ordered_column_names) + 1))
    return f"INSERT INTO {quote_identifier(table_name)} ({columns}) VALUES ({placeholders});"


def build_catalog_insert(catalog_table: str) -> str:
    return build_insert(catalog_table, ["name", "uuid", "schema"])


def build_catalog_lookup(catalog_table: str) -> str:
    return f"SELECT name, uuid, schema FROM {quote_identifier(catalog_table)} WHERE uuid = $1;"


def build_catalog_count(catalog_table: str) -> str:
    return f"SELECT count(*) FROM {quote_identifier(catalog_table)} WHERE uuid = $1;"


__all__ = [
    "build_catalog_count",
    "build_catalog_insert",
    "build_catalog_lookup",
    "build_insert",
]
