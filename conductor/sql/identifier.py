"""
SQL identifier handling.

Table and column names are interpolated into statement text because the store
cannot bind identifiers as parameters. Quoting doubles any embedded double
quote; callers still reject `.` and `"` upstream.
"""

from __future__ import annotations

import re

IDENTIFIER_ALLOW_LIST = re.compile(r"[A-Za-z0-9_-]+")


def quote_identifier(name: str) -> str:
    """
    Quote a table or column name.

    Examples:
        >>> quote_identifier("temperature")
        '"temperature"'
        >>> quote_identifier('odd"name')
        '"odd""name"'
    """
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


def is_safe_identifier(name: str) -> bool:
    """True when `name` contains only ASCII letters, digits, `_` and `-`."""
    return bool(IDENTIFIER_ALLOW_LIST.fullmatch(name))


__all__ = ["IDENTIFIER_ALLOW_LIST", "is_safe_identifier", "quote_identifier"]
