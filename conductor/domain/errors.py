"""
Error taxonomy for producer registration and emission.

Every failure that crosses the service boundary is reduced to an `ErrorCode`.
The integer value is the stable byte identifier used on the wire; `identifier`
is the stable string form. Store error text never leaves the process.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Dict


class ErrorCode(IntEnum):
    """Closed set of domain error kinds."""

    NO_ERROR = 0
    TIMESTAMP_DEFINED = 1
    NO_MEMBERS = 2
    INVALID_COLUMN_NAMES = 3
    TOO_MANY_COLUMNS = 4
    INTERNAL_ERROR = 5
    INVALID_UUID = 6
    NAME_INVALID = 7
    UNREGISTERED = 8
    INVALID_DATA = 9
    INVALID_SCHEMA = 10

    @property
    def identifier(self) -> str:
        return _IDENTIFIERS[self]

    @classmethod
    def from_identifier(cls, identifier: str) -> "ErrorCode":
        for code, name in _IDENTIFIERS.items():
            if name == identifier:
                return code
        raise ValueError(f"Unknown error identifier '{identifier}'")

    def __str__(self) -> str:
        return self.identifier


_IDENTIFIERS: Dict[ErrorCode, str] = {
    ErrorCode.NO_ERROR: "NoError",
    ErrorCode.TIMESTAMP_DEFINED: "TimestampDefined",
    ErrorCode.NO_MEMBERS: "NoMembers",
    ErrorCode.INVALID_COLUMN_NAMES: "InvalidColumnNames",
    ErrorCode.TOO_MANY_COLUMNS: "TooManyColumns",
    ErrorCode.INTERNAL_ERROR: "InternalError",
    ErrorCode.INVALID_UUID: "InvalidUuid",
    ErrorCode.NAME_INVALID: "NameInvalid",
    ErrorCode.UNREGISTERED: "Unregistered",
    ErrorCode.INVALID_DATA: "InvalidData",
    ErrorCode.INVALID_SCHEMA: "InvalidSchema",
}


class ConductorError(Exception):
    """
    Raised by catalog, coercion and validation components.

    Attributes
    ----------
    code : ErrorCode
        The code reported to the caller.
    message : str
        Operator-facing detail; logged, never returned to the caller.
    """

    def __init__(self, code: ErrorCode, message: str = "") -> None:
        self.code = code
        self.message = message
        super().__init__(f"{code.identifier}: {message}" if message else code.identifier)


__all__ = ["ConductorError", "ErrorCode"]
