"""
Coercion of untyped emit values into store parameters.

Values arrive as decoded JSON (or msgpack) python objects. Each declared
`DataType` accepts a fixed set of python kinds; everything else is rejected
with `ErrorCode.INVALID_DATA`. There is no cross-type conversion: the string
"5" is never an Int, and `True` is never a number even though `bool`
subclasses `int`.
"""

from __future__ import annotations

import math
import re
import struct
from datetime import datetime
from typing import Any, Callable, Dict

from conductor.domain.errors import ConductorError, ErrorCode
from conductor.domain.models import DataType

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

F32_MAX = 3.4028234663852886e38
F32_MIN = -F32_MAX
F32_EPSILON = 2.0**-23

# Narrowing to 32 bits may not move a value by a whole unit or more.
F32_MAX_NARROWING_ERROR = 1.0

_NAIVE_DATETIME = re.compile(
    r"([0-9]{4}-[0-9]{2}-[0-9]{2})T([0-9]{2}:[0-9]{2}:[0-9]{2})(?:\.([0-9]{1,9}))?"
)


def _reject(expected: DataType, value: Any, reason: str = "") -> ConductorError:
    detail = f" ({reason})" if reason else ""
    return ConductorError(
        ErrorCode.INVALID_DATA,
        f"Not possible to convert value to {expected.value}{detail}. Value: {value!r}",
    )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_float64(value: Any, expected: DataType) -> float:
    if not _is_number(value):
        raise _reject(expected, value)
    try:
        as_float = float(value)
    except OverflowError:
        raise _reject(expected, value, "outside 64-bit float range") from None
    if not math.isfinite(as_float):
        raise _reject(expected, value, "not finite")
    return as_float


def _coerce_int(value: Any) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise _reject(DataType.INT, value)
    if not INT64_MIN <= value <= INT64_MAX:
        raise _reject(DataType.INT, value, "outside 64-bit integer range")
    return value


def _coerce_float(value: Any) -> float:
    as_float = _to_float64(value, DataType.FLOAT)
    # Epsilon-adjusted 32-bit bounds.
    if as_float > F32_MAX - F32_EPSILON or as_float < F32_MIN + F32_EPSILON:
        raise _reject(DataType.FLOAT, value, "too big to fit in 32 bits")
    narrowed = struct.unpack("f", struct.pack("f", as_float))[0]
    if abs(narrowed - as_float) >= F32_MAX_NARROWING_ERROR:
        raise _reject(DataType.FLOAT, value, "loses magnitude when narrowed to 32 bits")
    return narrowed


def _coerce_double(value: Any) -> float:
    return _to_float64(value, DataType.DOUBLE)


def _coerce_time(value: Any) -> datetime:
    if not isinstance(value, str):
        raise _reject(DataType.TIME, value)
    match = _NAIVE_DATETIME.fullmatch(value)
    if match is None:
        raise _reject(DataType.TIME, value, "expected YYYY-MM-DDTHH:MM:SS[.fff] without offset")
    date_part, time_part, fraction = match.groups()
    try:
        parsed = datetime.strptime(f"{date_part}T{time_part}", "%Y-%m-%dT%H:%M:%S")
    except ValueError as exc:
        raise _reject(DataType.TIME, value, str(exc)) from None
    if fraction:
        parsed = parsed.replace(microsecond=int(fraction[:6].ljust(6, "0")))
    return parsed


def _coerce_string(value: Any) -> str:
    if not isinstance(value, str):
        raise _reject(DataType.STRING, value)
    return value


def _coerce_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise _reject(DataType.BOOL, value)
    return value


def _coerce_binary(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, list):
        if all(isinstance(b, int) and not isinstance(b, bool) and 0 <= b <= 255 for b in value):
            return bytes(value)
        raise _reject(DataType.BINARY, value, "list items must be integers in 0..255")
    raise _reject(DataType.BINARY, value)


_COERCERS: Dict[DataType, Callable[[Any], Any]] = {
    DataType.INT: _coerce_int,
    DataType.FLOAT: _coerce_float,
    DataType.TIME: _coerce_time,
    DataType.STRING: _coerce_string,
    DataType.BOOL: _coerce_bool,
    DataType.DOUBLE: _coerce_double,
    DataType.BINARY: _coerce_binary,
}


def coerce_value(value: Any, expected: DataType) -> Any:
    """
    Convert `value` into the parameter bound for a column of type `expected`.

    Returns
    -------
    int | float | datetime | str | bool | bytes
        The typed parameter.

    Raises
    ------
    ConductorError
        With `ErrorCode.INVALID_DATA` when the value does not fit the type.
    """
    return _COERCERS[expected](value)


__all__ = [
    "F32_EPSILON",
    "F32_MAX",
    "F32_MIN",
    "INT64_MAX",
    "INT64_MIN",
    "coerce_value",
]
