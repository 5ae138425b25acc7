from __future__ import annotations

from datetime import datetime

import pytest

from conductor.domain.errors import ConductorError, ErrorCode
from conductor.domain.models import DataType
from conductor.producers.coercion import F32_MAX, INT64_MAX, INT64_MIN, coerce_value

WIDE_VALUE = 12345678901234.0


def _assert_invalid(value, data_type: DataType) -> None:
    with pytest.raises(ConductorError) as excinfo:
        coerce_value(value, data_type)
    assert excinfo.value.code == ErrorCode.INVALID_DATA


class TestInt:
    def test_accepts_integers_in_range(self) -> None:
        assert coerce_value(5, DataType.INT) == 5
        assert coerce_value(INT64_MAX, DataType.INT) == INT64_MAX
        assert coerce_value(INT64_MIN, DataType.INT) == INT64_MIN

    @pytest.mark.parametrize("value", [INT64_MAX + 1, INT64_MIN - 1, 5.0, "5", True, None])
    def test_rejects_non_integers_and_overflow(self, value) -> None:
        _assert_invalid(value, DataType.INT)


class TestFloat:
    def test_accepts_representable_values(self) -> None:
        assert coerce_value(1.5, DataType.FLOAT) == 1.5
        assert coerce_value(-2, DataType.FLOAT) == -2.0

    def test_narrows_to_single_precision(self) -> None:
        narrowed = coerce_value(0.1, DataType.FLOAT)
        assert narrowed != 0.1
        assert abs(narrowed - 0.1) < 1e-7

    def test_rejects_values_that_lose_magnitude(self) -> None:
        _assert_invalid(WIDE_VALUE, DataType.FLOAT)

    def test_rejects_values_beyond_single_precision_range(self) -> None:
        _assert_invalid(F32_MAX * 2, DataType.FLOAT)
        _assert_invalid(-F32_MAX * 2, DataType.FLOAT)

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), True, "1.5", [1.5]])
    def test_rejects_non_finite_and_non_numbers(self, value) -> None:
        _assert_invalid(value, DataType.FLOAT)


class TestDouble:
    def test_accepts_wide_values(self) -> None:
        assert coerce_value(WIDE_VALUE, DataType.DOUBLE) == WIDE_VALUE
        assert coerce_value(1e300, DataType.DOUBLE) == 1e300
        assert coerce_value(7, DataType.DOUBLE) == 7.0

    @pytest.mark.parametrize("value", [float("-inf"), float("nan"), 10**400, False, "2.0"])
    def test_rejects_non_finite_and_non_numbers(self, value) -> None:
        _assert_invalid(value, DataType.DOUBLE)


class TestTime:
    def test_parses_naive_datetime(self) -> None:
        assert coerce_value("2024-03-01T12:30:45", DataType.TIME) == datetime(
            2024, 3, 1, 12, 30, 45
        )

    def test_fraction_is_truncated_to_microseconds(self) -> None:
        parsed = coerce_value("2024-03-01T12:30:45.123456789", DataType.TIME)
        assert parsed.microsecond == 123456
        assert coerce_value("2024-03-01T12:30:45.5", DataType.TIME).microsecond == 500000

    @pytest.mark.parametrize(
        "value",
        [
            "2024-03-01T12:30:45Z",
            "2024-03-01T12:30:45+02:00",
            "2024-03-01 12:30:45",
            "2024-03-01",
            "2024-01-01T00:00:00\n",
            "\u0662\u0660\u0662\u0664-01-01T00:00:00",
            "2024-02-30T00:00:00",
            1709296245,
        ],
    )
    def test_rejects_other_shapes(self, value) -> None:
        _assert_invalid(value, DataType.TIME)


class TestStringAndBool:
    def test_string(self) -> None:
        assert coerce_value("north", DataType.STRING) == "north"
        assert coerce_value("", DataType.STRING) == ""
        _assert_invalid(5, DataType.STRING)

    def test_bool(self) -> None:
        assert coerce_value(True, DataType.BOOL) is True
        assert coerce_value(False, DataType.BOOL) is False
        _assert_invalid(1, DataType.BOOL)
        _assert_invalid("true", DataType.BOOL)


class TestBinary:
    def test_accepts_bytes_and_byte_lists(self) -> None:
        assert coerce_value(b"\x00\xff", DataType.BINARY) == b"\x00\xff"
        assert coerce_value(bytearray(b"ab"), DataType.BINARY) == b"ab"
        assert coerce_value([0, 1, 255], DataType.BINARY) == b"\x00\x01\xff"
        assert coerce_value([], DataType.BINARY) == b""

    @pytest.mark.parametrize("value", [[256], [-1], [True], [1.0], "abc", 3])
    def test_rejects_other_values(self, value) -> None:
        _assert_invalid(value, DataType.BINARY)
