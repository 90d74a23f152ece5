"""Type Coercer — pure conversion of raw strings into field values.

Tests cover:
    - Empty string is the zero value for every primitive kind
    - Base-10 syntax and bit-width range checks for signed/unsigned integers
    - Boolean spellings, float range and float32 rounding
    - from_param types decode themselves; hook failures become ConversionFailureError
    - Unsupported types are rejected
"""

import math
import struct

import pytest

from reqbind.core.coerce import (
    coerce_value, coerce_values, decode_params, is_coercible,
    parse_bool, parse_float, parse_int,
)
from reqbind.core.domain_types import (
    Float32, Float64, Int8, Int16, Int32, Int64, Uint, Uint8, Uint16, Uint32, Uint64,
)
from reqbind.core.errors import ConversionFailureError


class Level:
    def __init__(self, rank: int):
        self.rank = rank

    @classmethod
    def from_param(cls, value: str) -> "Level":
        ranks = {"low": 1, "high": 2}
        if value not in ranks:
            raise ValueError(f"unknown level {value!r}")
        return cls(ranks[value])


class Window:
    def __init__(self, start: int, end: int):
        self.start, self.end = start, end

    @classmethod
    def from_params(cls, values: list[str]) -> "Window":
        start, end = (int(v) for v in values)
        return cls(start, end)


# ─── zero values ─────────────────────────────────────────────────

@pytest.mark.parametrize("tp, zero", [
    (int, 0), (Int8, 0), (Int16, 0), (Int32, 0), (Int64, 0),
    (Uint, 0), (Uint8, 0), (Uint16, 0), (Uint32, 0), (Uint64, 0),
    (float, 0.0), (Float32, 0.0), (Float64, 0.0),
    (bool, False), (str, ""),
])
def test_empty_string_is_zero_value(tp, zero):
    result = coerce_value(tp, "")
    assert result == zero
    assert type(result) is type(zero)


# ─── integers ────────────────────────────────────────────────────

def test_parse_int_accepts_signs():
    assert parse_int("-12") == -12
    assert parse_int("+7") == 7


@pytest.mark.parametrize("raw", [" 1", "1 ", "1_000", "0x10", "1.0", "abc", "٣"])
def test_parse_int_rejects_non_base10(raw):
    with pytest.raises(ValueError):
        parse_int(raw)


def test_parse_int_plain_int_is_unbounded():
    assert parse_int("99999999999999999999999") == 99999999999999999999999


def test_int8_range_is_enforced():
    assert coerce_value(Int8, "127") == 127
    assert coerce_value(Int8, "-128") == -128
    with pytest.raises(ConversionFailureError):
        coerce_value(Int8, "128")


def test_int64_range_is_enforced():
    assert coerce_value(Int64, str(2**63 - 1)) == 2**63 - 1
    with pytest.raises(ConversionFailureError):
        coerce_value(Int64, str(2**63))


def test_unsigned_rejects_sign_prefix():
    assert coerce_value(Uint8, "255") == 255
    with pytest.raises(ConversionFailureError):
        coerce_value(Uint8, "256")
    with pytest.raises(ConversionFailureError):
        coerce_value(Uint16, "-1")
    with pytest.raises(ConversionFailureError):
        coerce_value(Uint32, "+1")


# ─── booleans ────────────────────────────────────────────────────

@pytest.mark.parametrize("raw", ["1", "t", "T", "TRUE", "true", "True"])
def test_parse_bool_true_spellings(raw):
    assert parse_bool(raw) is True


@pytest.mark.parametrize("raw", ["0", "f", "F", "FALSE", "false", "False"])
def test_parse_bool_false_spellings(raw):
    assert parse_bool(raw) is False


def test_parse_bool_rejects_yes():
    with pytest.raises(ValueError):
        parse_bool("yes")


# ─── floats ──────────────────────────────────────────────────────

def test_parse_float_basic():
    assert parse_float("1.5") == 1.5
    assert parse_float("-2e3") == -2000.0


def test_parse_float_accepts_explicit_infinity():
    assert math.isinf(parse_float("inf"))
    assert math.isinf(parse_float("-Infinity"))


def test_parse_float_rejects_overflow():
    with pytest.raises(ValueError):
        parse_float("1e400")


def test_parse_float_rejects_whitespace_and_underscores():
    with pytest.raises(ValueError):
        parse_float(" 1.0")
    with pytest.raises(ValueError):
        parse_float("1_0.0")


@pytest.mark.parametrize("value", ["\u0661\u0662", "1.\u0665", "1e", "."])
def test_parse_float_rejects_non_decimal_spellings(value):
    with pytest.raises(ValueError):
        parse_float(value)


def test_float32_rounds_to_single_precision():
    value = coerce_value(Float32, "0.1")
    assert value != 0.1
    assert abs(value - 0.1) < 1e-7


def test_float32_rejects_out_of_range():
    with pytest.raises(ConversionFailureError):
        coerce_value(Float32, "3.5e38")


def test_float32_max_spelling_rounds_to_max():
    assert parse_float("3.4028235e38", 32) == struct.unpack("<f", b"\xff\xff\x7f\x7f")[0]
    assert parse_float("-3.4028235e38", 32) < 0


# ─── coerce_value ────────────────────────────────────────────────

def test_optional_type_is_unwrapped():
    assert coerce_value(int | None, "5") == 5


def test_conversion_failure_carries_field_value_and_cause():
    with pytest.raises(ConversionFailureError) as exc_info:
        coerce_value(int, "abc", field="id")
    err = exc_info.value
    assert err.field == "id"
    assert err.value == "abc"
    assert isinstance(err.internal, ValueError)
    assert err.__cause__ is err.internal
    assert err.http_status == 400


def test_unsupported_type_is_rejected():
    with pytest.raises(ConversionFailureError, match="Unsupported type"):
        coerce_value(dict, "x", field="meta")


def test_from_param_type_decodes_itself():
    assert coerce_value(Level, "high").rank == 2


def test_from_param_failure_is_conversion_failure():
    with pytest.raises(ConversionFailureError) as exc_info:
        coerce_value(Level, "medium", field="level")
    assert isinstance(exc_info.value.internal, ValueError)


def test_from_param_any_exception_is_conversion_failure():
    class Strict:
        @classmethod
        def from_param(cls, value: str) -> "Strict":
            raise LookupError(value)

    with pytest.raises(ConversionFailureError) as exc_info:
        coerce_value(Strict, "x", field="strict")
    assert isinstance(exc_info.value.__cause__, LookupError)
    assert exc_info.value.field == "strict"


def test_coerce_values_keeps_order():
    assert coerce_values(int, ["3", "1", "2"]) == [3, 1, 2]
    assert [lvl.rank for lvl in coerce_values(Level, ["low", "high"])] == [1, 2]


def test_decode_params_gets_full_list():
    window = decode_params(Window, ["10", "20"])
    assert (window.start, window.end) == (10, 20)


def test_decode_params_failure_is_conversion_failure():
    with pytest.raises(ConversionFailureError):
        decode_params(Window, ["10"], field="window")


def test_is_coercible():
    assert is_coercible(Int8)
    assert is_coercible(str | None)
    assert is_coercible(Level)
    assert not is_coercible(dict)
    assert not is_coercible(list[int])
