"""Type Coercer — pure conversion of raw string values into field values.

Invariants:
    - Empty string is the zero value: 0 for integers, False for booleans, 0.0 for floats
    - Integers are base-10 only and range-checked against the declared bit width
    - Conversion either returns the new value or raises ConversionFailureError — never partial
    - Types implementing from_param decode themselves (also as list elements)

Design Decisions:
    - Regex-gated int() and float(): both alone accept whitespace, underscores and
      non-ASCII digits, none of which are valid parameter values
    - Float32 rounds through struct; only values that round to infinity are out of range
"""

import math
import re
import struct
from typing import Any

from reqbind.core.capabilities import decodes_param
from reqbind.core.domain_types import FLOAT_WIDTHS, INT_WIDTHS
from reqbind.core.errors import ConversionFailureError
from reqbind.core.type_shapes import split_optional, type_name, unwrap_newtype

_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_RE = re.compile(r"[0-9]+")

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)
_INFINITY_SPELLINGS = frozenset({"inf", "infinity"})


def parse_int(value: str, bits: int | None = None, signed: bool = True) -> int:
    """Parse a base-10 integer; bits=None means unbounded. Raises ValueError."""
    if value == "":
        return 0
    pattern = _SIGNED_RE if signed else _UNSIGNED_RE
    if not pattern.fullmatch(value):
        raise ValueError(f"invalid syntax for {'' if signed else 'unsigned '}integer")
    number = int(value)
    if bits is not None:
        low, high = (-(1 << (bits - 1)), (1 << (bits - 1)) - 1) if signed else (0, (1 << bits) - 1)
        if not low <= number <= high:
            raise ValueError(f"value out of range for {bits}-bit integer")
    return number


def parse_bool(value: str) -> bool:
    if value == "" or value in _FALSE_VALUES:
        return False
    if value in _TRUE_VALUES:
        return True
    raise ValueError("invalid syntax for boolean")


def parse_float(value: str, bits: int = 64) -> float:
    if value == "":
        return 0.0
    if not _FLOAT_RE.fullmatch(value):
        raise ValueError("invalid syntax for float")
    number = float(value)
    if math.isinf(number) and value.lstrip("+-").lower() not in _INFINITY_SPELLINGS:
        raise ValueError(f"value out of range for {bits}-bit float")
    if bits == 32 and math.isfinite(number):
        try:
            number = struct.unpack("<f", struct.pack("<f", number))[0]
        except OverflowError as exc:
            raise ValueError("value out of range for 32-bit float") from exc
    return number


def is_coercible(tp: object) -> bool:
    """True if coerce_value knows how to build tp from a string."""
    tp, _ = split_optional(tp)
    if decodes_param(tp):
        return True
    target = unwrap_newtype(tp)
    return target in INT_WIDTHS or target in FLOAT_WIDTHS or target in (bool, int, str)


def coerce_value(tp: object, value: str, field: str | None = None) -> Any:
    """Convert one raw value into an instance of tp by primitive rules."""
    tp, _ = split_optional(tp)
    if decodes_param(tp):
        return _decode_with_hook(tp, value, field)

    target = unwrap_newtype(tp)
    try:
        if target in INT_WIDTHS:
            signed, bits = INT_WIDTHS[target]
            return parse_int(value, bits, signed)
        if target is bool:
            return parse_bool(value)
        if target is int:
            return parse_int(value)
        if target in FLOAT_WIDTHS:
            return parse_float(value, FLOAT_WIDTHS[target])
        if target is str:
            return value
    except ValueError as exc:
        raise ConversionFailureError(
            f"Cannot convert {value!r} to {type_name(tp)}"
            + (f" for field '{field}'" if field else "") + f": {exc}",
            field=field, value=value, internal=exc,
        ) from exc

    raise ConversionFailureError(
        f"Unsupported type {type_name(tp)}"
        + (f" for field '{field}'" if field else ""),
        field=field, value=value,
    )


def coerce_values(element_tp: object, values: list[str], field: str | None = None) -> list:
    """One coerced element per value, in order. Nothing is returned on failure."""
    return [coerce_value(element_tp, value, field) for value in values]


def _decode_with_hook(tp: Any, value: str, field: str | None) -> Any:
    try:
        return tp.from_param(value)
    except ConversionFailureError:
        raise
    except Exception as exc:
        raise ConversionFailureError(
            f"{type_name(tp)}.from_param rejected {value!r}"
            + (f" for field '{field}'" if field else "") + f": {exc}",
            field=field, value=value, internal=exc,
        ) from exc


def decode_params(tp: Any, values: list[str], field: str | None = None) -> Any:
    """Hand the whole ordered value list to tp.from_params."""
    try:
        return tp.from_params(list(values))
    except ConversionFailureError:
        raise
    except Exception as exc:
        raise ConversionFailureError(
            f"{type_name(tp)}.from_params rejected {values!r}"
            + (f" for field '{field}'" if field else "") + f": {exc}",
            field=field, internal=exc,
        ) from exc
