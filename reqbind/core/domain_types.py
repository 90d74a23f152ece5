"""Domain Types — rich types that replace bare primitives across the binder.

Invariants:
    - Int8..Int64, Uint..Uint64, Float32/Float64 declare a field's bit width — plain int is unbounded
    - Every tag key a field may carry is a TagKey member — no raw string matching
    - MediaType values are the normalized (lower-case, parameter-free) tokens

Design Decisions:
    - NewType over wrapper classes: zero runtime cost, values stay plain int/float
    - str Enums: TagKey doubles as the dataclass metadata key
"""

from enum import Enum
from typing import NewType


# ─── Fixed-width numerics ────────────────────────────────────────

Int8 = NewType("Int8", int)
Int16 = NewType("Int16", int)
Int32 = NewType("Int32", int)
Int64 = NewType("Int64", int)

Uint = NewType("Uint", int)             # 64-bit
Uint8 = NewType("Uint8", int)
Uint16 = NewType("Uint16", int)
Uint32 = NewType("Uint32", int)
Uint64 = NewType("Uint64", int)

Float32 = NewType("Float32", float)
Float64 = NewType("Float64", float)


# (signed, bits) per fixed-width integer type
INT_WIDTHS: dict[object, tuple[bool, int]] = {
    Int8: (True, 8),
    Int16: (True, 16),
    Int32: (True, 32),
    Int64: (True, 64),
    Uint: (False, 64),
    Uint8: (False, 8),
    Uint16: (False, 16),
    Uint32: (False, 32),
    Uint64: (False, 64),
}

FLOAT_WIDTHS: dict[object, int] = {
    Float32: 32,
    Float64: 64,
    float: 64,
}


# ─── Enums ───────────────────────────────────────────────────────

class TagKey(str, Enum):
    """Field metadata keys — one per data source."""
    PARAM = "param"
    QUERY = "query"
    HEADER = "header"
    FORM = "form"
    JSON = "json"
    XML = "xml"


class Phase(str, Enum):
    """The fixed-order binding steps of DefaultBinder.bind (plus headers)."""
    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    BODY = "body"


class MediaType(str, Enum):
    """Body media types the adapter dispatches on."""
    JSON = "application/json"
    XML = "application/xml"
    TEXT_XML = "text/xml"
    FORM = "application/x-www-form-urlencoded"
    MULTIPART = "multipart/form-data"


# Tag keys whose phase silently skips roots it cannot fill
LENIENT_TAG_KEYS: frozenset[str] = frozenset({
    TagKey.PARAM.value, TagKey.QUERY.value, TagKey.HEADER.value,
})
