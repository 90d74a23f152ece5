"""Decoding Capabilities — opt-in hooks a field type provides for custom parsing.

Invariants:
    - from_params (whole ordered value list) is probed before from_param (first value)
    - Both hooks are classmethods returning a new instance; the binder assigns the result
    - A hook raising any exception is reported as a ConversionFailureError for that field

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy (ADR: ExMA anti-pattern)
"""

from typing import Protocol, Self, runtime_checkable


@runtime_checkable
class ParamDecodable(Protocol):
    """Type that decodes itself from a single string value."""
    @classmethod
    def from_param(cls, value: str) -> Self: ...


@runtime_checkable
class ParamsDecodable(Protocol):
    """Type that decodes itself from every value supplied for its name."""
    @classmethod
    def from_params(cls, values: list[str]) -> Self: ...


def decodes_param(tp: object) -> bool:
    return isinstance(tp, type) and callable(getattr(tp, "from_param", None))


def decodes_params(tp: object) -> bool:
    return isinstance(tp, type) and callable(getattr(tp, "from_params", None))
