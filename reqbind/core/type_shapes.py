"""Type Shapes — read the structure of a field annotation.

Invariants:
    - Optional means exactly one non-None member in a union (X | None, Optional[X])
    - Only one level of optionality and one level of list nesting are recognized
    - Annotated[...] and user NewTypes are transparent unless they are fixed-width numerics
"""

import dataclasses
import types
from enum import Enum
from typing import Annotated, Union, get_args, get_origin

from starlette.datastructures import UploadFile

from reqbind.core.domain_types import FLOAT_WIDTHS, INT_WIDTHS


class FileShape(str, Enum):
    """Recognized uploaded-file field shapes."""
    OPTIONAL = "optional"            # UploadFile | None
    LIST = "list"                    # list[UploadFile]
    LIST_OF_OPTIONAL = "list_of_optional"  # list[UploadFile | None]
    BARE = "bare"                    # UploadFile (rejected)


def strip_annotated(tp: object) -> object:
    while get_origin(tp) is Annotated:
        tp = get_args(tp)[0]
    return tp


def unwrap_newtype(tp: object) -> object:
    """Follow NewType chains down to a known numeric width or a real class."""
    while (
        hasattr(tp, "__supertype__")
        and tp not in INT_WIDTHS
        and tp not in FLOAT_WIDTHS
    ):
        tp = tp.__supertype__
    return tp


def split_optional(tp: object) -> tuple[object, bool]:
    """(inner type, is_optional) for X | None; (tp, False) otherwise."""
    tp = strip_annotated(tp)
    if get_origin(tp) in (Union, types.UnionType):
        members = get_args(tp)
        inner = [m for m in members if m is not type(None)]
        if len(inner) == 1 and len(members) == 2:
            return strip_annotated(inner[0]), True
    return tp, False


def list_element(tp: object) -> object | None:
    """Element type of list[X] (str for a bare list); None if tp is not a list."""
    tp = strip_annotated(tp)
    if tp is list:
        return str
    if get_origin(tp) is list:
        args = get_args(tp)
        return strip_annotated(args[0]) if args else str
    return None


def is_record(tp: object) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def _is_upload(tp: object) -> bool:
    return isinstance(tp, type) and issubclass(tp, UploadFile)


def file_shape(tp: object) -> FileShape | None:
    """Classify tp as one of the uploaded-file shapes, or None."""
    inner, optional = split_optional(tp)
    if _is_upload(inner):
        return FileShape.OPTIONAL if optional else FileShape.BARE
    if optional:
        return None
    element = list_element(tp)
    if element is None:
        return None
    element, element_optional = split_optional(element)
    if not _is_upload(element):
        return None
    return FileShape.LIST_OF_OPTIONAL if element_optional else FileShape.LIST


def type_name(tp: object) -> str:
    return getattr(tp, "__name__", None) or repr(tp)
