"""XML Decoder — fills a dataclass record from an XML document.

Invariants:
    - The root element's name is not checked; its children/attributes map to fields
    - Field names come from the "xml" tag ("name", "name,attr", "-" to skip), else the attribute name
    - Element names match on their local part (namespaces ignored)
    - list fields append every matching child; scalar fields take the last one
    - Untagged embedded() records are flattened: their fields read from the same element
    - Syntax errors → MalformedBodyError(sub_kind="syntax"); fields XML cannot express →
      MalformedBodyError(sub_kind="unsupported_type")
"""

import dataclasses
import xml.etree.ElementTree as ET
from typing import Any, get_type_hints

from reqbind.core.coerce import coerce_value, is_coercible
from reqbind.core.domain_types import TagKey
from reqbind.core.errors import InvalidDestinationError, MalformedBodyError
from reqbind.core.tags import is_embedded
from reqbind.core.type_shapes import (
    is_record, list_element, split_optional, type_name, unwrap_newtype,
)

SYNTAX = "syntax"
UNSUPPORTED_TYPE = "unsupported_type"


def decode_xml(body: bytes, destination: Any) -> None:
    """Parse body and assign matching elements/attributes onto destination."""
    if not is_record(type(destination)):
        raise MalformedBodyError(
            f"Unsupported type error: type={type_name(type(destination))}, "
            f"error=cannot decode XML into a non-record destination",
            UNSUPPORTED_TYPE,
        )
    try:
        root = ET.fromstring(body)
    except ET.ParseError as exc:
        line, column = exc.position
        raise MalformedBodyError(
            f"Syntax error: line={line}, error={exc}",
            SYNTAX, exc, line=line, offset=column,
        ) from exc
    _decode_element(root, destination)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _xml_name(field: dataclasses.Field) -> tuple[str | None, bool]:
    """(element/attribute name or None to skip, is_attribute)."""
    raw = field.metadata.get(TagKey.XML.value)
    if raw is None:
        return field.name, False
    if raw == "-":
        return None, False
    name, _, options = raw.partition(",")
    return name or field.name, "attr" in options.split(",")


def _decode_element(element: ET.Element, target: Any) -> None:
    hints = get_type_hints(type(target))
    for field in dataclasses.fields(target):
        if field.name.startswith("_"):
            continue
        annotation = hints.get(field.name, field.type)
        if is_embedded(field.metadata) and TagKey.XML.value not in field.metadata:
            inner, _ = split_optional(annotation)
            if is_record(inner):
                _decode_element(element, _embedded_target(target, field.name, inner))
                continue
        name, as_attribute = _xml_name(field)
        if name is None:
            continue

        if as_attribute:
            raw = element.get(name)
            if raw is not None:
                setattr(target, field.name, _scalar(annotation, raw, field.name))
            continue

        children = [c for c in element if _local_name(c.tag) == name]
        if not children:
            continue
        inner, _ = split_optional(annotation)
        element_type = list_element(inner)
        if element_type is not None:
            current = getattr(target, field.name) or []
            decoded = [_convert(element_type, child, field.name) for child in children]
            setattr(target, field.name, list(current) + decoded)
        else:
            setattr(target, field.name, _convert(inner, children[-1], field.name))


def _allocate(tp: Any, field_name: str) -> Any:
    try:
        return tp()
    except TypeError as exc:
        raise InvalidDestinationError(
            f"Cannot allocate {type_name(tp)} for field '{field_name}': {exc}",
        ) from exc


def _embedded_target(target: Any, field_name: str, tp: Any) -> Any:
    current = getattr(target, field_name)
    if current is None:
        current = _allocate(tp, field_name)
        setattr(target, field_name, current)
    return current


def _convert(tp: Any, child: ET.Element, field_name: str) -> Any:
    tp, _ = split_optional(tp)
    if is_record(tp):
        nested = _allocate(tp, field_name)
        _decode_element(child, nested)
        return nested
    return _scalar(tp, "".join(child.itertext()), field_name)


def _scalar(tp: Any, text: str, field_name: str) -> Any:
    if not is_coercible(tp):
        raise MalformedBodyError(
            f"Unsupported type error: type={type_name(tp)}, "
            f"error=field '{field_name}' cannot be decoded from XML",
            UNSUPPORTED_TYPE,
        )
    inner, _ = split_optional(tp)
    if unwrap_newtype(inner) is not str:
        text = text.strip()
    return coerce_value(tp, text, field_name)
