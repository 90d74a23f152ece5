"""JSON Serializer — the replaceable JSON body deserialization capability.

Invariants:
    - Map destinations are updated with the decoded object as-is
    - Record fields match by "json" tag (else attribute name) exactly, then case-insensitively
    - json="" or json="-" opts a field out; private (_name) fields are never assigned
    - Keys without a matching field are ignored; fields without a key keep their value
    - Untagged embedded() records are flattened: their fields read keys from the same object

Design Decisions:
    - Field values validated with pydantic TypeAdapter (cached per annotation):
      nested dataclasses, lists and optionals come for free
    - Implementations must be safe to share across concurrent requests (no per-call state)
"""

import dataclasses
import json
from functools import lru_cache
from typing import Any, Protocol, get_type_hints

from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError

from reqbind.core.bind_context import BindContext
from reqbind.core.domain_types import TagKey
from reqbind.core.errors import InvalidDestinationError, MalformedBodyError
from reqbind.core.tags import is_embedded
from reqbind.core.type_shapes import is_record, split_optional, strip_annotated, type_name


class JSONSerializer(Protocol):
    """Contract for the JSON body capability — injected into DefaultBinder."""
    def deserialize(self, context: BindContext, destination: Any) -> None: ...


@lru_cache(maxsize=512)
def _adapter(annotation: Any) -> TypeAdapter:
    return TypeAdapter(annotation)


def _embedded_target(destination: Any, name: str, record_type: type) -> Any:
    current = getattr(destination, name)
    if current is None:
        try:
            current = record_type()
        except TypeError as exc:
            raise InvalidDestinationError(
                f"Cannot allocate {type_name(record_type)} for field '{name}': {exc}",
            ) from exc
        setattr(destination, name, current)
    return current


class DefaultJSONSerializer:
    """json.loads + per-field pydantic validation."""

    def deserialize(self, context: BindContext, destination: Any) -> None:
        payload = self._decode(context.body)

        if isinstance(destination, dict):
            destination.update(self._require_object(payload))
            return
        if not is_record(type(destination)):
            raise InvalidDestinationError(
                f"Cannot decode JSON into {type_name(type(destination))}",
            )
        self._assign(destination, self._require_object(payload))

    def _decode(self, body: bytes) -> Any:
        try:
            return json.loads(body)
        except json.JSONDecodeError as exc:
            raise MalformedBodyError(
                f"Syntax error: offset={exc.pos}, error={exc.msg}",
                "syntax", exc, line=exc.lineno, offset=exc.pos,
            ) from exc
        except UnicodeDecodeError as exc:
            raise MalformedBodyError(
                f"Syntax error: offset={exc.start}, error={exc.reason}",
                "syntax", exc, offset=exc.start,
            ) from exc

    def _require_object(self, payload: Any) -> dict:
        if not isinstance(payload, dict):
            raise MalformedBodyError(
                f"Unmarshal type error: expected=object, got={type(payload).__name__}",
                "type",
            )
        return payload

    def _assign(self, destination: Any, payload: dict) -> None:
        hints = get_type_hints(type(destination), include_extras=True)
        folded = {key.casefold(): key for key in reversed(list(payload))}

        for field in dataclasses.fields(destination):
            if field.name.startswith("_"):
                continue
            annotation = hints.get(field.name, field.type)
            if is_embedded(field.metadata) and TagKey.JSON.value not in field.metadata:
                inner, _ = split_optional(strip_annotated(annotation))
                if is_record(inner):
                    self._assign(_embedded_target(destination, field.name, inner), payload)
                    continue
            name = field.metadata.get(TagKey.JSON.value, field.name)
            if not name or name == "-":
                continue
            key = name if name in payload else folded.get(name.casefold())
            if key is None:
                continue
            setattr(destination, field.name, self._validate(annotation, payload[key], name))

    def _validate(self, annotation: Any, value: Any, name: str) -> Any:
        try:
            return _adapter(annotation).validate_python(value)
        except ValidationError as exc:
            raise MalformedBodyError(
                f"Unmarshal type error: expected={type_name(annotation)}, "
                f"got={type(value).__name__}, field={name}",
                "type", exc,
            ) from exc
        except PydanticSchemaGenerationError as exc:
            raise MalformedBodyError(
                f"Unsupported type error: type={type_name(annotation)}, field={name}",
                "unsupported_type", exc,
            ) from exc
