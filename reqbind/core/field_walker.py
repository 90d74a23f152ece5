"""Field Walker — populates a destination record or map from a FieldSource.

Invariants:
    - Only fields tagged for the current tag key are assigned; "" opts a field out
    - Embedded records are recursed into with the same sources (their fields flatten
      into the parent namespace); an embedded record that carries a tag is rejected
      before any data is read, even when the sources are empty
    - Untagged, non-optional records without from_param are recursed into as well
    - A missing key leaves the field untouched; a present empty value coerces to zero
    - from_params wins over from_param, which wins over primitive coercion
    - Fields assigned before a failure stay assigned (no rollback)

Design Decisions:
    - Per-(record type, tag key) FieldSpec tables, built once and cached (lru_cache):
      type hints are resolved once, not per request
"""

import dataclasses
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, get_type_hints

from reqbind.core.capabilities import decodes_param, decodes_params
from reqbind.core.coerce import coerce_value, coerce_values, decode_params
from reqbind.core.domain_types import LENIENT_TAG_KEYS
from reqbind.core.errors import AmbiguousMappingError, InvalidDestinationError
from reqbind.core.field_source import FieldSource, FileSource, ValuesMap
from reqbind.core.tags import external_name, is_embedded
from reqbind.core.type_shapes import (
    FileShape, file_shape, is_record, list_element, split_optional, type_name,
)


@dataclass(frozen=True)
class FieldSpec:
    """Static binding descriptor of one dataclass field under one tag key."""
    name: str
    external: str | None
    embedded: bool
    assignable: bool
    inner: Any
    optional: bool
    element: Any
    file_shape: FileShape | None
    params_hook: bool
    param_hook: bool
    nested: tuple["FieldSpec", ...] | None

    @property
    def recurses(self) -> bool:
        return self.nested is not None


@lru_cache(maxsize=None)
def field_specs(record_type: type, tag_key: str) -> tuple[FieldSpec, ...]:
    """Descriptor table for record_type; raises AmbiguousMappingError on tagged embeds."""
    try:
        hints = get_type_hints(record_type, include_extras=True)
    except (NameError, TypeError) as exc:
        raise InvalidDestinationError(
            f"Cannot resolve field types of {type_name(record_type)}: {exc}",
        ) from exc
    frozen = record_type.__dataclass_params__.frozen

    specs = []
    for f in dataclasses.fields(record_type):
        annotation = hints.get(f.name, f.type)
        inner, optional = split_optional(annotation)
        external = external_name(f.metadata, tag_key)
        embedded = is_embedded(f.metadata) and is_record(inner)

        if embedded and external:
            raise AmbiguousMappingError(
                f"'{tag_key}' tags are not allowed on embedded record field "
                f"'{f.name}' of {type_name(record_type)}",
                field=f.name,
            )

        nested = None
        if embedded and external is None:
            nested = field_specs(inner, tag_key)
        elif (
            external is None and not optional
            and is_record(inner) and not decodes_param(inner)
        ):
            nested = field_specs(inner, tag_key)

        specs.append(FieldSpec(
            name=f.name,
            external=external,
            embedded=embedded,
            assignable=not frozen and not f.name.startswith("_"),
            inner=inner,
            optional=optional,
            element=list_element(inner),
            file_shape=file_shape(annotation),
            params_hook=decodes_params(inner),
            param_hook=decodes_param(inner),
            nested=nested,
        ))
    return tuple(specs)


def bind_data(
    destination: Any,
    data: FieldSource,
    tag_key: str,
    files: FileSource | None = None,
) -> None:
    """Bind data (and files) into destination using tag_key field tags."""
    if destination is None:
        return
    empty = not data and not files

    if isinstance(destination, dict):
        if not empty:
            _bind_map(destination, data)
        return

    if not is_record(type(destination)):
        if empty or tag_key in LENIENT_TAG_KEYS:
            return
        raise InvalidDestinationError(
            f"Binding element must be a dataclass record or a string-keyed map, "
            f"got {type_name(type(destination))}",
        )

    specs = field_specs(type(destination), tag_key)
    if empty:
        return
    _walk(destination, specs, data, files or None)


def _bind_map(destination: dict, data: FieldSource) -> None:
    keep_all = isinstance(destination, ValuesMap)
    for key, values in data.items():
        destination[key] = list(values) if keep_all else values[0]


def _walk(
    target: Any,
    specs: tuple[FieldSpec, ...],
    data: FieldSource,
    files: FileSource | None,
) -> None:
    for spec in specs:
        if spec.embedded:
            if spec.recurses:
                nested_target = _nested_target(target, spec)
                if nested_target is not None:
                    _walk(nested_target, spec.nested, data, files)
            continue

        if not spec.assignable or spec.external == "":
            continue

        if spec.external is None:
            if spec.recurses:
                nested_target = _nested_target(target, spec)
                if nested_target is not None:
                    _walk(nested_target, spec.nested, data, files)
            continue

        if files and spec.file_shape is not None:
            if spec.file_shape is FileShape.BARE:
                raise AmbiguousMappingError(
                    f"Field '{spec.name}' is a bare UploadFile; "
                    f"declare it as 'UploadFile | None' or a list",
                    field=spec.name,
                )
            _assign_files(target, spec, files)
            continue

        values = data.lookup(spec.external)
        if not values:
            continue
        setattr(target, spec.name, _decode(spec, values))


def _nested_target(target: Any, spec: FieldSpec) -> Any:
    """Existing nested record, allocated first when absent; None if it cannot be."""
    current = getattr(target, spec.name)
    if current is not None:
        return current
    if not spec.assignable:
        return None
    try:
        current = spec.inner()
    except TypeError as exc:
        raise InvalidDestinationError(
            f"Cannot allocate {type_name(spec.inner)} for field '{spec.name}': {exc}",
        ) from exc
    setattr(target, spec.name, current)
    return current


def _assign_files(target: Any, spec: FieldSpec, files: FileSource) -> None:
    uploads = files.get(spec.external) or []
    if spec.file_shape is FileShape.OPTIONAL:
        if uploads:
            setattr(target, spec.name, uploads[0])
    elif uploads:
        setattr(target, spec.name, list(uploads))
    elif getattr(target, spec.name) is None:
        setattr(target, spec.name, [])


def _decode(spec: FieldSpec, values: list[str]) -> Any:
    if spec.params_hook:
        return decode_params(spec.inner, values, spec.external)
    if spec.param_hook:
        return coerce_value(spec.inner, values[0], spec.external)
    if spec.element is not None:
        return coerce_values(spec.element, values, spec.external)
    return coerce_value(spec.inner, values[0], spec.external)
