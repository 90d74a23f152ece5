"""Field Tags — dataclass field helpers that attach external names per source.

Invariants:
    - Tags live in dataclasses.field(metadata=...) under TagKey values
    - A tag of "" means "never bind this field" for that source
    - embedded() marks a record-typed field whose tagged fields flatten into the parent

Design Decisions:
    - Plain dataclass metadata over a custom descriptor: destinations stay ordinary dataclasses
"""

from dataclasses import MISSING, field
from typing import Any

from reqbind.core.domain_types import TagKey

EMBEDDED_KEY = "embedded"


def tag(
    *,
    param: str | None = None,
    query: str | None = None,
    header: str | None = None,
    form: str | None = None,
    json: str | None = None,
    xml: str | None = None,
    default: Any = MISSING,
    default_factory: Any = MISSING,
) -> Any:
    """Declare a dataclass field with its external name per source."""
    names = {
        TagKey.PARAM: param,
        TagKey.QUERY: query,
        TagKey.HEADER: header,
        TagKey.FORM: form,
        TagKey.JSON: json,
        TagKey.XML: xml,
    }
    metadata = {key.value: name for key, name in names.items() if name is not None}
    return field(
        default=default, default_factory=default_factory, metadata=metadata,
    )


def embedded(*, default: Any = MISSING, default_factory: Any = MISSING) -> Any:
    """Declare an embedded record field; its tagged fields bind as if declared on the parent."""
    return field(
        default=default, default_factory=default_factory,
        metadata={EMBEDDED_KEY: True},
    )


def external_name(metadata: Any, tag_key: str) -> str | None:
    """Tag value for tag_key, or None when the field has no such tag."""
    name = metadata.get(tag_key)
    return name if isinstance(name, str) else None


def is_embedded(metadata: Any) -> bool:
    return bool(metadata.get(EMBEDDED_KEY, False))
