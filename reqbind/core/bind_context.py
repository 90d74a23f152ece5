"""Bind Context — synchronous snapshot of everything the binder reads from a request.

Invariants:
    - Built once per request; the binder never performs IO on it
    - path_params/headers keep their original order
    - form is the parsed multipart form (None when the body was not multipart)
"""

from dataclasses import dataclass, field

from starlette.datastructures import FormData


def normalize_media_type(content_type: str) -> str:
    """Media type token: text before ';', stripped and lower-cased."""
    base, _, _ = content_type.partition(";")
    return base.strip().lower()


@dataclass
class BindContext:
    """Request data consumed by DefaultBinder."""

    method: str = "GET"
    path_params: list[tuple[str, str]] = field(default_factory=list)
    query_string: str = ""
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""
    form: FormData | None = None

    @property
    def content_type(self) -> str:
        for name, value in self.headers:
            if name.lower() == "content-type":
                return value
        return ""

    @property
    def media_type(self) -> str:
        return normalize_media_type(self.content_type)

    @property
    def has_body(self) -> bool:
        return bool(self.body) or self.form is not None
