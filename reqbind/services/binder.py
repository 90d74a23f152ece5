"""Binder — runs the path, query and body phases in fixed order.

Invariants:
    - Phase order is path ("param") → query ("query") → body; later phases overwrite earlier ones
    - The query phase only runs for bodyless methods (GET/DELETE/HEAD by default), so a
      query string never competes with a request body for the same field
    - Headers are never part of bind(); bind_headers() binds them on request
    - The first failing phase aborts the call; its BindError carries the phase name
    - No rollback: fields set before the failure keep their new values

Design Decisions:
    - JSONSerializer injected at construction: replaceable per application
    - Binder as Protocol: FastAPI dependency accepts any object with bind()
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any, Protocol

from reqbind.config import get_settings
from reqbind.core.bind_context import BindContext
from reqbind.core.domain_types import Phase, TagKey
from reqbind.core.errors import BindError
from reqbind.core.field_walker import bind_data
from reqbind.services.body_adapter import bind_body
from reqbind.services.extractors import header_source, path_source, query_source
from reqbind.services.json_serializer import DefaultJSONSerializer, JSONSerializer

logger = logging.getLogger(__name__)


class Binder(Protocol):
    """Contract for request binders — implemented by DefaultBinder."""
    def bind(self, destination: Any, context: BindContext) -> None: ...
    def bind_headers(self, destination: Any, context: BindContext) -> None: ...


class DefaultBinder:
    """Tag-driven binder over path params, query string, headers and body."""

    def __init__(
        self,
        json_serializer: JSONSerializer | None = None,
        bodyless_methods: Iterable[str] | None = None,
    ):
        self.json_serializer = json_serializer or DefaultJSONSerializer()
        if bodyless_methods is None:
            bodyless_methods = get_settings().bodyless_methods
        self.bodyless_methods = frozenset(m.upper() for m in bodyless_methods)

    def bind(self, destination: Any, context: BindContext) -> None:
        """Bind path params, then query params (bodyless methods only), then the body."""
        self.bind_path_params(destination, context)
        if context.method.upper() in self.bodyless_methods:
            self.bind_query_params(destination, context)
        else:
            logger.debug(
                f"Skipping query phase for {context.method}",
                extra={"phase": Phase.QUERY.value},
            )
        self.bind_body(destination, context)

    def bind_path_params(self, destination: Any, context: BindContext) -> None:
        self._run(Phase.PATH, lambda: bind_data(
            destination, path_source(context), TagKey.PARAM.value,
        ))

    def bind_query_params(self, destination: Any, context: BindContext) -> None:
        self._run(Phase.QUERY, lambda: bind_data(
            destination, query_source(context), TagKey.QUERY.value,
        ))

    def bind_headers(self, destination: Any, context: BindContext) -> None:
        self._run(Phase.HEADER, lambda: bind_data(
            destination, header_source(context), TagKey.HEADER.value,
        ))

    def bind_body(self, destination: Any, context: BindContext) -> None:
        self._run(Phase.BODY, lambda: bind_body(
            destination, context, self.json_serializer,
        ))

    def _run(self, phase: Phase, step: Callable[[], None]) -> None:
        logger.debug(f"Binding {phase.value} phase", extra={"phase": phase.value})
        try:
            step()
        except BindError as exc:
            exc.context.phase = phase.value
            logger.debug(
                f"Binding failed in {phase.value} phase: {exc.message}",
                extra={"phase": phase.value, "error_code": exc.code},
            )
            raise
