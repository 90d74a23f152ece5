"""Binding Dependencies — FastAPI dependencies that hand routes a bound record.

Invariants:
    - Each request gets a fresh model() instance; the model must be constructible without arguments
    - Binding failures raise BindError (handled by register_error_handlers)
    - with_headers=True additionally runs bind_headers() after bind()

Usage:
    @router.post("/items/{id}")
    async def update_item(item: ItemPatch = Bind(ItemPatch)): ...
"""

from typing import Any, TypeVar

from fastapi import Depends, Request

from reqbind.infrastructure.request_context import context_from_request
from reqbind.services.binder import Binder, DefaultBinder

T = TypeVar("T")


def Bind(model: type[T], binder: Binder | None = None, with_headers: bool = False) -> Any:
    """Depends() marker that binds the request into a new model instance."""

    async def bind_request(request: Request) -> T:
        active = binder or DefaultBinder()
        context = await context_from_request(request)
        destination = model()
        active.bind(destination, context)
        if with_headers:
            active.bind_headers(destination, context)
        return destination

    return Depends(bind_request)
