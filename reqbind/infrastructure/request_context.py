"""Request Context — builds a BindContext from a Starlette/FastAPI request.

Invariants:
    - The body is read once (request.body() caches it) before any form parsing
    - Multipart bodies are parsed with Starlette's form parser under the configured limits
    - Parse failures surface as MalformedBodyError(sub_kind="multipart"), never HTTPException
"""

from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import Request

from reqbind.config import Settings, get_settings
from reqbind.core.bind_context import BindContext, normalize_media_type
from reqbind.core.domain_types import MediaType
from reqbind.core.errors import MalformedBodyError


async def context_from_request(
    request: Request, settings: Settings | None = None,
) -> BindContext:
    """Snapshot path params, query string, headers, body and parsed form."""
    settings = settings or get_settings()
    body = await request.body()

    form = None
    content_type = request.headers.get("content-type", "")
    if body and normalize_media_type(content_type) == MediaType.MULTIPART.value:
        try:
            form = await request.form(
                max_files=settings.max_form_files,
                max_fields=settings.max_form_fields,
            )
        except (MultiPartException, HTTPException) as exc:
            detail = getattr(exc, "message", None) or getattr(exc, "detail", str(exc))
            raise MalformedBodyError(
                f"Malformed multipart body: {detail}", "multipart", exc,
            ) from exc

    return BindContext(
        method=request.method,
        path_params=[(k, str(v)) for k, v in request.path_params.items()],
        query_string=request.url.query,
        headers=list(request.headers.items()),
        body=body,
        form=form,
    )
