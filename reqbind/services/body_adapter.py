"""Body Deserializer Adapter — dispatches the body phase on the request media type.

Invariants:
    - A request without a body is a no-op, whatever its content type
    - Media type = text before ';', stripped and lower-cased
    - JSON → injected JSONSerializer; its BindErrors pass through, anything else → MalformedBodyError
    - XML → xml_decoder; URL-encoded / multipart → field walker with the "form" tag key
    - Any other media type → UnsupportedMediaTypeError (415)
    - Body destinations must be a dataclass record or a dict (InvalidDestinationError)
"""

import logging
from typing import Any

from reqbind.core.bind_context import BindContext
from reqbind.core.domain_types import MediaType, TagKey
from reqbind.core.errors import (
    BindError, InvalidDestinationError, MalformedBodyError, UnsupportedMediaTypeError,
)
from reqbind.core.field_walker import bind_data
from reqbind.core.type_shapes import is_record, type_name
from reqbind.core.xml_decoder import decode_xml
from reqbind.services.extractors import form_source, multipart_sources
from reqbind.services.json_serializer import JSONSerializer

logger = logging.getLogger(__name__)

_XML_TYPES = frozenset({MediaType.XML.value, MediaType.TEXT_XML.value})


def bind_body(
    destination: Any, context: BindContext, json_serializer: JSONSerializer,
) -> None:
    """Decode the request body into destination according to its media type."""
    if not context.has_body:
        return

    media_type = context.media_type
    if media_type == MediaType.JSON.value:
        _require_body_destination(destination)
        _deserialize_json(destination, context, json_serializer)
    elif media_type in _XML_TYPES:
        _require_body_destination(destination)
        decode_xml(context.body, destination)
    elif media_type == MediaType.FORM.value:
        _require_body_destination(destination)
        bind_data(destination, form_source(context), TagKey.FORM.value)
    elif media_type == MediaType.MULTIPART.value:
        _require_body_destination(destination)
        data, files = multipart_sources(context)
        bind_data(destination, data, TagKey.FORM.value, files)
    else:
        logger.warning(
            f"Unsupported media type: '{media_type}'",
            extra={"media_type": media_type},
        )
        raise UnsupportedMediaTypeError(media_type)


def _require_body_destination(destination: Any) -> None:
    if isinstance(destination, dict) or is_record(type(destination)):
        return
    raise InvalidDestinationError(
        f"Body destination must be a dataclass record or a string-keyed map, "
        f"got {type_name(type(destination))}",
    )


def _deserialize_json(
    destination: Any, context: BindContext, json_serializer: JSONSerializer,
) -> None:
    try:
        json_serializer.deserialize(context, destination)
    except BindError:
        raise
    except Exception as exc:
        raise MalformedBodyError(str(exc), "json", exc) from exc
