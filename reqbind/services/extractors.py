"""Source Extractors — normalize each request origin into FieldSource / FileSource.

Invariants:
    - Path: one value per name; a repeated name keeps the last value
    - Query / headers: repeated names keep every value in declaration order; blank values kept
    - URL-encoded form: body values first, then the URL query values, per name
      (inherited behaviour: a form bind also sees the query string)
    - Multipart: text parts → FieldSource, file parts → FileSource; URL query not merged
"""

from starlette.datastructures import QueryParams, UploadFile

from reqbind.core.bind_context import BindContext
from reqbind.core.errors import MalformedBodyError
from reqbind.core.field_source import FieldSource, FileSource


def path_source(context: BindContext) -> FieldSource:
    source = FieldSource()
    for name, value in context.path_params:
        source.replace(name, value)
    return source


def query_source(context: BindContext) -> FieldSource:
    return FieldSource(QueryParams(context.query_string).multi_items())


def header_source(context: BindContext) -> FieldSource:
    return FieldSource(context.headers)


def form_source(context: BindContext) -> FieldSource:
    """URL-encoded body values merged with the URL query values."""
    try:
        body = context.body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedBodyError(
            f"Form body is not valid UTF-8: {exc}", "form", exc,
        ) from exc
    source = FieldSource(QueryParams(body).multi_items())
    for name, value in QueryParams(context.query_string).multi_items():
        source.add(name, value)
    return source


def multipart_sources(context: BindContext) -> tuple[FieldSource, FileSource]:
    """Split the parsed multipart form into text values and uploaded files."""
    if context.form is None:
        raise MalformedBodyError(
            "Multipart form was not parsed for this request", "multipart",
        )
    data, files = FieldSource(), FileSource()
    for name, value in context.form.multi_items():
        if isinstance(value, UploadFile):
            files.add(name, value)
        else:
            data.add(name, value)
    return data, files
