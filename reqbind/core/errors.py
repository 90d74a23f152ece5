"""Error Hierarchy — typed, categorized exceptions for every binding failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - UnsupportedMediaTypeError is the only 415; every other failure is a 400 BadRequestError
    - BadRequestError.internal preserves the underlying cause (also chained as __cause__)
    - to_response() produces the REST envelope; no internal details leaked in it

Design Decisions:
    - Single hierarchy with BindError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: phase/field/media type travel with the error, not the log line
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    MEDIA_TYPE = "media_type"
    MALFORMED_BODY = "malformed_body"
    DESTINATION = "destination"
    MAPPING = "mapping"
    CONVERSION = "conversion"
    BAD_REQUEST = "bad_request"


@dataclass
class ErrorContext:
    """Where in the bind call the failure happened."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    phase: str | None = None
    field: str | None = None
    media_type: str | None = None


class BindError(Exception):
    """Base exception for all binding errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 400,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "phase": self.context.phase,
                    "field": self.context.field,
                    "media_type": self.context.media_type,
                },
            }
        }


# ─── 415 ─────────────────────────────────────────────────────────

class UnsupportedMediaTypeError(BindError):
    """Request body content type has no registered decoder."""
    def __init__(self, media_type: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.media_type = media_type
        super().__init__(
            f"Unsupported media type: '{media_type}'",
            "UNSUPPORTED_MEDIA_TYPE", ErrorCategory.MEDIA_TYPE,
            ErrorSeverity.WARNING, ctx, 415,
        )
        self.media_type = media_type


# ─── 400 ─────────────────────────────────────────────────────────

class BadRequestError(BindError):
    """Client-class binding failure. Wraps the underlying cause."""
    def __init__(
        self,
        message: str,
        internal: BaseException | None = None,
        code: str = "BAD_REQUEST",
        category: ErrorCategory = ErrorCategory.BAD_REQUEST,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, category, ErrorSeverity.ERROR, context, 400,
        )
        self.internal = internal
        if internal is not None:
            self.__cause__ = internal


class MalformedBodyError(BadRequestError):
    """Structured body (JSON/XML/form) could not be decoded."""
    def __init__(
        self,
        message: str,
        sub_kind: str,
        internal: BaseException | None = None,
        line: int | None = None,
        offset: int | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, internal, "MALFORMED_BODY",
            ErrorCategory.MALFORMED_BODY, context,
        )
        self.sub_kind = sub_kind
        self.line = line
        self.offset = offset


class InvalidDestinationError(BadRequestError):
    """Destination root cannot receive the bound data."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, None, "INVALID_DESTINATION",
            ErrorCategory.DESTINATION, context,
        )


class AmbiguousMappingError(BadRequestError):
    """Field declaration cannot be bound unambiguously."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.field = field
        super().__init__(
            message, None, "AMBIGUOUS_MAPPING", ErrorCategory.MAPPING, ctx,
        )
        self.field = field


class ConversionFailureError(BadRequestError):
    """A source value could not be converted to the field's type."""
    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: str | None = None,
        internal: BaseException | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.field = field
        super().__init__(
            message, internal, "CONVERSION_FAILED",
            ErrorCategory.CONVERSION, ctx,
        )
        self.field = field
        self.value = value
