"""Error Hierarchy — typed, categorized exceptions for all User API failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error carries its HTTP status and reason phrase; the API boundary
      never decides status codes on its own
    - to_response() produces the REST envelope {timestamp, status, error, message, path}
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with UserApiError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - Not-found is NOT raised by the service layer — routes raise UserNotFoundError
      after the service returns None/False (ADR: absence is a value)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone
from http import HTTPStatus


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    MALFORMED_REQUEST = "malformed_request"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    email: str | None = None
    debug_info: dict[str, Any] | None = None


class UserApiError(Exception):
    """Base exception for all User API errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    @property
    def reason(self) -> str:
        """HTTP reason phrase, e.g. 'Conflict'."""
        return HTTPStatus(self.http_status).phrase

    def to_response(self, path: str) -> dict:
        """Convert to standardized REST error response."""
        return build_error_body(
            self.http_status, self.message, path, self.context.timestamp,
        )


def build_error_body(
    http_status: int,
    message: str,
    path: str,
    timestamp: datetime | None = None,
    field_errors: dict[str, str] | None = None,
) -> dict:
    """Render the error envelope shared by every non-2xx response."""
    body = {
        "timestamp": (timestamp or datetime.now(timezone.utc)).isoformat(),
        "status": http_status,
        "error": HTTPStatus(http_status).phrase,
        "message": message,
        "path": path,
    }
    if field_errors is not None:
        body["fieldErrors"] = field_errors
    return body


# ─── Client Errors (400-level) ──────────────────────────────────

class UserValidationError(UserApiError):
    """One or more field rules violated."""
    def __init__(
        self, field_errors: dict[str, str], context: ErrorContext | None = None,
    ):
        super().__init__(
            "Validation failed", "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field_errors = field_errors

    def to_response(self, path: str) -> dict:
        return build_error_body(
            self.http_status, self.message, path,
            self.context.timestamp, self.field_errors,
        )


class MalformedRequestError(UserApiError):
    """Request body could not be parsed as JSON."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Malformed JSON request. Please check your request body.",
            "MALFORMED_REQUEST", ErrorCategory.MALFORMED_REQUEST,
            ErrorSeverity.WARNING, context, 400,
        )


class UnsupportedMediaTypeError(UserApiError):
    """Write request sent with a non-JSON Content-Type (None: header absent)."""
    def __init__(self, content_type: str | None, context: ErrorContext | None = None):
        shown = "null" if content_type is None else content_type
        super().__init__(
            f"Content-Type '{shown}' is not supported. Use 'application/json'.",
            "UNSUPPORTED_MEDIA_TYPE", ErrorCategory.MALFORMED_REQUEST,
            ErrorSeverity.WARNING, context, 415,
        )
        self.content_type = content_type


class UserNotFoundError(UserApiError):
    """Requested user id has no stored record."""
    def __init__(self, user_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.user_id = user_id
        super().__init__(
            f"User not found with id: {user_id}",
            "USER_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx, 404,
        )
        self.user_id = user_id


class DuplicateEmailError(UserApiError):
    """Another user already owns this email."""
    def __init__(self, email: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.email = email
        super().__init__(
            f"Email already exists: {email}",
            "DUPLICATE_EMAIL", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, ctx, 409,
        )
        self.email = email


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(UserApiError):
    """Database operation failed. Detail stays in the logs."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.debug_info = {"operation": operation, "detail": message}
        super().__init__(
            "A database error occurred. Please try again later.",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.operation = operation
        self.detail = message
