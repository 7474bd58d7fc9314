"""Error Handlers — global exception handlers for the User API.

Invariants:
    - Every non-2xx response has the shape {timestamp, status, error, message, path, fieldErrors?}
    - UserApiError → status/message carried by the error itself
    - RequestValidationError → non-JSON write (415), malformed body (400) or
      per-field errors (400 + fieldErrors), type errors merged with rule violations
    - Starlette HTTPException (unknown route, wrong method) → same envelope
    - Exception (catch-all) → never leaks internal details

Design Decisions:
    - Four-layer handler: domain (UserApiError), validation (Pydantic), routing
      (Starlette), catch-all (Exception)
    - Expected client errors logged at WARNING; storage and unknown failures at ERROR
      with traceback (ADR: logs carry the detail, responses never do)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_api.api.content_type import unsupported_content_type
from user_api.core.errors import (
    DatabaseError, ErrorSeverity, MalformedRequestError, UserApiError,
    UserValidationError, build_error_body,
)
from user_api.core.validate_user import validate_user
from user_api.schemas.user import UserRequest

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_user_api_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def render_user_api_error(request: Request, exc: UserApiError) -> JSONResponse:
    """Log and render a domain/infrastructure error."""
    extra = {
        "error_code": exc.code,
        "path": request.url.path,
        "method": request.method,
        "status": exc.http_status,
    }
    if exc.severity in (ErrorSeverity.INFO, ErrorSeverity.WARNING):
        logger.warning(f"{exc.code}: {exc.message}", extra=extra)
    elif isinstance(exc, DatabaseError):
        logger.error(
            f"Database {exc.operation} failed: {exc.detail}",
            extra=extra, exc_info=exc,
        )
    else:
        logger.error(f"{exc.code}: {exc.message}", extra=extra, exc_info=exc)
    return JSONResponse(
        status_code=exc.http_status, content=exc.to_response(request.url.path),
    )


def _register_user_api_error_handler(app: FastAPI) -> None:
    """Register User API domain/infrastructure error handler."""

    @app.exception_handler(UserApiError)
    async def user_api_error_handler(request: Request, exc: UserApiError):
        return render_user_api_error(request, exc)


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        unsupported = unsupported_content_type(request)
        if unsupported:
            return render_user_api_error(request, unsupported)
        return render_user_api_error(request, translate_validation_error(exc))


def _register_http_error_handler(app: FastAPI) -> None:
    """Register routing-level (404 unknown endpoint, 405 wrong method) handler."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            message = "The requested endpoint does not exist."
        elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            message = (
                f"HTTP method '{request.method}' is not supported for this endpoint."
            )
        else:
            message = str(exc.detail)
        logger.warning(
            f"HTTP {exc.status_code} on {request.method} {request.url.path}",
            extra={"path": request.url.path, "status": exc.status_code},
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=build_error_body(exc.status_code, message, request.url.path),
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            extra={"path": request.url.path, "method": request.method},
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=build_error_body(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "An unexpected error occurred. Please try again later.",
                request.url.path,
            ),
        )


def translate_validation_error(exc: RequestValidationError) -> UserApiError:
    """Map Pydantic request errors onto the User API taxonomy.

    Errors located on the body itself (unparsable JSON, missing body, body
    that is not an object) are malformed requests. Errors located on a field
    become fieldErrors, first message per field. The fields that did type-check
    still go through the rule table so a wrong type never hides a blank email
    or an out-of-range age.
    """
    field_errors: dict[str, str] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if error.get("type") == "json_invalid" or len(loc) <= 1:
            return MalformedRequestError()
        field_errors.setdefault(".".join(loc[1:]), error.get("msg", "Invalid value"))
    if isinstance(exc.body, dict):
        well_typed = {k: v for k, v in exc.body.items() if k not in field_errors}
        candidate = UserRequest.model_validate(well_typed)
        for violation in validate_user(candidate):
            field_errors.setdefault(violation.field, violation.message)
    return UserValidationError(field_errors)
