"""Content-Type Negotiation — write endpoints accept JSON bodies only.

Invariants:
    - A POST/PUT without Content-Type is rejected like any other non-JSON type
      (415, reported as 'null'); the body is never guessed at
    - application/json and application/*+json accepted, parameters (charset) ignored
"""

from email.message import Message

from fastapi import Request

from user_api.core.errors import UnsupportedMediaTypeError

WRITE_METHODS = {"POST", "PUT"}


def unsupported_content_type(request: Request) -> UnsupportedMediaTypeError | None:
    """Return the 415 error for a non-JSON write, or None when acceptable."""
    content_type = request.headers.get("content-type")
    if request.method not in WRITE_METHODS:
        return None
    if not content_type:
        return UnsupportedMediaTypeError(None)
    message = Message()
    message["content-type"] = content_type
    subtype = message.get_content_subtype()
    if message.get_content_maintype() == "application" and (
        subtype == "json" or subtype.endswith("+json")
    ):
        return None
    return UnsupportedMediaTypeError(content_type)


async def require_json_body(request: Request) -> None:
    """Route dependency: reject non-JSON writes before the body is validated."""
    error = unsupported_content_type(request)
    if error:
        raise error
