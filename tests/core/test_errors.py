"""Error Hierarchy — status, reason phrase and response envelope per error type."""

from datetime import datetime

import pytest

from user_api.core.errors import (
    DatabaseError, DuplicateEmailError, MalformedRequestError,
    UnsupportedMediaTypeError, UserApiError, UserNotFoundError,
    UserValidationError, build_error_body,
)


@pytest.mark.parametrize("error, status, reason", [
    (UserValidationError({"age": "Age is required"}), 400, "Bad Request"),
    (MalformedRequestError(), 400, "Bad Request"),
    (UnsupportedMediaTypeError("text/plain"), 415, "Unsupported Media Type"),
    (UserNotFoundError("abc"), 404, "Not Found"),
    (DuplicateEmailError("a@example.com"), 409, "Conflict"),
    (DatabaseError("connection refused", "execute"), 500, "Internal Server Error"),
])
def test_error_status_and_reason(error, status, reason):
    assert isinstance(error, UserApiError)
    assert error.http_status == status
    assert error.reason == reason


def test_not_found_message_names_id():
    assert UserNotFoundError("507f1f77").message == "User not found with id: 507f1f77"


def test_duplicate_email_message_names_email():
    error = DuplicateEmailError("john@example.com")
    assert error.message == "Email already exists: john@example.com"
    assert error.context.email == "john@example.com"


def test_missing_content_type_reported_as_null():
    error = UnsupportedMediaTypeError(None)
    assert error.message == "Content-Type 'null' is not supported. Use 'application/json'."
    assert error.content_type is None


def test_to_response_envelope_shape():
    body = UserNotFoundError("abc").to_response("/api/v1/users/abc")
    assert set(body) == {"timestamp", "status", "error", "message", "path"}
    assert body["status"] == 404
    assert body["error"] == "Not Found"
    assert body["path"] == "/api/v1/users/abc"
    datetime.fromisoformat(body["timestamp"])


def test_validation_error_includes_field_errors():
    body = UserValidationError({"age": "Age must be at least 18"}).to_response("/x")
    assert body["message"] == "Validation failed"
    assert body["fieldErrors"] == {"age": "Age must be at least 18"}


def test_database_error_hides_detail():
    error = DatabaseError("password authentication failed for user 'admin'", "execute")
    body = error.to_response("/api/v1/users")
    assert body["message"] == "A database error occurred. Please try again later."
    assert "admin" not in str(body)
    assert error.context.debug_info["operation"] == "execute"


def test_build_error_body_omits_field_errors_by_default():
    assert "fieldErrors" not in build_error_body(404, "gone", "/p")
